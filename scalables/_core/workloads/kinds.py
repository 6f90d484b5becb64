"""
Scalable resource kinds: a uniform capability over the heterogeneous kinds.

Every supported kind implements the same small set of capabilities:
reading an object, reading & replacing its ``scale`` subresource,
and projecting the object's body into a normalized :class:`Workload`.
The operations dispatch on the kind via :func:`lookup` only, so that
adding a new kind is a new class here, not new branches in the operations.
"""
import abc
from typing import ClassVar, Dict, Optional, Type, TypeVar

from scalables._cogs.clients import auth, fetching, scaling
from scalables._cogs.helpers import typedefs
from scalables._cogs.structs import bodies, errors, references, workloads

_R = TypeVar('_R', bound=Type['ScalableResource'])

# Lower-cased kind names to the implementations; populated by `@register`.
_registry: Dict[str, 'ScalableResource'] = {}


class ScalableResource(abc.ABC):
    kind: ClassVar[str]
    resource: ClassVar[references.Resource]

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}: {self.resource!r}>'

    async def read(
            self,
            *,
            context: auth.APIContext,
            namespace: str,
            name: str,
            logger: typedefs.Logger,
    ) -> Optional[bodies.RawBody]:
        return await fetching.read_obj(
            context=context,
            resource=self.resource,
            namespace=namespace,
            name=name,
            logger=logger,
        )

    async def read_scale(
            self,
            *,
            context: auth.APIContext,
            namespace: str,
            name: str,
            logger: typedefs.Logger,
    ) -> bodies.RawBody:
        return await scaling.read_scale(
            context=context,
            resource=self.resource,
            namespace=namespace,
            name=name,
            logger=logger,
        )

    async def replace_scale(
            self,
            *,
            context: auth.APIContext,
            namespace: str,
            name: str,
            scale: bodies.RawBody,
            logger: typedefs.Logger,
    ) -> bodies.RawBody:
        return await scaling.replace_scale(
            context=context,
            resource=self.resource,
            namespace=namespace,
            name=name,
            scale=scale,
            logger=logger,
        )

    @abc.abstractmethod
    def make_workload(self, body: bodies.RawBody) -> workloads.Workload:
        raise NotImplementedError


def register(cls: _R) -> _R:
    """ Register a scalable kind under its case-insensitive name. """
    _registry[cls.kind.lower()] = cls()
    return cls


def lookup(kind: str) -> ScalableResource:
    """
    Find the implementation of a kind (case-insensitive), or fail.

    Unsupported kinds are rejected before any contact with the cluster.
    """
    try:
        return _registry[kind.lower()]
    except KeyError:
        raise errors.UnsupportedKindError(kind) from None


@register
class StatefulSet(ScalableResource):
    kind = 'StatefulSet'
    resource = references.STATEFULSETS

    def make_workload(self, body: bodies.RawBody) -> workloads.Workload:
        return workloads.Workload(
            kind=self.kind,
            namespace=bodies.get_field(body, 'metadata', 'namespace', default=''),
            name=bodies.get_field(body, 'metadata', 'name', default=''),
            pod_selector=bodies.get_field(body, 'spec', 'selector', default={}),
            body=body,
        )
