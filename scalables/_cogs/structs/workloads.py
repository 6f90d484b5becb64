"""
A normalized view of the scalable workloads, regardless of their kinds.
"""
import dataclasses
from typing import Any, Dict, Mapping

from scalables._cogs.structs import bodies


@dataclasses.dataclass(frozen=True)
class Workload:
    """
    A scalable workload as fetched from the cluster at some moment.

    It is constructed anew on every resolution and is never cached.
    The original body is kept by reference for the kind-specific fields.
    """
    kind: str  # canonical, e.g. "StatefulSet"
    namespace: str
    name: str
    pod_selector: Mapping[str, Any]
    body: bodies.RawBody = dataclasses.field(default_factory=dict, repr=False, compare=False)

    @property
    def desired_replicas(self) -> int:
        # The API defaults the absent replicas to 1 on creation.
        return int(bodies.get_field(self.body, 'spec', 'replicas', default=1))

    @property
    def current_replicas(self) -> int:
        return int(bodies.get_field(self.body, 'status', 'replicas', default=0))

    @property
    def ready_replicas(self) -> int:
        return int(bodies.get_field(self.body, 'status', 'readyReplicas', default=0))

    @property
    def ref(self) -> Dict[str, str]:
        """ An object reference as used in the logs. """
        return dict(kind=self.kind, namespace=self.namespace, name=self.name)
