from scalables._cogs.clients import api, auth, fetching
from scalables._cogs.helpers import typedefs
from scalables._cogs.structs import bodies, references


async def read_scale(
        *,
        context: auth.APIContext,
        resource: references.Resource,
        namespace: str,
        name: str,
        logger: typedefs.Logger,
) -> bodies.RawBody:
    """
    Read the ``scale`` subresource of an object: ``autoscaling/v1 Scale``.
    """
    scale = await fetching.read_obj(
        context=context,
        resource=resource,
        namespace=namespace,
        name=name,
        subresource='scale',
        logger=logger,
    )
    return scale if scale is not None else {}


async def replace_scale(
        *,
        context: auth.APIContext,
        resource: references.Resource,
        namespace: str,
        name: str,
        scale: bodies.RawBody,
        logger: typedefs.Logger,
) -> bodies.RawBody:
    """
    Replace the ``scale`` subresource of an object with a new one.

    The scale is sent as it was read and then modified, including its
    ``metadata.resourceVersion`` if present; the API decides on conflicts.
    """
    rsp = await api.put(
        url=resource.get_url(namespace=namespace, name=name, subresource='scale'),
        payload=scale,
        context=context,
        logger=logger,
    )
    return rsp or {}
