from typing import List, Optional, Set

from scalables._cogs.clients import api, auth
from scalables._cogs.helpers import typedefs
from scalables._cogs.structs import bodies, errors, references


async def read_obj(
        *,
        context: auth.APIContext,
        resource: references.Resource,
        namespace: Optional[str],
        name: str,
        subresource: Optional[str] = None,
        logger: typedefs.Logger,
) -> Optional[bodies.RawBody]:
    """
    Read a single object (or its subresource) by its name.

    Returns ``None`` if the API responds with an empty body, and leaves it
    to the caller to interpret. HTTP 404 is an API error and is raised.
    """
    rsp = await api.get(
        url=resource.get_url(namespace=namespace, name=name, subresource=subresource),
        context=context,
        logger=logger,
    )
    return rsp or None


async def list_objs(
        *,
        context: auth.APIContext,
        resource: references.Resource,
        namespace: Optional[str],
        label_selector: Optional[str] = None,
        logger: typedefs.Logger,
) -> List[bodies.RawBody]:
    """
    List the objects of specific resource type, optionally filtered by labels.

    The list is a point-in-time snapshot; continuation tokens are followed
    if the API paginates the list. A repeated token is an error, not an endless loop.
    """
    items: List[bodies.RawBody] = []
    seen_tokens: Set[str] = set()
    params = {'labelSelector': label_selector} if label_selector else {}
    while True:
        rsp = await api.get(
            url=resource.get_url(namespace=namespace, params=params),
            context=context,
            logger=logger,
        )
        rsp = rsp or {}
        for item in rsp.get('items') or []:
            if 'kind' in rsp:
                item.setdefault('kind', rsp['kind'].removesuffix('List'))
            if 'apiVersion' in rsp:
                item.setdefault('apiVersion', rsp['apiVersion'])
            items.append(item)

        continue_token = bodies.get_field(rsp, 'metadata', 'continue')
        if not continue_token:
            return items
        if continue_token in seen_tokens:
            raise errors.PaginationError(resource.plural, continue_token)
        seen_tokens.add(continue_token)
        params = dict(params, **{'continue': continue_token})
