"""
K8s API errors.

The workload operations do not leak ``aiohttp`` exceptions for the failed
API calls: the responses with HTTP statuses 4xx/5xx are converted into
:class:`APIError` or its subclasses for the statuses that the callers
usually react to (a missing workload, a concurrently modified scale, etc).
All other statuses are distinguishable by the error's ``status`` field.

The connectivity errors (DNS, TCP, SSL, timeouts) are not API errors and
are escalated from ``aiohttp`` as they are.
"""
import collections.abc
import json
from typing import Any, ClassVar, Collection, Dict, Optional, Type

import aiohttp
from typing_extensions import TypedDict


class RawStatusCause(TypedDict, total=False):
    field: str
    reason: str
    message: str


class RawStatusDetails(TypedDict, total=False):
    name: str
    kind: str
    group: str
    causes: Collection[RawStatusCause]


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.28/#status-v1-meta
class RawStatus(TypedDict, total=False):
    kind: str  # always "Status"
    apiVersion: str
    code: int
    status: str  # "Success" or "Failure"
    reason: str
    message: str
    details: RawStatusDetails


# HTTP statuses to the specialised error classes; populated on subclassing.
_classes: Dict[int, Type['APIError']] = {}


class APIError(Exception):
    """
    A failed K8s API call, with the API's own explanation if provided.

    The message is taken from the ``Status`` object of the response.
    The response bodies of other kinds are never exposed, since they can
    contain sensitive data (and usually it is an HTML page of a proxy).
    """
    http_status: ClassVar[Optional[int]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.http_status is not None:
            _classes[cls.http_status] = cls

    def __init__(self, payload: Optional[RawStatus], *, status: int) -> None:
        self._payload: RawStatus = payload or {}
        self._status = status
        super().__init__(self._payload.get('message') or f"K8s API failed with HTTP {status}",
                         payload)

    def __str__(self) -> str:
        return str(self.args[0])

    @property
    def status(self) -> int:
        return self._status

    @property
    def code(self) -> Optional[int]:
        return self._payload.get('code')

    @property
    def reason(self) -> Optional[str]:
        return self._payload.get('reason')

    @property
    def message(self) -> Optional[str]:
        return self._payload.get('message')

    @property
    def details(self) -> Optional[RawStatusDetails]:
        return self._payload.get('details')

    @classmethod
    def for_status(cls, status: int) -> Type['APIError']:
        return _classes.get(status, cls)


class APIUnauthorizedError(APIError):
    http_status = 401


class APIForbiddenError(APIError):
    http_status = 403


class APINotFoundError(APIError):
    http_status = 404


class APIConflictError(APIError):
    http_status = 409


async def check_response(response: aiohttp.ClientResponse) -> None:
    """
    Raise a specialised error for a failed response, chaining aiohttp's one.
    """
    if response.status < 400:
        return

    # The body must be read before raise_for_status(), which releases the connection.
    payload: Optional[RawStatus]
    try:
        payload = await response.json()
    except (json.JSONDecodeError, aiohttp.ContentTypeError, aiohttp.ClientConnectionError):
        payload = None
    if not isinstance(payload, collections.abc.Mapping) or payload.get('kind') != 'Status':
        payload = None

    cls = APIError.for_status(response.status)
    try:
        response.raise_for_status()
    except aiohttp.ClientResponseError as e:
        raise cls(payload, status=response.status) from e


async def parse_response(response: aiohttp.ClientResponse) -> Any:
    """
    Check the response for errors, and either raise or return the parsed data.

    An empty body (or a literal ``null``) is returned as ``None``.
    """
    await check_response(response)
    text = await response.text()
    return json.loads(text) if text.strip() else None
