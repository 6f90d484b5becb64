import asyncio
import base64
import contextlib
import logging
import ssl
import tempfile
from types import TracebackType
from typing import Dict, Iterable, Optional, Type, Union

import aiohttp

from scalables._cogs.clients import logins
from scalables._cogs.configs import configuration
from scalables._cogs.helpers import typedefs, versions
from scalables._cogs.structs import credentials

logger = logging.getLogger(__name__)


class APIContext:
    """
    The client handle: an aiohttp session with everything needed for the requests.

    It is constructed once per :class:`ClientProvider` and then shared
    by all the concurrent operations of that provider.
    """

    session: aiohttp.ClientSession
    server: str
    default_namespace: Optional[str]
    settings: configuration.ScalablesSettings

    def __init__(
            self,
            info: credentials.ConnectionInfo,
            *,
            settings: Optional[configuration.ScalablesSettings] = None,
    ) -> None:
        super().__init__()
        self.server = info.server
        self.default_namespace = info.default_namespace
        self.settings = settings if settings is not None else configuration.ScalablesSettings()
        auth = (aiohttp.BasicAuth(info.username, info.password)
                if info.username and info.password else None)
        headers = make_auth_headers(info)
        headers['User-Agent'] = f'scalables/{versions.version or "unknown"}'
        self.session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=0, ssl=make_ssl_context(info)),
            headers=headers,
            auth=auth,
        )

    async def close(self) -> None:
        await self.session.close()


def make_ssl_context(info: credentials.ConnectionInfo) -> ssl.SSLContext:
    """
    Build the TLS context for both the server verification & the client certificates.

    The inline certificates & keys are only loadable from files, so they are
    written to temporary files, which exist only while being loaded. No files
    are created if not needed: the filesystem can be read-only.
    """
    context = ssl.create_default_context(
        purpose=ssl.Purpose.SERVER_AUTH,
        cafile=info.ca_path,
        cadata=decode_to_pem(info.ca_data) if info.ca_data is not None else None,
    )
    with contextlib.ExitStack() as stack:
        cert_path = _materialize(stack, info.certificate_path, info.certificate_data)
        pkey_path = _materialize(stack, info.private_key_path, info.private_key_data)
        if cert_path and pkey_path:
            context.load_cert_chain(certfile=cert_path, keyfile=pkey_path)
    if info.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def make_auth_headers(info: credentials.ConnectionInfo) -> Dict[str, str]:
    # A token with no explicit scheme is a bearer token; a scheme can go with no token.
    scheme = info.scheme or ('Bearer' if info.token else None)
    value = ' '.join(part for part in [scheme, info.token] if part)
    return {'Authorization': value} if value else {}


def _materialize(
        stack: contextlib.ExitStack,
        path: Optional[str],
        data: Optional[Union[str, bytes]],
) -> Optional[str]:
    if path:
        return path
    if data:
        file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
        file.write(decode_to_pem(data).encode('ascii'))
        return file.name
    return None


class ClientProvider:
    """
    A lazily initialised and cached client handle, shared by the operations.

    The provider is created by the caller and passed explicitly to every
    operation. The first call to :meth:`acquire` logs into the cluster
    by trying the login sources in order (see :mod:`logins`); the resulting
    handle is cached for all the following calls of this provider.

    If all the login sources fail, :class:`LoginError` is raised and nothing
    is cached: the next call tries the whole chain again.

    The concurrent first-time callers are serialised with a lock,
    so that only one handle is ever constructed.
    """

    def __init__(
            self,
            *,
            settings: Optional[configuration.ScalablesSettings] = None,
            logins: Iterable[logins.LoginFn] = logins.DEFAULT_LOGINS,
            logger: typedefs.Logger = logger,
    ) -> None:
        super().__init__()
        self.settings = settings if settings is not None else configuration.ScalablesSettings()
        self._logins = list(logins)
        self._logger = logger
        self._lock = asyncio.Lock()
        self._context: Optional[APIContext] = None

    @classmethod
    def from_info(
            cls,
            info: credentials.ConnectionInfo,
            *,
            settings: Optional[configuration.ScalablesSettings] = None,
    ) -> "ClientProvider":
        """ A provider with pre-known credentials and no login discovery. """
        return cls(settings=settings, logins=[lambda **_: info])

    async def acquire(self) -> APIContext:
        if self._context is not None:  # quick-check with no locking overhead.
            return self._context
        async with self._lock:
            if self._context is None:  # securely synchronised check.
                info = logins.login(logins=self._logins, logger=self._logger)
                self._context = APIContext(info, settings=self.settings)
        return self._context

    async def close(self) -> None:
        async with self._lock:
            if self._context is not None:
                await self._context.close()
                self._context = None

    async def __aenter__(self) -> "ClientProvider":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()


def decode_to_pem(data: Union[str, bytes]) -> str:
    match data:
        case str() if data.startswith('-----BEGIN '):
            return data
        case bytes() if data.startswith(b'-----BEGIN '):
            return data.decode('ascii')
        case _:
            return base64.b64decode(data).decode('ascii')
