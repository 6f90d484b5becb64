import dataclasses
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import aiohttp.test_utils
import aiohttp.web
import pytest

from scalables._cogs.clients.auth import ClientProvider
from scalables._cogs.configs.configuration import ScalablesSettings
from scalables._cogs.structs.credentials import ConnectionInfo
from scalables._cogs.structs.workloads import Workload


@dataclasses.dataclass(frozen=True)
class FakeRequest:
    method: str
    path: str
    query: Dict[str, str]
    headers: Dict[str, str]
    data: Any


class FakeAPI:
    """
    A fake K8s API server: the responses are pre-registered per method & path.

    Several responses for the same method & path are served in order;
    the last one is then served for all the following requests.
    Unregistered requests get HTTP 404 as a K8s Status object.
    """

    def __init__(self) -> None:
        super().__init__()
        self.url: str = ''
        self.requests: List[FakeRequest] = []
        self._responses: Dict[Tuple[str, str], List[Tuple[int, Optional[str]]]] = {}

    def add(
            self,
            method: str,
            path: str,
            *,
            json: Any = None,
            text: Optional[str] = None,
            status: int = 200,
    ) -> None:
        body = text if text is not None else None if json is None else _dumps(json)
        self._responses.setdefault((method.lower(), path), []).append((status, body))

    def add_status(self, method: str, path: str, *, status: int, message: str = 'boo!') -> None:
        payload = {'kind': 'Status', 'apiVersion': 'v1', 'code': status, 'message': message}
        self.add(method, path, json=payload, status=status)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[FakeRequest]:
        return [request for request in self.requests
                if (method is None or request.method == method.lower())
                if (path is None or request.path == path)]

    async def handle(self, request: aiohttp.web.Request) -> aiohttp.web.Response:
        text = await request.text()
        self.requests.append(FakeRequest(
            method=request.method.lower(),
            path=request.path,
            query=dict(request.query),
            headers=dict(request.headers),
            data=json.loads(text) if text else None,
        ))
        responses = self._responses.get((request.method.lower(), request.path))
        if not responses:
            payload = {'kind': 'Status', 'code': 404, 'message': 'not faked'}
            return aiohttp.web.json_response(payload, status=404)
        status, body = responses.pop(0) if len(responses) > 1 else responses[0]
        return aiohttp.web.Response(status=status, text=body or '', content_type='application/json')


def _dumps(obj: Any) -> str:
    return json.dumps(obj)


@pytest.fixture()
async def fake_api():
    api = FakeAPI()
    app = aiohttp.web.Application()
    app.router.add_route('*', '/{tail:.*}', api.handle)
    server = aiohttp.test_utils.TestServer(app)
    await server.start_server()
    api.url = str(server.make_url('')).rstrip('/')
    try:
        yield api
    finally:
        await server.close()


@pytest.fixture()
def settings():
    return ScalablesSettings()


@pytest.fixture()
def info(fake_api):
    return ConnectionInfo(server=fake_api.url, token='fake-token')


@pytest.fixture()
async def provider(info, settings):
    async with ClientProvider.from_info(info, settings=settings) as provider:
        yield provider


@pytest.fixture()
async def context(provider):
    return await provider.acquire()


@pytest.fixture()
def logger():
    return logging.getLogger('scalables.tests')


@pytest.fixture()
def workload():
    return Workload(
        kind='StatefulSet',
        namespace='ns',
        name='agents',
        pod_selector={'matchLabels': {'app': 'agent'}},
        body={
            'kind': 'StatefulSet',
            'metadata': {'namespace': 'ns', 'name': 'agents'},
            'spec': {'replicas': 3, 'selector': {'matchLabels': {'app': 'agent'}}},
            'status': {'replicas': 3, 'readyReplicas': 2},
        },
    )
