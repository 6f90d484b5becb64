import pytest

from scalables._cogs.clients.errors import APIForbiddenError
from scalables._cogs.structs.errors import AutoscalerConflictError, LoginError, \
                                           WorkloadNotFoundError
from scalables._cogs.structs.workloads import Workload
from scalables._core.engines.coordination import Inspection


@pytest.mark.parametrize('args', [['--help'], ['inspect', '--help'], ['scale', '--help']])
def test_help(invoke, args):
    result = invoke(args)
    assert result.exit_code == 0
    assert 'Usage:' in result.output


def test_version(invoke):
    result = invoke(['--version'])
    assert result.exit_code == 0
    assert 'scalables' in result.output


def test_inspect_reports_the_workload(invoke, inspect_fn, workload):
    inspect_fn.return_value = Inspection(workload=workload, pods=[
        {'metadata': {'name': 'agents-0'}, 'status': {'phase': 'Running'}},
        {'metadata': {'name': 'agents-1'}},
    ])
    result = invoke(['inspect', '-n', 'ns', 'StatefulSet', 'agents'])
    assert result.exit_code == 0, result.output
    assert inspect_fn.call_count == 1
    assert inspect_fn.call_args[0] == ('StatefulSet', 'ns', 'agents')
    assert 'provider' in inspect_fn.call_args[1]
    assert 'statefulset/agents in namespace ns' in result.output
    assert 'Replicas: 3 desired, 3 current, 2 ready' in result.output
    assert 'Conflict' not in result.output
    assert 'Pods: 2' in result.output
    assert 'agents-0  Running' in result.output
    assert 'agents-1  Unknown' in result.output


def test_inspect_reports_the_conflicts(invoke, inspect_fn, workload):
    conflict = AutoscalerConflictError('StatefulSet', 'ns', 'agents', autoscaler='hpa1')
    inspect_fn.return_value = Inspection(workload=workload, pods=[], conflict=conflict)
    result = invoke(['inspect', '-n', 'ns', 'StatefulSet', 'agents'])
    assert result.exit_code == 0, result.output
    assert 'horizontalpodautoscaler/hpa1' in result.output


def test_inspect_uses_the_default_namespace(invoke, inspect_fn, workload):
    inspect_fn.return_value = Inspection(workload=workload, pods=[])
    result = invoke(['inspect', 'StatefulSet', 'agents'])
    assert result.exit_code == 0, result.output
    assert inspect_fn.call_args[0] == ('StatefulSet', 'default', 'agents')


@pytest.mark.parametrize('updated, expected', [
    (True, 'statefulset/agents scaled to 5 replicas.'),
    (False, 'statefulset/agents already has 5 replicas.'),
])
def test_scale(invoke, rescale_fn, updated, expected):
    rescale_fn.return_value = updated
    result = invoke(['scale', '-n', 'ns', 'StatefulSet', 'agents', '5'])
    assert result.exit_code == 0, result.output
    assert rescale_fn.call_args[0] == ('StatefulSet', 'ns', 'agents', 5)
    assert expected in result.output


def test_scale_rejects_negative_replicas(invoke, rescale_fn):
    result = invoke(['scale', 'StatefulSet', 'agents', '--', '-1'])
    assert result.exit_code == 2
    assert not rescale_fn.called


def test_timeouts_go_to_the_settings(invoke, rescale_fn, mocker):
    provider_cls = mocker.patch('scalables._cogs.clients.auth.ClientProvider')
    provider_cls.return_value.__aenter__.return_value = 'provider'
    rescale_fn.return_value = True
    result = invoke(['scale', '--request-timeout=12.5', '--connect-timeout=3',
                     'StatefulSet', 'agents', '5'])
    assert result.exit_code == 0, result.output
    settings = provider_cls.call_args[1]['settings']
    assert settings.networking.request_timeout == 12.5
    assert settings.networking.connect_timeout == 3
    assert rescale_fn.call_args[1] == {'provider': 'provider'}


@pytest.mark.parametrize('error', [
    WorkloadNotFoundError('StatefulSet', 'ns', 'agents'),
    AutoscalerConflictError('StatefulSet', 'ns', 'agents', autoscaler='hpa1'),
    LoginError("Error initializing Kubernetes config: no credentials are found"),
    APIForbiddenError(None, status=403),
])
def test_errors_are_reported(invoke, rescale_fn, error):
    rescale_fn.side_effect = error
    result = invoke(['scale', 'StatefulSet', 'agents', '5'])
    assert result.exit_code == 1
    assert f'Error: {error}' in result.output
