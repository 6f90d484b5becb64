import logging
import os
from unittest.mock import Mock

import pytest
import yaml

from scalables._cogs.clients.logins import DEFAULT_LOGINS, login, login_with_kubeconfig_from_env, \
                                           login_with_kubeconfig_from_home, \
                                           login_with_service_account, read_kubeconfigs
from scalables._cogs.structs.credentials import ConnectionInfo, LoginError

logger = logging.getLogger(__name__)


def test_default_order():
    assert list(DEFAULT_LOGINS) == [
        login_with_service_account,
        login_with_kubeconfig_from_env,
        login_with_kubeconfig_from_home,
    ]


def test_first_success_wins():
    info1 = ConnectionInfo(server='https://one')
    info2 = ConnectionInfo(server='https://two')
    fn1 = Mock(return_value=info1)
    fn2 = Mock(return_value=info2)
    info = login(logins=[fn1, fn2], logger=logger)
    assert info is info1
    assert fn1.call_count == 1
    assert fn2.call_count == 0


@pytest.mark.parametrize('exc', [
    LoginError('boo!'),
    FileNotFoundError('boo!'),
    yaml.YAMLError('boo!'),
], ids=['login-error', 'os-error', 'yaml-error'])
def test_failed_sources_fall_through(exc):
    info2 = ConnectionInfo(server='https://two')
    fn1 = Mock(side_effect=exc)
    fn2 = Mock(return_value=info2)
    info = login(logins=[fn1, fn2], logger=logger)
    assert info is info2
    assert fn1.call_count == 1
    assert fn2.call_count == 1


def test_inapplicable_sources_fall_through():
    info2 = ConnectionInfo(server='https://two')
    fn1 = Mock(return_value=None)
    fn2 = Mock(return_value=info2)
    info = login(logins=[fn1, fn2], logger=logger)
    assert info is info2


def test_all_failed_with_the_last_cause():
    error = FileNotFoundError('no such file')
    fn1 = Mock(side_effect=LoginError('boo!'))
    fn2 = Mock(side_effect=error)
    fn3 = Mock(return_value=None)
    with pytest.raises(LoginError) as err:
        login(logins=[fn1, fn2, fn3], logger=logger)
    assert str(err.value) == "Error initializing Kubernetes config: no such file"
    assert err.value.__cause__ is error


def test_nothing_applicable():
    with pytest.raises(LoginError) as err:
        login(logins=[Mock(return_value=None)], logger=logger)
    assert str(err.value) == "Error initializing Kubernetes config: no credentials are found"


def test_unexpected_errors_are_escalated():
    fn1 = Mock(side_effect=ZeroDivisionError('boo!'))
    fn2 = Mock(return_value=ConnectionInfo(server='https://two'))
    with pytest.raises(ZeroDivisionError):
        login(logins=[fn1, fn2], logger=logger)
    assert fn2.call_count == 0


HOME_CONFIG = '''
current-context: ctx
contexts:
  - name: ctx
    context: {cluster: home-cluster, user: home-user}
clusters:
  - name: home-cluster
    cluster: {server: https://home}
users:
  - name: home-user
    user: {token: home-token}
'''

NULL_PROVIDER_CONFIG = '''
current-context: ctx
contexts:
  - name: ctx
    context: {cluster: env-cluster, user: env-user}
clusters:
  - name: env-cluster
    cluster: {server: https://env}
users:
  - name: env-user
    user: {auth-provider: {name: oidc, config: null}}
'''

SCALAR_CLUSTER_CONFIG = '''
current-context: ctx
contexts:
  - name: ctx
    context: {cluster: env-cluster}
clusters:
  - name: env-cluster
    cluster: just-a-string
'''


@pytest.mark.parametrize('content', [
    b'\xff\xfe\x00broken',
    SCALAR_CLUSTER_CONFIG.encode('utf-8'),
], ids=['non-utf8', 'scalar-cluster'])
def test_broken_env_kubeconfig_falls_through_to_home(mocker, tmp_path, content):
    broken = tmp_path / 'broken-config'
    broken.write_bytes(content)
    home = tmp_path / 'home'
    (home / '.kube').mkdir(parents=True)
    (home / '.kube' / 'config').write_text(HOME_CONFIG)
    mocker.patch.dict(os.environ, {'KUBECONFIG': str(broken), 'HOME': str(home)})

    info = login(logger=logger)
    assert info.server == 'https://home'
    assert info.token == 'home-token'


@pytest.mark.parametrize('content', [
    b'\xff\xfe\x00broken',
    SCALAR_CLUSTER_CONFIG.encode('utf-8'),
], ids=['non-utf8', 'scalar-cluster'])
def test_broken_kubeconfig_is_a_login_error(tmp_path, content):
    broken = tmp_path / 'broken-config'
    broken.write_bytes(content)
    with pytest.raises(LoginError):
        read_kubeconfigs([str(broken)])


def test_null_auth_provider_config_is_tolerated(tmp_path):
    path = tmp_path / 'config'
    path.write_text(NULL_PROVIDER_CONFIG)
    info = read_kubeconfigs([str(path)])
    assert info.server == 'https://env'
    assert info.token is None
