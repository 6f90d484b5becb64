import os

import pytest

from scalables._cogs.clients import logins


@pytest.fixture(autouse=True)
def clean_env(mocker, tmp_path):
    """ Never touch the developer's real credentials in the tests. """
    mocker.patch.dict(os.environ, {}, clear=True)


@pytest.fixture()
def service_account(mocker, tmp_path):
    sadir = tmp_path / 'serviceaccount'
    sadir.mkdir()
    mocker.patch.object(logins, 'SERVICE_ACCOUNT_TOKEN_PATH', str(sadir / 'token'))
    mocker.patch.object(logins, 'SERVICE_ACCOUNT_NAMESPACE_PATH', str(sadir / 'namespace'))
    mocker.patch.object(logins, 'SERVICE_ACCOUNT_CA_PATH', str(sadir / 'ca.crt'))
    return sadir
