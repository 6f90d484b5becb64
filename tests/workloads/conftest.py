from unittest.mock import Mock

import pytest

from scalables._cogs.clients.auth import ClientProvider


@pytest.fixture()
async def untouchable_provider():
    """ A provider that fails the test if it is ever used to log in. """
    login = Mock(side_effect=AssertionError("The cluster must not be contacted."))
    async with ClientProvider(logins=[login]) as provider:
        yield provider
    assert login.call_count == 0
