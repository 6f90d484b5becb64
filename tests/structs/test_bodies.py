import pytest

from scalables._cogs.structs.bodies import get_env_value, get_field
from scalables._cogs.structs.errors import EnvValueError, ScalablesError


@pytest.mark.parametrize('body, path, expected', [
    ({'spec': {'replicas': 3}}, ('spec', 'replicas'), 3),
    ({'spec': {'replicas': 0}}, ('spec', 'replicas'), 0),
    ({'spec': {}}, ('spec', 'replicas'), 'default'),
    ({'spec': None}, ('spec', 'replicas'), 'default'),
    ({'spec': 'garbage'}, ('spec', 'replicas'), 'default'),
    ({}, ('spec', 'replicas'), 'default'),
    (None, ('spec', 'replicas'), 'default'),
])
def test_get_field(body, path, expected):
    assert get_field(body, *path, default='default') == expected


def test_env_value_is_returned():
    assert get_env_value({'name': 'MODE', 'value': 'fast'}) == 'fast'


@pytest.mark.parametrize('env', [
    {'name': 'MODE'},
    {'name': 'MODE', 'value': ''},
    {'name': 'MODE', 'valueFrom': {'secretKeyRef': {'name': 's', 'key': 'k'}}},
])
def test_env_without_literal_values_fail(env):
    with pytest.raises(EnvValueError) as err:
        get_env_value(env)
    assert isinstance(err.value, ScalablesError)
    assert err.value.name == 'MODE'
    assert str(err.value) == "Error getting value for environment variable MODE"
