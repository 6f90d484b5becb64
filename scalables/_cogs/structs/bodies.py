"""
Raw bodies of the K8s objects as they come from the API.

No views or wrappers: the workload operations only read a few fields,
so the bodies are plain JSON-decoded mappings with some typing on top.
"""
from typing import Any, Mapping, Optional

from typing_extensions import TypedDict

from scalables._cogs.structs import errors

RawBody = Mapping[str, Any]


class RawEnvVar(TypedDict, total=False):
    name: str
    value: str
    valueFrom: Mapping[str, Any]


def get_field(body: Optional[RawBody], *path: str, default: Any = None) -> Any:
    """
    Dig into the nested body by a path of keys, tolerating absent/null levels.
    """
    value: Any = body
    for key in path:
        if not isinstance(value, Mapping) or value.get(key) is None:
            return default
        value = value[key]
    return value


def get_env_value(env: RawEnvVar) -> str:
    """
    Get a literal value of a container's environment variable.

    The values from references (``valueFrom``: secrets, config maps, fields)
    are not resolved; such variables are reported as having no value.
    """
    value = env.get('value')
    if value:
        return value
    raise errors.EnvValueError(env.get('name', ''))
