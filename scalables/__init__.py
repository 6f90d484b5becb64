"""
The main module for all the exported functions & classes.

Scalable workloads: read, safety-check, and scale the K8s workloads
(StatefulSets for now) through a uniform kind-agnostic interface.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the package's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from scalables._cogs.aiokits.aiochannels import (
    Channel,
    Outcome,
    deliver,
    receive,
)
from scalables._cogs.clients.auth import (
    APIContext,
    ClientProvider,
)
from scalables._cogs.clients.errors import (
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
)
from scalables._cogs.clients.logins import (
    login_with_service_account,
    login_with_kubeconfig_from_env,
    login_with_kubeconfig_from_home,
)
from scalables._cogs.configs.configuration import (
    ScalablesSettings,
)
from scalables._cogs.helpers.versions import (
    version as __version__,
)
from scalables._cogs.structs.bodies import (
    RawBody,
    get_env_value,
)
from scalables._cogs.structs.credentials import (
    ConnectionInfo,
)
from scalables._cogs.structs.errors import (
    ScalablesError,
    LoginError,
    UnsupportedKindError,
    WorkloadNotFoundError,
    AutoscalerConflictError,
    EnvValueError,
    PaginationError,
)
from scalables._cogs.structs.selectors import (
    format_label_selector,
)
from scalables._cogs.structs.workloads import (
    Workload,
)
from scalables._core.actions.loggers import (
    LogFormat,
    configure,
)
from scalables._core.engines.coordination import (
    Inspection,
    inspect,
    rescale,
)
from scalables._core.workloads.guarding import (
    check_no_autoscaler,
    ensure_no_autoscaler,
)
from scalables._core.workloads.kinds import (
    ScalableResource,
    StatefulSet,
    register,
    lookup,
)
from scalables._core.workloads.listing import (
    fetch_pods,
    list_pods,
)
from scalables._core.workloads.resolving import (
    fetch_workload,
    resolve_workload,
)
from scalables._core.workloads.scaling import (
    scale,
)

__all__ = [
    'Channel', 'Outcome', 'deliver', 'receive',
    'APIContext', 'ClientProvider',
    'APIError', 'APIUnauthorizedError', 'APIForbiddenError',
    'APINotFoundError', 'APIConflictError',
    'login_with_service_account',
    'login_with_kubeconfig_from_env',
    'login_with_kubeconfig_from_home',
    'ScalablesSettings',
    'RawBody', 'get_env_value',
    'ConnectionInfo',
    'ScalablesError', 'LoginError', 'UnsupportedKindError',
    'WorkloadNotFoundError', 'AutoscalerConflictError', 'EnvValueError',
    'PaginationError',
    'format_label_selector',
    'Workload',
    'LogFormat', 'configure',
    'Inspection', 'inspect', 'rescale',
    'check_no_autoscaler', 'ensure_no_autoscaler',
    'ScalableResource', 'StatefulSet', 'register', 'lookup',
    'fetch_pods', 'list_pods',
    'fetch_workload', 'resolve_workload',
    'scale',
]
