"""
Rudimentary logins: the ordered sources of the cluster credentials.

The credentials are taken from (in this order, the first success wins):

* The in-cluster service account of the pod.
* The kubeconfig file(s) from the ``KUBECONFIG`` environment variable.
* The default kubeconfig file in the user's home directory.

Authentication capabilities are limited to keep the code short & simple:
no auth-providers, no exec-plugins, no multi-step token retrieval.
Only what can be expressed with :class:`ConnectionInfo`.

Every login function returns ``None`` if its source is not applicable
(e.g. there is no service account), or raises if the source is broken.
Both cases mean falling back to the next source.
"""
import os
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

import yaml

from scalables._cogs.helpers import typedefs
from scalables._cogs.structs import credentials

LoginFn = Callable[..., Optional[credentials.ConnectionInfo]]

# As per https://kubernetes.io/docs/tasks/run-application/access-api-from-pod/
SERVICE_ACCOUNT_TOKEN_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/token'
SERVICE_ACCOUNT_NAMESPACE_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/namespace'
SERVICE_ACCOUNT_CA_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/ca.crt'


def login_with_service_account(**_: Any) -> Optional[credentials.ConnectionInfo]:
    """
    Get the credentials of the pod's service account, if running in a cluster.
    """
    host = os.environ.get('KUBERNETES_SERVICE_HOST')
    port = os.environ.get('KUBERNETES_SERVICE_PORT')
    if not host or not port:
        return None
    if not os.path.exists(SERVICE_ACCOUNT_TOKEN_PATH):
        return None

    with open(SERVICE_ACCOUNT_TOKEN_PATH, encoding='utf-8') as f:
        token = f.read().strip()
    if not token:
        raise credentials.LoginError("The service account token is empty.")

    namespace: Optional[str] = None
    if os.path.exists(SERVICE_ACCOUNT_NAMESPACE_PATH):
        with open(SERVICE_ACCOUNT_NAMESPACE_PATH, encoding='utf-8') as f:
            namespace = f.read().strip()

    netloc = f'[{host}]:{port}' if ':' in host else f'{host}:{port}'  # IPv6 or not
    return credentials.ConnectionInfo(
        server=f'https://{netloc}',
        ca_path=SERVICE_ACCOUNT_CA_PATH if os.path.exists(SERVICE_ACCOUNT_CA_PATH) else None,
        token=token,
        default_namespace=namespace or None,
    )


def login_with_kubeconfig_from_env(**_: Any) -> Optional[credentials.ConnectionInfo]:
    """
    Get the credentials from the kubeconfig file(s) listed in ``$KUBECONFIG``.
    """
    kubeconfig = os.environ.get('KUBECONFIG')
    if not kubeconfig:
        return None
    paths = [path.strip() for path in kubeconfig.split(os.pathsep)]
    paths = [os.path.expanduser(path) for path in paths if path]
    return read_kubeconfigs(paths) if paths else None


def login_with_kubeconfig_from_home(**_: Any) -> Optional[credentials.ConnectionInfo]:
    """
    Get the credentials from ``~/.kube/config`` (Windows' profile dir included).
    """
    home = os.environ.get('HOME') or os.environ.get('USERPROFILE')
    if not home:
        return None
    path = os.path.join(home, '.kube', 'config')
    if not os.path.exists(path):
        return None
    return read_kubeconfigs([path])


DEFAULT_LOGINS: Sequence[LoginFn] = (
    login_with_service_account,
    login_with_kubeconfig_from_env,
    login_with_kubeconfig_from_home,
)


def login(
        *,
        logins: Iterable[LoginFn] = DEFAULT_LOGINS,
        logger: typedefs.Logger,
) -> credentials.ConnectionInfo:
    """
    Try the login sources one by one until the first one succeeds.

    The failures are never remembered: the next call tries all of them again.
    """
    error: Optional[Exception] = None
    for fn in logins:
        name = getattr(fn, '__name__', repr(fn))
        try:
            info = fn(logger=logger)
        except (credentials.LoginError, OSError, yaml.YAMLError) as e:
            logger.debug(f"Login via {name} has failed: {e}")
            error = e
        else:
            if info is not None:
                logger.debug(f"Login via {name} has succeeded: {info.server}")
                return info
            logger.debug(f"Login via {name} is not applicable.")

    reason = str(error) if error is not None else "no credentials are found"
    raise credentials.LoginError(f"Error initializing Kubernetes config: {reason}") from error


def read_kubeconfigs(paths: Sequence[str]) -> credentials.ConnectionInfo:
    """
    Parse the kubeconfig files and extract the current context's credentials.

    If several files are given, they are merged: the first value wins.
    If the file is absent or non-deserialisable, then fail.
    Any malformed content is reported as :class:`LoginError`.
    """
    current_context: Optional[str] = None
    contexts: Dict[str, Dict[str, Any]] = {}
    clusters: Dict[str, Dict[str, Any]] = {}
    users: Dict[str, Dict[str, Any]] = {}
    origins: Dict[str, str] = {}  # cluster/user name -> the file's directory
    try:
        for path in paths:
            with open(path, encoding='utf-8') as f:
                config = yaml.safe_load(f.read()) or {}
            basedir = os.path.dirname(os.path.abspath(path))

            if current_context is None:
                current_context = config.get('current-context')
            for item in config.get('contexts') or []:
                contexts.setdefault(item['name'], item.get('context') or {})
            for item in config.get('clusters') or []:
                if item['name'] not in clusters:
                    clusters[item['name']] = item.get('cluster') or {}
                    origins[f"cluster:{item['name']}"] = basedir
            for item in config.get('users') or []:
                if item['name'] not in users:
                    users[item['name']] = item.get('user') or {}
                    origins[f"user:{item['name']}"] = basedir

        if not current_context:
            raise credentials.LoginError("Current context is not set in kubeconfigs.")
        context = contexts[current_context]
        cluster = clusters[context['cluster']]
        user = users.get(context.get('user')) or {}
        cluster_dir = origins[f"cluster:{context['cluster']}"]
        user_dir = origins.get(f"user:{context.get('user')}", cluster_dir)

        if not cluster.get('server'):
            raise credentials.LoginError(
                f"No server is defined for the context {current_context!r}.")

        provider_config = (user.get('auth-provider') or {}).get('config') or {}
        return credentials.ConnectionInfo(
            server=cluster.get('server'),
            ca_path=_resolve(cluster_dir, cluster.get('certificate-authority')),
            ca_data=cluster.get('certificate-authority-data'),
            insecure=cluster.get('insecure-skip-tls-verify'),
            certificate_path=_resolve(user_dir, user.get('client-certificate')),
            certificate_data=user.get('client-certificate-data'),
            private_key_path=_resolve(user_dir, user.get('client-key')),
            private_key_data=user.get('client-key-data'),
            username=user.get('username'),
            password=user.get('password'),
            token=user.get('token') or provider_config.get('access-token'),
            default_namespace=context.get('namespace'),
        )
    except UnicodeDecodeError as e:
        raise credentials.LoginError(f"Kubeconfig is not UTF-8 encoded: {e}") from e
    except (KeyError, TypeError, AttributeError) as e:
        raise credentials.LoginError(f"Malformed kubeconfig: {e!r}") from e


def _resolve(basedir: str, path: Optional[str]) -> Optional[str]:
    # Relative paths in kubeconfigs are relative to the kubeconfig file, not to the CWD.
    return os.path.join(basedir, os.path.expanduser(path)) if path else None
