"""
Domain errors of the workload operations.

Unlike the K8s API errors (:mod:`scalables._cogs.clients.errors`),
these are synthesized locally: they describe the situations where the API
itself is fine, but the request cannot be served as intended.
"""


class ScalablesError(Exception):
    """ A base class for all domain errors of this package. """


class LoginError(ScalablesError):
    """ Raised when no valid cluster credentials are found. """


class UnsupportedKindError(ScalablesError):
    """ Raised when a resource kind has no scalable implementation. """

    def __init__(self, kind: str) -> None:
        super().__init__(f"Resource kind {kind} is not implemented")
        self.kind = kind


class WorkloadNotFoundError(ScalablesError):
    """ Raised when the API returns nothing for a named workload, yet no error. """

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        super().__init__(f"Could not find {kind.lower()}/{name} in namespace {namespace}")
        self.kind = kind
        self.namespace = namespace
        self.name = name


class AutoscalerConflictError(ScalablesError):
    """ Raised when a HorizontalPodAutoscaler already targets the workload. """

    def __init__(self, kind: str, namespace: str, name: str, *, autoscaler: str) -> None:
        super().__init__(f"{kind.lower()}/{name} cannot have a HorizontalPodAutoscaler attached "
                         f"for the autoscaler to work")
        self.kind = kind
        self.namespace = namespace
        self.name = name
        self.autoscaler = autoscaler


class EnvValueError(ScalablesError):
    """ Raised when a container's env var has no literal value. """

    def __init__(self, name: str) -> None:
        super().__init__(f"Error getting value for environment variable {name}")
        self.name = name


class PaginationError(ScalablesError):
    """ Raised when the API repeats a continuation token while listing. """

    def __init__(self, plural: str, token: str) -> None:
        super().__init__(f"The API repeated a continuation token while listing {plural}: {token!r}")
        self.token = token
