"""
All the configuration of the workload operations in one place.

The settings are grouped by the concerns, similar to how the concerns are
split across the modules. The settings object is created once by the caller
(or by the CLI), then passed to the :class:`ClientProvider` and used
by all the operations performed with its client handles.

Usage::

    settings = scalables.ScalablesSettings()
    settings.networking.request_timeout = 30
    async with scalables.ClientProvider(settings=settings) as provider:
        ...
"""
import dataclasses
from typing import Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = None
    """
    A total timeout of every API request, in seconds.
    ``None`` means no internal deadline: the callers apply their own.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing a TCP connection to the API, in seconds.
    """


@dataclasses.dataclass
class AutoscalersSettings:

    version: str = 'v1'
    """
    The API version of ``autoscaling`` group used to scan for conflicting
    HorizontalPodAutoscalers. Only the ``spec.scaleTargetRef`` is read,
    which is the same in all versions.
    """


@dataclasses.dataclass
class ScalablesSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    autoscalers: AutoscalersSettings = dataclasses.field(default_factory=AutoscalersSettings)
