"""
Protection from fighting with the HorizontalPodAutoscalers.

If an HPA already targets the same workload, both autoscalers would
override each other's decisions. Such workloads are not served at all.
"""
from scalables._cogs.aiokits import aiochannels
from scalables._cogs.clients import auth, fetching
from scalables._cogs.structs import bodies, errors, references
from scalables._core.actions import loggers


async def ensure_no_autoscaler(
        kind: str,
        namespace: str,
        name: str,
        *,
        provider: auth.ClientProvider,
) -> None:
    """
    Raise if any HPA in the namespace targets the same kind & name.

    The kinds are compared case-insensitively, the names exactly.
    The first match stops the scanning.
    """
    logger = loggers.WorkloadLogger(kind=kind, namespace=namespace, name=name)
    context = await provider.acquire()
    hpas = await fetching.list_objs(
        context=context,
        resource=references.autoscalers(context.settings.autoscalers.version),
        namespace=namespace,
        logger=logger,
    )
    for hpa in hpas:
        target_kind = bodies.get_field(hpa, 'spec', 'scaleTargetRef', 'kind', default='')
        target_name = bodies.get_field(hpa, 'spec', 'scaleTargetRef', 'name', default='')
        if target_kind.lower() == kind.lower() and target_name == name:
            autoscaler = bodies.get_field(hpa, 'metadata', 'name', default='')
            logger.debug(f"Conflicting HorizontalPodAutoscaler found: {autoscaler!r}")
            raise errors.AutoscalerConflictError(kind, namespace, name, autoscaler=autoscaler)
    logger.debug(f"No conflicting HorizontalPodAutoscalers among {len(hpas)} in the namespace.")


async def check_no_autoscaler(
        channel: aiochannels.Channel,
        kind: str,
        namespace: str,
        name: str,
        *,
        provider: auth.ClientProvider,
) -> None:
    """
    Check for the conflicting HPAs and send the outcome into the channel (exactly once).

    A successful outcome has no value; a conflict is sent as an error.
    """
    coro = ensure_no_autoscaler(kind, namespace, name, provider=provider)
    await aiochannels.deliver(channel, coro)
