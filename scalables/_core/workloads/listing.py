from typing import List

from scalables._cogs.aiokits import aiochannels
from scalables._cogs.clients import auth, fetching
from scalables._cogs.structs import bodies, references, selectors, workloads
from scalables._core.actions import loggers


async def fetch_pods(
        workload: workloads.Workload,
        *,
        provider: auth.ClientProvider,
) -> List[bodies.RawBody]:
    """
    List the pods currently matching the workload's selector.

    It is a snapshot at the moment of the call, not a live view.
    """
    logger = loggers.WorkloadLogger(kind=workload.kind,
                                    namespace=workload.namespace,
                                    name=workload.name)
    label_selector = selectors.format_label_selector(workload.pod_selector)
    context = await provider.acquire()
    pods = await fetching.list_objs(
        context=context,
        resource=references.PODS,
        namespace=workload.namespace,
        label_selector=label_selector,
        logger=logger,
    )
    logger.debug(f"Found {len(pods)} pods with the selector {label_selector!r}.")
    return pods


async def list_pods(
        channel: aiochannels.Channel,
        workload: workloads.Workload,
        *,
        provider: auth.ClientProvider,
) -> None:
    """
    List the workload's pods and send the outcome into the channel (exactly once).
    """
    await aiochannels.deliver(channel, fetch_pods(workload, provider=provider))
