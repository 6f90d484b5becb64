from scalables._cogs.aiokits import aiochannels
from scalables._cogs.clients import auth
from scalables._cogs.structs import errors, workloads
from scalables._core.actions import loggers
from scalables._core.workloads import kinds


async def fetch_workload(
        kind: str,
        namespace: str,
        name: str,
        *,
        provider: auth.ClientProvider,
) -> workloads.Workload:
    """
    Fetch a workload of any supported kind and normalize it.

    The API errors are escalated as they are (HTTP 404 included).
    An empty response with no error is reported as a missing workload.
    """
    impl = kinds.lookup(kind)
    logger = loggers.WorkloadLogger(kind=impl.kind, namespace=namespace, name=name)
    context = await provider.acquire()
    body = await impl.read(context=context, namespace=namespace, name=name, logger=logger)
    if not body:
        raise errors.WorkloadNotFoundError(impl.kind, namespace, name)
    workload = impl.make_workload(body)
    logger.debug(f"Resolved with {workload.desired_replicas} desired replicas.")
    return workload


async def resolve_workload(
        channel: aiochannels.Channel,
        kind: str,
        namespace: str,
        name: str,
        *,
        provider: auth.ClientProvider,
) -> None:
    """
    Resolve a workload and send the outcome into the channel (exactly once).
    """
    await aiochannels.deliver(channel, fetch_workload(kind, namespace, name, provider=provider))
