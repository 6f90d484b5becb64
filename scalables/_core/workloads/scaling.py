"""
Scaling of the workloads via their ``scale`` subresource.

The scaling is a read-check-write sequence, and it is not transactional:
a concurrent change of the same workload between the read and the write
can be overwritten, unless the API detects it via the resource version
of the scale object (then, it fails with a conflict, which is not retried).
"""
from scalables._cogs.clients import auth
from scalables._cogs.structs import bodies, workloads
from scalables._core.actions import loggers
from scalables._core.workloads import kinds


async def scale(
        workload: workloads.Workload,
        replicas: int,
        *,
        provider: auth.ClientProvider,
) -> bool:
    """
    Set the desired replicas of a workload, if they are not the same already.

    Returns ``True`` if the workload was actually updated, ``False`` if not.
    Any API errors are escalated as they are.
    """
    if replicas < 0:
        raise ValueError(f"Replicas cannot be negative: {replicas!r}")

    impl = kinds.lookup(workload.kind)
    logger = loggers.WorkloadLogger(kind=impl.kind,
                                    namespace=workload.namespace,
                                    name=workload.name)
    context = await provider.acquire()
    scale = await impl.read_scale(
        context=context,
        namespace=workload.namespace,
        name=workload.name,
        logger=logger,
    )

    current = bodies.get_field(scale, 'spec', 'replicas', default=0)
    if current == replicas:
        logger.debug(f"Already at {replicas} replicas; nothing to scale.")
        return False

    spec = dict(scale.get('spec') or {}, replicas=replicas)
    await impl.replace_scale(
        context=context,
        namespace=workload.namespace,
        name=workload.name,
        scale=dict(scale, spec=spec),
        logger=logger,
    )
    logger.info(f"Scaled from {current} to {replicas} replicas.")
    return True
