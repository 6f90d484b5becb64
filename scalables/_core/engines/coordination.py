"""
A caller-side coordinator of the concurrent workload operations.

Every operation runs as its own task and reports into its own one-shot
channel; the coordinator awaits the channels and merges the outcomes.
Since every operation sends exactly one outcome, awaiting never starves.

There are no internal timeouts: the callers wrap the coordinator calls
into their own deadlines (e.g. :func:`asyncio.wait_for`) if needed.
"""
import asyncio
import dataclasses
from typing import List, Optional, Tuple, cast

from scalables._cogs.aiokits import aiochannels
from scalables._cogs.clients import auth
from scalables._cogs.structs import bodies, errors, workloads
from scalables._core.workloads import guarding, listing, resolving, scaling


@dataclasses.dataclass(frozen=True)
class Inspection:
    workload: workloads.Workload
    pods: List[bodies.RawBody]
    conflict: Optional[errors.AutoscalerConflictError] = None


async def _resolve_and_check(
        kind: str,
        namespace: str,
        name: str,
        *,
        provider: auth.ClientProvider,
) -> Tuple[workloads.Workload, Optional[errors.AutoscalerConflictError]]:
    """
    Resolve the workload and check for the conflicting HPAs concurrently.

    The conflicts are returned, all other errors are raised.
    """
    workload_channel: aiochannels.Future = asyncio.get_running_loop().create_future()
    conflict_channel: aiochannels.Future = asyncio.get_running_loop().create_future()
    tasks = [
        asyncio.create_task(resolving.resolve_workload(
            workload_channel, kind, namespace, name, provider=provider)),
        asyncio.create_task(guarding.check_no_autoscaler(
            conflict_channel, kind, namespace, name, provider=provider)),
    ]
    try:
        workload_outcome = await aiochannels.receive(workload_channel)
        conflict_outcome = await aiochannels.receive(conflict_channel)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    workload = cast(workloads.Workload, workload_outcome.unwrap())
    conflict: Optional[errors.AutoscalerConflictError] = None
    match conflict_outcome.error:
        case None:
            pass
        case errors.AutoscalerConflictError() as e:
            conflict = e
        case e:
            raise e
    return workload, conflict


async def inspect(
        kind: str,
        namespace: str,
        name: str,
        *,
        provider: auth.ClientProvider,
) -> Inspection:
    """
    Gather everything known about a workload: its body, its pods, its conflicts.
    """
    workload, conflict = await _resolve_and_check(kind, namespace, name, provider=provider)
    pods_channel: aiochannels.Queue = asyncio.Queue()
    await listing.list_pods(pods_channel, workload, provider=provider)
    pods_outcome = await aiochannels.receive(pods_channel)
    pods = pods_outcome.unwrap()
    return Inspection(workload=workload, pods=list(pods or []), conflict=conflict)


async def rescale(
        kind: str,
        namespace: str,
        name: str,
        replicas: int,
        *,
        provider: auth.ClientProvider,
) -> bool:
    """
    Scale a workload unless it is already managed by an HPA.

    Returns ``True`` if the workload was updated, ``False`` if it had
    the requested replicas already. The conflicts are raised as errors.
    """
    workload, conflict = await _resolve_and_check(kind, namespace, name, provider=provider)
    if conflict is not None:
        raise conflict
    return await scaling.scale(workload, replicas, provider=provider)
