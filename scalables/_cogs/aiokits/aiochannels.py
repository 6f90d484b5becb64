"""
One-shot result channels for the concurrently running operations.

An operation is started as a task by the caller, and reports its result
into a channel owned by the caller: either an :class:`asyncio.Queue`
(to merge results from several operations) or an :class:`asyncio.Future`
(for a dedicated one-shot result). The caller waits on the channels
and joins the results.

The main guarantee: every delivery puts exactly one :class:`Outcome`
into the channel -- either with a value or with an error, never both,
never none -- so that the waiting caller is never starved. The only exception
is the cancellation of the delivering task, which is the caller's own doing.
"""
import asyncio
import dataclasses
from typing import TYPE_CHECKING, Any, Awaitable, Generic, Optional, TypeVar, Union

_T = TypeVar('_T')

# A workaround for a difference in the generics at runtime and type-checking time.
if TYPE_CHECKING:
    Queue = asyncio.Queue['Outcome[Any]']
    Future = asyncio.Future['Outcome[Any]']
else:
    Queue = asyncio.Queue
    Future = asyncio.Future

Channel = Union[Queue, Future]


@dataclasses.dataclass(frozen=True)
class Outcome(Generic[_T]):
    """
    A terminal message of an operation: a value or an error.

    A successful outcome can have ``None`` as its value, e.g. for checks.
    """
    value: Optional[_T] = None
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def unwrap(self) -> Optional[_T]:
        """ Return the value, or raise the error in the caller's stack. """
        if self.error is not None:
            raise self.error
        return self.value


def send(channel: Channel, outcome: Outcome[Any]) -> None:
    match channel:
        case asyncio.Future():
            channel.set_result(outcome)  # raises InvalidStateError on double-sending.
        case asyncio.Queue():
            channel.put_nowait(outcome)
        case _:
            raise TypeError(f"Unsupported channel type: {channel!r}")


async def deliver(channel: Channel, awaitable: Awaitable[_T]) -> None:
    """
    Await for the result and send it into the channel, either way.
    """
    outcome: Outcome[_T]
    try:
        value = await awaitable
    except Exception as e:
        outcome = Outcome(error=e)
    else:
        outcome = Outcome(value=value)
    send(channel, outcome)


async def receive(channel: Channel) -> Outcome[Any]:
    match channel:
        case asyncio.Future():
            return await channel
        case asyncio.Queue():
            return await channel.get()
        case _:
            raise TypeError(f"Unsupported channel type: {channel!r}")
