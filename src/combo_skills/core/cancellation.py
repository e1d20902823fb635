"""Cancellation and timeout handling for collaborator calls.

Callers signal cancellation with an ``asyncio.Event``. Only the external
collaborator calls (registry lookups, synthesis) wait on it; graph and
modifier validation never suspend.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from combo_skills.core.exceptions import CompilationCancelled

T = TypeVar("T")


def check_cancelled(cancel_event: Optional[asyncio.Event], what: str = "operation") -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise CompilationCancelled(f"{what} cancelled")


async def run_cancellable(
    awaitable: Awaitable[T],
    cancel_event: Optional[asyncio.Event] = None,
    *,
    timeout: Optional[float] = None,
    what: str = "operation",
) -> T:
    """Await ``awaitable`` until it finishes, times out, or is cancelled.

    Raises:
        CompilationCancelled: If ``cancel_event`` is (or becomes) set first.
        TimeoutError: If ``timeout`` seconds elapse first.
    """
    task = asyncio.ensure_future(awaitable)
    if cancel_event is None:
        try:
            return await asyncio.wait_for(task, timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise TimeoutError(f"{what} timed out after {timeout}s") from exc

    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait(
            {task, waiter},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if task in done:
        return task.result()

    task.cancel()
    if waiter in done:
        raise CompilationCancelled(f"{what} cancelled")
    raise TimeoutError(f"{what} timed out after {timeout}s")


__all__ = ["check_cancelled", "run_cancellable"]
