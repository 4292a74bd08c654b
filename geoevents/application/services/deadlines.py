"""Run blocking search and matching calls under a caller supplied deadline."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import anyio

from geoevents.domain.errors import OperationCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_deadline(
    func: Callable[..., T],
    *args: Any,
    timeout: float | None = None,
    **kwargs: Any,
) -> T:
    """Run ``func`` in a worker thread and wait at most ``timeout`` seconds.

    When the deadline expires :class:`OperationCancelled` is raised and no
    partial result is returned. The worker thread is abandoned; its session is
    closed (and rolled back) when the call eventually returns. Cancellation of
    the enclosing scope propagates unchanged.
    """

    call = functools.partial(func, *args, **kwargs)
    try:
        with anyio.fail_after(timeout):
            return await anyio.to_thread.run_sync(call, abandon_on_cancel=True)
    except TimeoutError as exc:
        name = getattr(func, "__qualname__", repr(func))
        logger.warning("%s exceeded its deadline of %ss", name, timeout)
        raise OperationCancelled(f"{name} did not finish within {timeout} seconds") from exc


__all__ = ["run_with_deadline"]
