# concurrency.py
# SPDX-License-Identifier: MIT
"""Bounded worker pools for per-file license matching.

Matching one file never depends on another, so a scan can spread files over
a thread or process pool. At most ``window`` tasks are in flight at a time
and results arrive in completion order. Cancellation is cooperative: the
event is checked between submissions and between completed results, never
inside a running match.
"""
from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from concurrent.futures import (
    FIRST_COMPLETED,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from dataclasses import dataclass
from typing import Literal, TypeVar

from .log import get_logger

__all__ = ["ExecutorConfig", "Executor", "Cancelled"]

log = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class Cancelled(Exception):
    """Raised by :meth:`Executor.map_unordered` when its cancel event is set."""


@dataclass(frozen=True)
class ExecutorConfig:
    """Immutable executor settings.

    Attributes:
        max_workers (int): Maximum number of worker threads or processes.
        window (int): Maximum number of in-flight tasks.
        kind (Literal["thread", "process"]): Pool implementation.
    """
    max_workers: int
    window: int
    kind: Literal["thread", "process"] = "thread"


class Executor:
    """Run tasks in a thread or process pool with bounded submission."""

    def __init__(self, cfg: ExecutorConfig) -> None:
        self.cfg = cfg

    def _make_executor(self):
        if self.cfg.max_workers < 1:
            raise ValueError("Executor requires max_workers >= 1")
        if self.cfg.kind == "process":
            return ProcessPoolExecutor(max_workers=self.cfg.max_workers)
        return ThreadPoolExecutor(max_workers=self.cfg.max_workers)

    def map_unordered(
        self,
        items: Iterable[T],
        fn: Callable[[T], R],
        on_result: Callable[[R], None],
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Apply ``fn`` to every item and hand results to ``on_result``.

        The first worker exception is re-raised after outstanding tasks are
        cancelled; no further results are delivered.

        Raises:
            Cancelled: If ``cancel`` is set before all results are delivered.
            Exception: The first exception raised by ``fn``.
        """
        window = max(self.cfg.window, self.cfg.max_workers)
        with self._make_executor() as pool:
            pending: set[Future[R]] = set()

            def _check_cancel() -> None:
                if cancel is not None and cancel.is_set():
                    for fut in pending:
                        fut.cancel()
                    raise Cancelled()

            def _drain() -> None:
                nonlocal pending
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for fut in done:
                    try:
                        result = fut.result()
                    except Exception:
                        for other in pending:
                            other.cancel()
                        raise
                    _check_cancel()
                    on_result(result)

            for item in items:
                _check_cancel()
                pending.add(pool.submit(fn, item))
                if len(pending) >= window:
                    _drain()

            while pending:
                _drain()
