"""Best-effort fan-out over independent remote calls."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from constants import Constants

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    """Result slot for one fanned-out task."""

    item: Any
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def gather_settled(
    func: Callable[[Any], T],
    items: Iterable[Any],
    max_workers: Optional[int] = None,
) -> List[Outcome[T]]:
    """Run ``func`` over ``items`` concurrently and wait for every task.

    A failing task never cancels the others; its exception is captured in
    its Outcome. Outcomes are returned in input order.
    """
    items = list(items)
    if not items:
        return []
    workers = max(1, min(max_workers or Constants.MAX_CONCURRENCY, len(items)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(func, item) for item in items]
        outcomes: List[Outcome[T]] = []
        for item, future in zip(items, futures):
            try:
                outcomes.append(Outcome(item=item, value=future.result()))
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.debug("Task for %r failed: %s", item, exc)
                outcomes.append(Outcome(item=item, error=exc))
    return outcomes
