"""
Fan-out/join helper for independent per-exposure and per-channel work.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def run_in_thread_pool(
    func: Callable[[T], R],
    items: Iterable[T],
    parallel: bool = True,
    max_workers: Optional[int] = None,
) -> List[R]:
    """
    Apply ``func`` to every item and return the results in item order.

    Each task returns its own result; nothing is written into shared
    buffers. All tasks are joined before the list is returned, and the first
    exception raised by a task propagates to the caller.
    """

    items_list = list(items)
    if not items_list:
        return []

    if not parallel or len(items_list) == 1:
        return [func(item) for item in items_list]

    workers = min(max_workers or len(items_list), len(items_list))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(func, item) for item in items_list]
        return [future.result() for future in futures]
