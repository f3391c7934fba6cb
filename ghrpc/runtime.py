"""Thread pool that runs GitHub calls for synchronous RPC entry points.

Each dispatcher call submits one task and blocks on that task's future only;
concurrent callers therefore run concurrently on the pool.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, TypeVar

LOG = logging.getLogger("ghrpc.runtime")

T = TypeVar("T")


class TaskRunner:
    """Process-wide executor for network operations."""

    def __init__(self, max_workers: int = 8, thread_name_prefix: str = "ghrpc-io") -> None:
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=thread_name_prefix)

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
        return self._executor.submit(fn, *args, **kwargs)

    def run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run fn on the pool and wait for its result.

        Exceptions raised by fn are re-raised unchanged in the caller.
        """
        return self.submit(fn, *args, **kwargs).result()

    def shutdown(self, wait: bool = True) -> None:
        LOG.debug("Shutting down task runner (wait=%s)", wait)
        self._executor.shutdown(wait=wait)
