"""Throttled FIFO queue of asynchronous jobs.

Jobs are zero-argument callables returning an awaitable (or a plain value).
Each submission returns an ``asyncio.Future`` that settles with exactly the
job's own outcome. Whether the head of the queue may start is decided by a
composed StartPolicy: an optional minimum interval between starts and an
optional concurrency limit.

All bookkeeping happens on the event loop thread; a queue instance must
not be shared between loops or threads.
"""

import asyncio
import inspect
import logging
import threading
from collections import deque
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional, Set, Union

from ..config import TaskQueueConfig, ensure_valid
from .start_policies import StartPolicy, build_start_policy

logger = logging.getLogger(__name__)

Job = Callable[[], Union[Awaitable[Any], Any]]


class TaskTagCounter:
    """Monotonic source of default task tags (``task-0``, ``task-1``, ...).

    One instance is owned by :class:`TaskQueue` and shared by every queue
    in the process, so default tags are unique per process.
    """

    def __init__(self, prefix: str = 'task-'):
        self.prefix = prefix
        self._value = 0
        self._lock = threading.Lock()

    def next_tag(self) -> str:
        with self._lock:
            tag = f"{self.prefix}{self._value}"
            self._value += 1
        return tag

    def reset(self, value: int = 0) -> None:
        """Restart numbering, mainly for tests."""
        with self._lock:
            self._value = value


class TaskState(Enum):
    """Lifecycle of a queued job."""
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Task:
    """A deferred job paired with its tag and result future."""

    def __init__(self, job: Job, tag: str, loop: asyncio.AbstractEventLoop):
        """Initialize a queued task.

        Args:
            job: Zero-argument callable producing the job's result
            tag: Human readable name used in logs
            loop: Loop that owns the result future
        """
        self.job = job
        self.tag = tag
        self.future: asyncio.Future = loop.create_future()
        self.state = TaskState.QUEUED

    async def run(self) -> None:
        """Execute the job once and settle the future with its outcome.

        Job exceptions are delivered through the future only; this
        coroutine itself does not raise them.
        """
        self.state = TaskState.RUNNING
        try:
            result = self.job()
            if inspect.isawaitable(result):
                result = await result
        except asyncio.CancelledError:
            self.state = TaskState.FAILED
            if not self.future.done():
                self.future.cancel()
            raise
        except Exception as e:
            self.state = TaskState.FAILED
            if not self.future.done():
                self.future.set_exception(e)
        else:
            self.state = TaskState.COMPLETED
            if not self.future.done():
                self.future.set_result(result)

    def __repr__(self) -> str:
        return f"Task({self.tag!r}, state={self.state.value})"


class TaskQueue:
    """FIFO queue running async jobs under optional throttling.

    Example:
        queue = TaskQueue(limit=2, interval=0.1)
        results = await asyncio.gather(*(
            queue.add_task(lambda url=url: fetch(url)) for url in urls
        ))
    """

    tag_counter = TaskTagCounter()

    def __init__(
        self,
        config: Optional[TaskQueueConfig] = None,
        *,
        limit: Optional[int] = None,
        interval: Optional[float] = None,
        debug: bool = False,
        policy: Optional[StartPolicy] = None
    ):
        """Initialize the queue.

        Args:
            config: Queue configuration; built from the keyword arguments
                when omitted. Cannot be combined with them.
            limit: Maximum number of jobs running at the same time
            interval: Minimum seconds between successive job starts
            debug: Log queue lifecycle events at DEBUG level
            policy: Custom start policy replacing the one built from config

        Raises:
            TypeError: If both config and limit, interval or debug are given
            ValueError: If the configuration is invalid
        """
        if config is not None and (limit is not None or interval is not None or debug):
            raise TypeError("Pass either config or limit/interval/debug, not both")
        if config is None:
            config = TaskQueueConfig(limit=limit, interval=interval, debug=debug)
        self.config = ensure_valid(config)
        self.policy = policy or build_start_policy(config)

        self.running_count = 0
        self.last_run_time: Optional[float] = None
        self.timer: Optional[asyncio.TimerHandle] = None
        self.task_queue: Deque[Task] = deque()
        # Strong references so running jobs are not garbage collected
        self._runners: Set[asyncio.Task] = set()

    @property
    def limit(self) -> Optional[int]:
        return self.config.limit

    @property
    def interval(self) -> Optional[float]:
        return self.config.interval

    @property
    def debug(self) -> bool:
        return self.config.debug

    @property
    def queue_size(self) -> int:
        return len(self.task_queue)

    @property
    def pending_tasks(self) -> List[str]:
        """Tags of queued, not yet started tasks in start order."""
        return [task.tag for task in self.task_queue]

    def add_task(self, job: Job, tag: Optional[str] = None) -> asyncio.Future:
        """Submit a job to the tail of the queue.

        Must be called from a coroutine or callback running on the loop.

        Args:
            job: Zero-argument callable returning an awaitable or a value
            tag: Name used in logs (defaults to ``task-<n>``)

        Returns:
            Future resolved or rejected with the job's outcome
        """
        loop = asyncio.get_running_loop()
        task = Task(job, tag if tag is not None else self.tag_counter.next_tag(), loop)
        self.task_queue.append(task)
        self._log("submitted task to queue, task: %s, queue size: %d, running tasks: %d",
                  task.tag, len(self.task_queue), self.running_count)
        self._execute_next_task()
        return task.future

    def clear_queue(self) -> None:
        """Drop every queued job and cancel the pending wake-up timer.

        Futures of dropped jobs are left pending forever. Running jobs are
        not affected.
        """
        self.task_queue.clear()
        self._cancel_timer()

    def get_stats(self) -> Dict[str, Any]:
        """Get queue statistics.

        Returns:
            Dictionary of limits, queue size and running count
        """
        return {
            'limit': self.limit,
            'interval': self.interval,
            'queue_size': len(self.task_queue),
            'running_tasks': self.running_count,
            'timer_pending': self.timer is not None,
        }

    def _execute_next_task(self) -> None:
        """Start queued jobs for as long as the start policy allows."""
        loop = asyncio.get_running_loop()
        while self.task_queue:
            decision = self.policy.decide(self, loop.time())
            if decision.start:
                self._run_task(loop)
                continue

            if decision.retry_after is not None:
                self.timer = loop.call_later(decision.retry_after, self._on_timer)
                self._log("%s, queue size: %d, running tasks: %d, waiting for %.3fs",
                          decision.reason, len(self.task_queue), self.running_count,
                          decision.retry_after)
            elif decision.reason:
                self._log("%s, queue size: %d, running tasks: %d",
                          decision.reason, len(self.task_queue), self.running_count)
            return

    def _run_task(self, loop: asyncio.AbstractEventLoop) -> None:
        task = self.task_queue.popleft()
        self._cancel_timer()
        self.running_count += 1
        self.last_run_time = loop.time()
        self._log("running task: %s, queue size: %d, running tasks: %d",
                  task.tag, len(self.task_queue), self.running_count)

        task.state = TaskState.RUNNING
        runner = loop.create_task(self._run_and_settle(task), name=task.tag)
        self._runners.add(runner)
        runner.add_done_callback(self._runners.discard)

    async def _run_and_settle(self, task: Task) -> None:
        try:
            await task.run()
        finally:
            self.running_count -= 1
            self._log("finished running task: %s, queue size: %d, running tasks: %d",
                      task.tag, len(self.task_queue), self.running_count)
        self._execute_next_task()

    def _on_timer(self) -> None:
        self.timer = None
        self._execute_next_task()

    def _cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def _log(self, message: str, *args: Any) -> None:
        if self.config.debug:
            logger.debug("[TaskQueue] " + message, *args)

    def __repr__(self) -> str:
        return (f"TaskQueue(limit={self.limit}, interval={self.interval}, "
                f"queue_size={len(self.task_queue)}, running={self.running_count})")
