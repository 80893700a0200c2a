"""
Start policies for the task queue.

A start policy decides whether the job at the head of a TaskQueue may start
right now and, if not, when the queue should ask again. Throttling is built
by composing policies in a PolicyPipeline rather than by wrapping the
queue's own methods.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional

from ..config import TaskQueueConfig

if TYPE_CHECKING:
    from .task_queue import TaskQueue


@dataclass(frozen=True)
class StartDecision:
    """
    Outcome of a start policy check.

    Attributes:
        start: True if the head job may start now
        retry_after: Seconds until the queue should check again, or None
            to wait until a running job settles or a new job arrives
        reason: Short human readable explanation used in debug logs
    """

    start: bool
    retry_after: Optional[float] = None
    reason: str = ''

    @classmethod
    def go(cls) -> 'StartDecision':
        return cls(start=True)

    @classmethod
    def wait(cls, reason: str = '') -> 'StartDecision':
        return cls(start=False, reason=reason)

    @classmethod
    def retry_in(cls, seconds: float, reason: str = '') -> 'StartDecision':
        return cls(start=False, retry_after=seconds, reason=reason)


class StartPolicy(ABC):
    """
    Base class for start policies.

    Policies only read queue state; the queue owns every mutation
    (dequeue, counters, timer).
    """

    @abstractmethod
    def decide(self, queue: 'TaskQueue', now: float) -> StartDecision:
        """
        Decide whether the next queued job may start.

        Args:
            queue: The queue asking; exposes running_count, last_run_time
                and timer
            now: Current event loop time in seconds

        Returns:
            A StartDecision
        """
        pass


class AlwaysStart(StartPolicy):
    """Policy that never holds a job back."""

    def decide(self, queue: 'TaskQueue', now: float) -> StartDecision:
        return StartDecision.go()

    def __repr__(self) -> str:
        return "AlwaysStart()"


class IntervalGate(StartPolicy):
    """
    Policy enforcing a minimum time between successive job starts.

    The first job ever starts immediately. While a wake-up timer is already
    pending the gate stays closed so that only one timer exists at a time.
    """

    def __init__(self, interval: float):
        """
        Initialize the gate.

        Args:
            interval: Minimum seconds between two job starts
        """
        self.interval = interval

    def decide(self, queue: 'TaskQueue', now: float) -> StartDecision:
        if queue.last_run_time is None:
            return StartDecision.go()
        if queue.timer is not None:
            return StartDecision.wait('waiting for pending interval timer')

        elapsed = now - queue.last_run_time
        if elapsed >= self.interval:
            return StartDecision.go()
        return StartDecision.retry_in(
            self.interval - elapsed,
            f'task interval is less than allowed ({self.interval}s)',
        )

    def __repr__(self) -> str:
        return f"IntervalGate(interval={self.interval})"


class LimitGate(StartPolicy):
    """
    Policy bounding the number of jobs running at the same time.

    A blocked job is retried only when a running job settles or another
    job is submitted, so no timer is requested.
    """

    def __init__(self, limit: int):
        """
        Initialize the gate.

        Args:
            limit: Maximum number of concurrently running jobs
        """
        self.limit = limit

    def decide(self, queue: 'TaskQueue', now: float) -> StartDecision:
        if queue.running_count < self.limit:
            return StartDecision.go()
        return StartDecision.wait(
            f'task run count limit ({self.limit}) reached, waiting for previous tasks to finish'
        )

    def __repr__(self) -> str:
        return f"LimitGate(limit={self.limit})"


class PolicyPipeline(StartPolicy):
    """
    Policy that combines several policies in order.

    A job starts only when every policy agrees. The first policy that
    holds the job back decides when to retry.
    """

    def __init__(self, policies: Iterable[StartPolicy]):
        self.policies: List[StartPolicy] = list(policies)

    def decide(self, queue: 'TaskQueue', now: float) -> StartDecision:
        for policy in self.policies:
            decision = policy.decide(queue, now)
            if not decision.start:
                return decision
        return StartDecision.go()

    def __repr__(self) -> str:
        return f"PolicyPipeline({self.policies!r})"


def build_start_policy(config: TaskQueueConfig) -> StartPolicy:
    """
    Build the start policy described by a queue configuration.

    The interval gate, when configured, is evaluated before the
    concurrency gate.

    Args:
        config: Queue configuration

    Returns:
        AlwaysStart for an unbounded queue, otherwise a PolicyPipeline
    """
    policies: List[StartPolicy] = []
    if config.interval:
        policies.append(IntervalGate(config.interval))
    if config.limit:
        policies.append(LimitGate(config.limit))

    if not policies:
        return AlwaysStart()
    return PolicyPipeline(policies)
