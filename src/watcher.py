"""
Blocking state watcher for asynchronous remote operations.

A watcher repeatedly calls a refresh function until the resource reaches a
target state, reports a state that is neither pending nor target, or the
timeout budget is spent.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Tuple

from models import StateClass, WatchConfig

logger = logging.getLogger(__name__)

RefreshFunc = Callable[[], Tuple[Any, str]]


class WatchOutcome(Enum):
    CONVERGED = "converged"
    TIMED_OUT = "timed_out"
    UNEXPECTED_STATE = "unexpected_state"
    CANCELLED = "cancelled"


@dataclass
class WatchResult:
    """Final outcome of a watch."""

    outcome: WatchOutcome
    resource: Any = None
    state: Optional[str] = None
    refresh_count: int = 0
    elapsed: float = 0.0

    @property
    def converged(self) -> bool:
        return self.outcome is WatchOutcome.CONVERGED


def _state_names(states: Iterable) -> frozenset:
    return frozenset(s.value if isinstance(s, Enum) else s for s in states)


class StateClassifier:
    """Partitions observed states into pending, target and unclassified."""

    def __init__(self, pending: Iterable[str], target: Iterable[str]):
        self.pending = _state_names(pending)
        self.target = _state_names(target)

        overlap = self.pending & self.target
        if overlap:
            raise ValueError(
                f"States cannot be both pending and target: {sorted(overlap)}"
            )

    def classify(self, state: str) -> StateClass:
        if state in self.target:
            return StateClass.TARGET
        if state in self.pending:
            return StateClass.PENDING
        return StateClass.UNCLASSIFIED


class StateWatcher:
    """Polls a refresh function until the resource converges."""

    def __init__(
        self,
        refresh: RefreshFunc,
        classifier: StateClassifier,
        config: WatchConfig,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], None]] = None,
        cancel_event: Optional[threading.Event] = None,
        name: str = "resource",
    ):
        """
        Initialize the watcher.

        Args:
            refresh: Zero-argument callable returning (resource, state)
            classifier: Classifies observed states
            config: Initial delay, minimum poll interval and timeout
            clock: Monotonic clock in seconds
            sleep: Sleep function; defaults to a cancellable wait
            cancel_event: Set to abort the watch at the next suspension point
            name: Resource name used in log messages
        """
        self.refresh = refresh
        self.classifier = classifier
        self.config = config
        self.clock = clock
        self.cancel_event = cancel_event
        self.name = name
        self._sleep = sleep

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _wait(self, seconds: float) -> None:
        if seconds <= 0:
            return
        if self._sleep is not None:
            self._sleep(seconds)
        elif self.cancel_event is not None:
            self.cancel_event.wait(seconds)
        else:
            time.sleep(seconds)

    def wait(self) -> WatchResult:
        """
        Block until the watch reaches a terminal outcome.

        Returns:
            WatchResult describing the outcome

        Raises:
            Exception: Any error raised by the refresh function, unchanged
        """
        start = self.clock()
        deadline = start + self.config.timeout
        refresh_count = 0
        resource: Any = None
        state: Optional[str] = None

        def result(outcome: WatchOutcome) -> WatchResult:
            return WatchResult(
                outcome=outcome,
                resource=resource,
                state=state,
                refresh_count=refresh_count,
                elapsed=self.clock() - start,
            )

        logger.debug(
            f"Waiting {self.config.delay}s before first refresh of {self.name}"
        )
        self._wait(self.config.delay)

        while True:
            if self._cancelled():
                logger.warning(f"Watch of {self.name} cancelled")
                return result(WatchOutcome.CANCELLED)

            if self.clock() - start > self.config.timeout:
                logger.error(
                    f"Timeout waiting for {self.name} after "
                    f"{self.clock() - start:.0f}s (last state={state})"
                )
                return result(WatchOutcome.TIMED_OUT)

            resource, state = self.refresh()
            refresh_count += 1
            elapsed = self.clock() - start
            logger.info(f"  {self.name}: state={state} ({elapsed:.0f}s elapsed)")

            state_class = self.classifier.classify(state)
            if state_class is StateClass.TARGET:
                if self._cancelled():
                    logger.warning(f"Watch of {self.name} cancelled")
                    return result(WatchOutcome.CANCELLED)
                return result(WatchOutcome.CONVERGED)

            if state_class is StateClass.UNCLASSIFIED:
                logger.error(f"{self.name} in unexpected state: {state}")
                return result(WatchOutcome.UNEXPECTED_STATE)

            remaining = deadline - self.clock()
            if remaining <= 0:
                logger.error(
                    f"Timeout waiting for {self.name} after "
                    f"{self.clock() - start:.0f}s (stuck in {state})"
                )
                return result(WatchOutcome.TIMED_OUT)

            self._wait(min(self.config.min_interval, remaining))
