"""Thread-safe collection of per-item upload outcomes."""

import threading
from collections import deque

from iconrequest.models.request import UploadOutcome

# Failure messages shown in the summary before it is cut off
MAX_EXCERPT = 3


class AtomicCounter:
    """Integer counter that can be incremented from many threads."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class ResultAggregator:
    """
    Accumulates upload outcomes reported by concurrent workers.

    ``record_success`` and ``record_failure`` may be called from any thread
    without external locking. ``summary`` is meant to be read once, after
    every worker has finished.
    """

    def __init__(self):
        self._successes = AtomicCounter()
        # deque.append is atomic; failures keep arrival order
        self._failures: deque[str] = deque()

    def record_success(self):
        self._successes.increment()

    def record_failure(self, message: str):
        self._failures.append(message)

    def record(self, outcome: UploadOutcome):
        if outcome.ok:
            self.record_success()
        else:
            self.record_failure(outcome.error or "Unknown error")

    @property
    def success_count(self) -> int:
        return self._successes.value

    @property
    def failure_count(self) -> int:
        return len(self._failures)

    @property
    def failures(self) -> list[str]:
        return list(self._failures)

    def summary(self) -> str | None:
        """
        Render the outcome of the fan-out.

        Returns:
            None if nothing failed, otherwise a report with the success and
            failure counts and at most three failure messages
        """
        failures = self.failures
        if not failures:
            return None

        if len(failures) == 1:
            excerpt = failures[0]
        else:
            excerpt = "\n".join(failures[:MAX_EXCERPT])
            if len(failures) > MAX_EXCERPT:
                excerpt += "\n..."

        return (
            f"Icon upload completed with errors. "
            f"Success: {self.success_count}, Failed: {len(failures)}\n{excerpt}"
        )
