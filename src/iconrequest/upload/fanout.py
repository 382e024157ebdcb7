"""Bounded fan-out of per-item uploads over a shared worker pool."""

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from iconrequest.errors import UploadInterrupted
from iconrequest.log import get_logger
from iconrequest.models.request import UploadItem, UploadOutcome
from iconrequest.upload.results import ResultAggregator

logger = get_logger(__name__)

DEFAULT_MAX_CONCURRENCY = 10

UploadFn = Callable[[UploadItem], UploadOutcome]
CompletionCallback = Callable[[UploadItem, UploadOutcome], None]


class BoundedFanOut:
    """
    Runs one upload per item with at most ``max_concurrency`` in flight.

    The submitting thread takes a slot from a counting gate before handing
    each item to the pool, in input order, and blocks when the gate is empty.
    Workers give the slot back when they finish. ``run`` returns once every
    item has reported an outcome.

    The worker pool is kept between runs; call ``close`` (or use the fan-out
    as a context manager) to shut it down.
    """

    def __init__(
        self,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        executor: ThreadPoolExecutor | None = None,
        poll_interval: float = 0.1,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.max_concurrency = max_concurrency
        self.poll_interval = poll_interval
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_concurrency,
            thread_name_prefix="icon-upload",
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def run(
        self,
        items: Sequence[UploadItem],
        upload: UploadFn,
        aggregator: ResultAggregator,
        interrupt: threading.Event | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> None:
        """
        Upload every item and record each outcome in ``aggregator``.

        Args:
            items: Items to upload, admitted in this order
            upload: Per-item upload; expected to return an outcome, not raise
            aggregator: Receives exactly one outcome per item
            interrupt: When set, admission and joining stop
            on_complete: Called from the worker thread after each outcome

        Raises:
            UploadInterrupted: If ``interrupt`` is set or the submitting
                thread receives KeyboardInterrupt before all items finish.
                Workers already running are not waited for.
        """
        gate = threading.BoundedSemaphore(self.max_concurrency)
        futures: list[Future] = []

        try:
            for item in items:
                self._acquire(gate, interrupt)
                try:
                    futures.append(
                        self._executor.submit(self._run_one, gate, item, upload, aggregator, on_complete)
                    )
                except BaseException:
                    gate.release()
                    raise

            self._join(futures, interrupt)
        except KeyboardInterrupt as e:
            raise UploadInterrupted() from e

    def _acquire(self, gate: threading.BoundedSemaphore, interrupt: threading.Event | None):
        while True:
            if interrupt is not None and interrupt.is_set():
                raise UploadInterrupted()
            if gate.acquire(timeout=self.poll_interval):
                return

    def _join(self, futures: list[Future], interrupt: threading.Event | None):
        pending = set(futures)
        while pending:
            if interrupt is not None and interrupt.is_set():
                raise UploadInterrupted()
            _, pending = wait(pending, timeout=self.poll_interval, return_when=FIRST_COMPLETED)

    @staticmethod
    def _run_one(
        gate: threading.BoundedSemaphore,
        item: UploadItem,
        upload: UploadFn,
        aggregator: ResultAggregator,
        on_complete: CompletionCallback | None,
    ):
        try:
            try:
                outcome = upload(item)
            except Exception as e:
                logger.exception("Unhandled error uploading %s", item.package_name)
                outcome = UploadOutcome.failure(
                    item.package_name, f"Failed to upload icon for {item.package_name}: {e}"
                )
            aggregator.record(outcome)
        finally:
            gate.release()

        if on_complete is not None:
            try:
                on_complete(item, outcome)
            except Exception:
                logger.exception("Completion callback failed for %s", item.package_name)
