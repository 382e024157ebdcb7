"""Tests for the result aggregator."""

import random
import threading

import pytest

from iconrequest.models.request import UploadOutcome
from iconrequest.upload.results import ResultAggregator


class TestSummary:
    """Tests for ResultAggregator.summary()."""

    def test_no_failures_is_none(self):
        agg = ResultAggregator()
        for _ in range(3):
            agg.record_success()
        assert agg.summary() is None

    def test_empty_is_none(self):
        assert ResultAggregator().summary() is None

    def test_single_failure_verbatim(self):
        agg = ResultAggregator()
        agg.record_success()
        agg.record_success()
        agg.record_failure("X")

        assert agg.summary() == "Icon upload completed with errors. Success: 2, Failed: 1\nX"

    def test_three_failures_without_ellipsis(self):
        agg = ResultAggregator()
        for msg in ("a", "b", "c"):
            agg.record_failure(msg)

        assert agg.summary() == "Icon upload completed with errors. Success: 0, Failed: 3\na\nb\nc"

    def test_five_failures_truncated(self):
        agg = ResultAggregator()
        agg.record_success()
        for i in range(5):
            agg.record_failure(f"error {i}")

        summary = agg.summary()

        assert summary.startswith("Icon upload completed with errors. Success: 1, Failed: 5\n")
        assert summary.endswith("\nerror 0\nerror 1\nerror 2\n...")
        assert "error 3" not in summary

    def test_record_outcome(self):
        agg = ResultAggregator()
        agg.record(UploadOutcome.success("a"))
        agg.record(UploadOutcome.failure("b", "broken"))

        assert agg.success_count == 1
        assert agg.failures == ["broken"]


class TestConcurrency:
    """The aggregator must not lose updates under concurrent writers."""

    @pytest.mark.parametrize("seed", range(5))
    def test_counts_are_exact(self, seed):
        rng = random.Random(seed)
        successes = rng.randint(50, 300)
        failures = rng.randint(50, 300)
        agg = ResultAggregator()
        start = threading.Barrier(successes + failures)

        def succeed():
            start.wait()
            agg.record_success()

        def fail(i):
            start.wait()
            agg.record_failure(f"failure {i}")

        threads = [threading.Thread(target=succeed) for _ in range(successes)]
        threads += [threading.Thread(target=fail, args=(i,)) for i in range(failures)]
        rng.shuffle(threads)
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert agg.success_count == successes
        assert agg.failure_count == failures
        assert sorted(agg.failures) == sorted(f"failure {i}" for i in range(failures))
