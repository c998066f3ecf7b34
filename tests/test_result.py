"""Tests for radiator.result -- ordering and last finished status."""

from conftest import FAIL, OK, UNSTABLE, make_build, make_job

from radiator.result import Result, is_settled, last_finished_result

# ---------------------------------------------------------------------------
# Result ordering
# ---------------------------------------------------------------------------

class TestResultOrdering:
    def test_success_better_than_unstable(self):
        assert Result.SUCCESS.is_better_than(Result.UNSTABLE)
        assert not Result.UNSTABLE.is_better_than(Result.SUCCESS)

    def test_failure_worse_than_unstable(self):
        assert Result.FAILURE.is_worse_than(Result.UNSTABLE)

    def test_strict_predicates_false_for_equal(self):
        assert not Result.FAILURE.is_worse_than(Result.FAILURE)
        assert not Result.FAILURE.is_better_than(Result.FAILURE)

    def test_better_or_equal_is_inclusive(self):
        assert Result.UNSTABLE.is_better_or_equal_to(Result.UNSTABLE)
        assert Result.SUCCESS.is_better_or_equal_to(Result.UNSTABLE)
        assert not Result.FAILURE.is_better_or_equal_to(Result.UNSTABLE)

    def test_worse_or_equal_is_inclusive(self):
        assert Result.ABORTED.is_worse_or_equal_to(Result.ABORTED)
        assert Result.ABORTED.is_worse_or_equal_to(Result.NOT_BUILT)

    def test_total_order(self):
        ordered = [Result.SUCCESS, Result.UNSTABLE, Result.FAILURE,
                   Result.NOT_BUILT, Result.ABORTED]
        for better, worse in zip(ordered, ordered[1:]):
            assert better.is_better_than(worse)
            assert worse.is_worse_than(better)


class TestFromName:
    def test_known_name(self):
        assert Result.from_name("FAILURE") is Result.FAILURE

    def test_lowercase(self):
        assert Result.from_name("unstable") is Result.UNSTABLE

    def test_none_and_empty(self):
        assert Result.from_name(None) is None
        assert Result.from_name("") is None

    def test_unknown(self):
        assert Result.from_name("EXPLODED") is None


# ---------------------------------------------------------------------------
# last_finished_result
# ---------------------------------------------------------------------------

class TestLastFinishedResult:
    def test_all_settled_returns_head(self):
        job = make_job("j", FAIL, OK, OK)
        assert last_finished_result(job) is Result.FAILURE

    def test_skips_building_head(self):
        job = make_job("j", None, UNSTABLE, OK)
        assert last_finished_result(job) is Result.UNSTABLE

    def test_skips_not_started_and_log_updating(self):
        job = make_job(
            "j",
            make_build(4, None, building=False, not_started=True),
            make_build(3, FAIL, building=False, log_updated=True),
            make_build(2, None),
            make_build(1, OK),
        )
        assert last_finished_result(job) is Result.SUCCESS

    def test_all_unsettled_is_not_built(self):
        job = make_job("j", None, None)
        assert last_finished_result(job) is Result.NOT_BUILT

    def test_no_history_is_not_built(self):
        job = make_job("j")
        assert last_finished_result(job) is Result.NOT_BUILT

    def test_aborted_head(self):
        job = make_job("j", Result.ABORTED, OK)
        assert last_finished_result(job) is Result.ABORTED


class TestIsSettled:
    def test_finished_build(self):
        assert is_settled(make_build(1, OK))

    def test_running_build(self):
        assert not is_settled(make_build(1, None))
