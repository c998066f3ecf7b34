"""Shared fixtures and helpers for radiator tests."""

from datetime import UTC, datetime

from radiator.model import Build, ClaimRecord, IconColor, Job, TestSummary, link_history
from radiator.result import Result


def make_build(number, result=None, **kwargs):
    """Build a Build record.

    A build without a result is treated as running unless ``building`` is
    given explicitly. ``tests`` may be a (total, failed, skipped) tuple.
    """
    tests = kwargs.pop("tests", None)
    if tests is not None:
        kwargs["test_results"] = [TestSummary(*tests)]
    kwargs.setdefault("building", result is None)
    kwargs.setdefault("url", f"https://ci.example.com/job/x/{number}/")
    return Build(number=number, result=result, **kwargs)


def make_job(name, *builds, **kwargs):
    """Create a Job from builds given newest first.

    Each item is either a Build or a Result (None meaning still running);
    plain results are numbered so the newest has the highest number.
    """
    records = []
    for i, item in enumerate(builds):
        if isinstance(item, Build):
            records.append(item)
        else:
            records.append(make_build(len(builds) - i, item))
    kwargs.setdefault("url", f"https://ci.example.com/job/{name}/")
    kwargs.setdefault("icon", IconColor.BLUE)
    return Job(name=name, last_build=link_history(records), **kwargs)


def claim(by="alice", reason="flaky", claimed=True):
    return ClaimRecord(claimed=claimed, claimed_by=by, reason=reason)


def matrix_build(number, result, combos, **kwargs):
    """Matrix build; combos are (label, result, claims[, run_number])."""
    runs = []
    for combo in combos:
        label, run_result, claims = combo[:3]
        run_number = combo[3] if len(combo) > 3 else number
        runs.append(make_build(run_number, run_result,
                               combination=label, claims=list(claims)))
    return make_build(number, result, runs=runs, **kwargs)


# Sample data constants

STAMP = datetime(2025, 1, 15, 10, 0, tzinfo=UTC)

FAIL, OK, UNSTABLE = Result.FAILURE, Result.SUCCESS, Result.UNSTABLE

SAMPLE_JENKINS_JOB = {
    "_class": "hudson.model.FreeStyleProject",
    "name": "build_core",
    "fullName": "build_core",
    "url": "https://ci.example.com/job/build_core/",
    "color": "red_anime",
    "inQueue": False,
    "property": [
        {"_class": "hudson.model.ParametersDefinitionProperty"},
        {"_class": "hudson.model.RadiatorProjectProperty", "projectName": "core"},
    ],
    "builds": [
        {
            "number": 12,
            "url": "https://ci.example.com/job/build_core/12/",
            "result": None,
            "building": True,
            "timestamp": 1736935200000,
            "duration": 0,
            "culprits": [{"fullName": "Carol"}],
            "actions": [],
        },
        {
            "number": 11,
            "url": "https://ci.example.com/job/build_core/11/",
            "result": "FAILURE",
            "building": False,
            "timestamp": 1736931600000,
            "duration": 65000,
            "culprits": [{"fullName": "Bob"}],
            "actions": [
                {"_class": "hudson.model.CauseAction"},
                {"_class": "hudson.tasks.junit.TestResultAction",
                 "totalCount": 10, "failCount": 2, "skipCount": 1},
                {"_class": "hudson.plugins.claim.ClaimBuildAction",
                 "claimed": True, "claimedBy": "alice",
                 "claimedByName": "Alice A", "reason": "flaky"},
            ],
        },
        {
            "number": 10,
            "url": "https://ci.example.com/job/build_core/10/",
            "result": "SUCCESS",
            "building": False,
            "timestamp": 1736928000000,
            "duration": 60000,
            "culprits": [],
            "actions": [{}],
        },
    ],
}
