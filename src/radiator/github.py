"""GitHub Actions as a radiator source, using PyGithub.

Each workflow becomes a job and its recent runs become the build history.
GitHub has no claim-tracking service, so claims are never available here.
All GitHub API calls go through this module.
"""

import functools
import logging
import os

from github import Github

from radiator.model import Build, IconColor, Job, link_history
from radiator.result import Result, last_finished_result

logger = logging.getLogger(__name__)

NOT_STARTED_STATUSES = frozenset({"queued", "waiting", "requested", "pending"})

CONCLUSION_RESULTS = {
    "success": Result.SUCCESS,
    "failure": Result.FAILURE,
    "timed_out": Result.FAILURE,
    "startup_failure": Result.FAILURE,
    "cancelled": Result.ABORTED,
}

RESULT_ICONS = {
    Result.SUCCESS: IconColor.BLUE,
    Result.UNSTABLE: IconColor.YELLOW,
    Result.FAILURE: IconColor.RED,
    Result.ABORTED: IconColor.ABORTED,
    Result.NOT_BUILT: IconColor.NOTBUILT,
}


@functools.lru_cache(maxsize=1)
def get_client() -> Github:
    """Create a Github client from GITHUB_TOKEN or GH_TOKEN env var.

    Cached for the lifetime of the process since the token comes from
    environment variables which don't change during a run.
    """
    return Github(_get_token())


def _get_token() -> str:
    """Return the GitHub token from environment."""
    token = os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
    if not token:
        raise RuntimeError(
            "GitHub token not found. Set GITHUB_TOKEN or GH_TOKEN environment variable."
        )
    return token


def _validate_repo(repo_slug: str) -> None:
    """Validate that repo_slug is in 'owner/name' format."""
    if not repo_slug or repo_slug.count("/") != 1:
        raise ValueError(
            f"Invalid repo format: '{repo_slug}'. Expected 'owner/name'."
        )


def run_result(status: str | None, conclusion: str | None) -> Result | None:
    """Map a workflow run's status/conclusion to a build result."""
    if status != "completed":
        return None
    return CONCLUSION_RESULTS.get(conclusion, Result.NOT_BUILT)


def run_to_build(run) -> Build:
    """Convert a PyGithub WorkflowRun to a Build record."""
    started = run.run_started_at or run.created_at
    duration = 0.0
    if run.status == "completed" and started and run.updated_at:
        duration = max(0.0, (run.updated_at - started).total_seconds())
    return Build(
        number=run.run_number,
        result=run_result(run.status, run.conclusion),
        building=run.status == "in_progress",
        not_started=run.status in NOT_STARTED_STATUSES,
        url=run.html_url,
        timestamp=started,
        duration=duration,
        culprits=[run.actor.login] if run.actor else [],
    )


def job_icon(job: Job) -> IconColor:
    """Derive the status icon the way a CI server would show it."""
    if job.disabled:
        return IconColor.DISABLED
    icon = RESULT_ICONS[last_finished_result(job)]
    head = job.last_build
    if head is not None and (head.building or head.not_started):
        return IconColor(f"{icon.value}_anime")
    return icon


def list_workflow_jobs(
    repo_slug: str,
    branch: str | None = None,
    limit: int = 20,
) -> list[Job]:
    """Return one Job per workflow with its latest runs as build history."""
    _validate_repo(repo_slug)
    client = get_client()
    repo = client.get_repo(repo_slug)

    kwargs = {}
    if branch:
        kwargs["branch"] = branch

    jobs = []
    for wf in repo.get_workflows():
        logger.info("Fetching runs for workflow %s...", wf.name)
        builds = [run_to_build(run) for run in wf.get_runs(**kwargs)[:limit]]
        builds.sort(key=lambda b: b.number, reverse=True)
        job = Job(
            name=wf.name,
            full_name=wf.name,
            url=wf.html_url,
            disabled=wf.state != "active",
            in_queue=any(b.not_started for b in builds),
            last_build=link_history(builds),
            pipeline=True,
        )
        job.icon = job_icon(job)
        jobs.append(job)

    _check_rate_limit(client)
    return jobs


def _check_rate_limit(client: Github) -> None:
    """Log a warning if the GitHub API rate limit is running low."""
    try:
        rate = client.get_rate_limit().core
        if rate.remaining < 50:
            logger.warning(
                "GitHub API rate limit low: %d/%d remaining, resets at %s",
                rate.remaining, rate.limit, rate.reset,
            )
    except Exception as e:
        logger.debug("Rate limit check failed: %s", e)
