"""Read jobs, build history and the build queue from a Jenkins server.

All Jenkins API calls go through this module. The JSON API is queried with
a ``tree`` filter so one request returns a job list with its recent builds.
"""

import logging
import os
from datetime import UTC, datetime
from urllib.parse import unquote, urlparse

import requests

from radiator.model import Build, ClaimRecord, Folder, IconColor, Job, TestSummary, link_history
from radiator.result import Result

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30
MAX_BUILDS = 20

CLAIM_ACTION = "hudson.plugins.claim.ClaimBuildAction"
PROJECT_PROPERTY = "RadiatorProjectProperty"
PIPELINE_JOB = "org.jenkinsci.plugins.workflow.job.WorkflowJob"

_ACTION_FIELDS = "actions[_class,totalCount,failCount,skipCount,claimed,claimedBy,claimedByName,reason]"
_BUILD_FIELDS = (
    "number,url,result,building,timestamp,duration,culprits[fullName],"
    + _ACTION_FIELDS
)
# Only items holding other items (folders, multibranch projects) carry "jobs".
JOB_TREE = (
    "_class,name,fullName,url,color,inQueue,property[_class,projectName],jobs[name],"
    f"builds[{_BUILD_FIELDS},runs[{_BUILD_FIELDS}]]{{0,{MAX_BUILDS}}}"
)
ITEMS_TREE = f"jobs[{JOB_TREE}]"


def _get_auth() -> tuple[str, str] | None:
    """Return (user, token) from JENKINS_USER/JENKINS_TOKEN, or None."""
    user = os.environ.get("JENKINS_USER")
    token = os.environ.get("JENKINS_TOKEN")
    if user and token:
        return user, token
    if user or token:
        raise RuntimeError(
            "Incomplete Jenkins credentials. Set both JENKINS_USER and JENKINS_TOKEN."
        )
    return None


def _validate_url(base_url: str) -> None:
    parsed = urlparse(base_url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(
            f"Invalid Jenkins URL: '{base_url}'. Expected http(s)://host[/path]."
        )


def get_json(url: str, tree: str | None = None) -> dict:
    """GET <url>/api/json, optionally filtered by a tree expression."""
    params = {"tree": tree} if tree else None
    resp = requests.get(
        f"{url.rstrip('/')}/api/json",
        params=params,
        auth=_get_auth(),
        timeout=REQUEST_TIMEOUT,
    )
    resp.raise_for_status()
    return resp.json()


# ---------------------------------------------------------------------------
# Pure parsers (no network)
# ---------------------------------------------------------------------------

def _to_datetime(millis) -> datetime | None:
    if not millis:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=UTC)


def _combination_from_url(url: str) -> str | None:
    """'.../job/matrix/jdk=11,os=linux/5/' -> 'jdk=11,os=linux'"""
    parts = [p for p in urlparse(url or "").path.split("/") if p]
    if len(parts) < 2:
        return None
    return unquote(parts[-2])


def parse_test_results(actions: list[dict]) -> list[TestSummary]:
    results = []
    for action in actions or []:
        if not action or "totalCount" not in action:
            continue
        results.append(TestSummary(
            total=action.get("totalCount") or 0,
            failed=action.get("failCount") or 0,
            skipped=action.get("skipCount") or 0,
        ))
    return results


def parse_claims(actions: list[dict]) -> list[ClaimRecord]:
    claims = []
    for action in actions or []:
        if not action or action.get("_class") != CLAIM_ACTION:
            continue
        claims.append(ClaimRecord(
            claimed=bool(action.get("claimed")),
            claimed_by=action.get("claimedByName") or action.get("claimedBy"),
            reason=action.get("reason") or None,
        ))
    return claims


def parse_build(data: dict, combination: bool = False) -> Build:
    """Convert one build from the JSON API into a Build record."""
    actions = data.get("actions", [])
    build = Build(
        number=data["number"],
        result=Result.from_name(data.get("result")),
        building=bool(data.get("building")),
        url=data.get("url", ""),
        timestamp=_to_datetime(data.get("timestamp")),
        duration=(data.get("duration") or 0) / 1000,
        test_results=parse_test_results(actions),
        claims=parse_claims(actions),
        culprits=[c["fullName"] for c in data.get("culprits") or [] if c.get("fullName")],
    )
    if combination:
        build.combination = _combination_from_url(build.url)
    else:
        build.runs = [parse_build(run, combination=True) for run in data.get("runs") or []]
    return build


def _project_name(properties: list[dict]) -> str | None:
    for prop in properties or []:
        if prop and prop.get("_class", "").endswith(PROJECT_PROPERTY):
            return prop.get("projectName") or None
    return None


def parse_job(data: dict) -> Job:
    """Convert one job from the JSON API into a Job with linked history."""
    color = data.get("color") or ""
    builds = [parse_build(b) for b in data.get("builds") or []]
    builds.sort(key=lambda b: b.number, reverse=True)
    return Job(
        name=data["name"],
        full_name=data.get("fullName") or data["name"],
        url=data.get("url", ""),
        disabled=color.startswith("disabled"),
        in_queue=bool(data.get("inQueue")),
        icon=IconColor.parse(color),
        last_build=link_history(builds),
        project_name=_project_name(data.get("property")),
        pipeline=data.get("_class") == PIPELINE_JOB,
    )


def _is_folder(data: dict) -> bool:
    return "jobs" in data or "Folder" in data.get("_class", "")


# ---------------------------------------------------------------------------
# API reads
# ---------------------------------------------------------------------------

def fetch_items(base_url: str, view: str | None = None) -> list:
    """Return the jobs (and folders) shown by the server or one of its views."""
    _validate_url(base_url)
    url = base_url.rstrip("/")
    if view:
        url = f"{url}/view/{view}"
    data = get_json(url, ITEMS_TREE)
    return _parse_items(data.get("jobs") or [])


def _parse_items(items: list[dict]) -> list:
    parsed = []
    for data in items:
        if _is_folder(data):
            logger.debug("Descending into folder %s", data.get("name"))
            folder_data = get_json(data["url"], ITEMS_TREE)
            parsed.append(Folder(data["name"], _parse_items(folder_data.get("jobs") or [])))
        elif "builds" in data or "color" in data:
            parsed.append(parse_job(data))
        else:
            logger.debug("Skipping %s (%s)", data.get("name"), data.get("_class"))
    return parsed


def fetch_queue(base_url: str) -> list[str]:
    """Return the URLs of queued jobs, in queue order."""
    _validate_url(base_url)
    data = get_json(f"{base_url.rstrip('/')}/queue", "items[task[name,url]]")
    return [
        item["task"]["url"] for item in data.get("items") or []
        if item.get("task") and item["task"].get("url")
    ]


def claims_available(base_url: str) -> bool:
    """True if the claim plugin is installed and active on the server."""
    _validate_url(base_url)
    try:
        data = get_json(
            f"{base_url.rstrip('/')}/pluginManager", "plugins[shortName,active]",
        )
    except requests.HTTPError as e:
        logger.warning("Cannot list Jenkins plugins, claims disabled: %s", e)
        return False
    return any(
        p.get("shortName") == "claim" and p.get("active", True)
        for p in data.get("plugins") or []
    )
