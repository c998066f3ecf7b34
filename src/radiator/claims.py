"""Resolve human ownership claims on failed builds.

A claim is attached to a finished build by the claim-tracking service. A
build normally carries zero or one claim record; more than one is a data
anomaly that is logged and reported, never silently resolved.
"""

import enum
import logging
from dataclasses import dataclass

from radiator.result import Result

logger = logging.getLogger(__name__)

NOT_CLAIMED = "Not Claimed."
CLAIM_ERROR = "Error parsing claim details."

_CLAIMABLE_RESULTS = (Result.FAILURE, Result.UNSTABLE)


class ClaimState(enum.Enum):
    NOT_CLAIMED = "not-claimed"
    CLAIMED = "claimed"
    AMBIGUOUS = "ambiguous"


@dataclass(slots=True, frozen=True)
class ClaimOutcome:
    state: ClaimState
    claimed_by: str | None = None
    reason: str | None = None

    @property
    def claimed(self) -> bool:
        return self.state is ClaimState.CLAIMED

    def describe(self) -> str:
        """Human-readable claim text, e.g. 'flaky test (alice).'"""
        if self.state is ClaimState.AMBIGUOUS:
            return CLAIM_ERROR
        if self.state is ClaimState.NOT_CLAIMED:
            return NOT_CLAIMED
        prefix = f"{self.reason} " if self.reason else ""
        return f"{prefix}({self.claimed_by})."


@dataclass(slots=True, frozen=True)
class JobClaim:
    """Claim summary for a job's last finished build.

    ``available`` is False when no claim-tracking service exists; in that
    case ``text`` is None and nothing should be rendered. ``text`` is also
    None when the job has no finished build to claim.
    """

    available: bool
    text: str | None = None
    unclaimed_combinations: str = ""
    claimed: bool = False
    completely_claimed: bool = False


UNAVAILABLE = JobClaim(available=False)


def resolve_claim(build) -> ClaimOutcome:
    """Look up the single claim record attached to a build."""
    records = build.claims
    if not records:
        return ClaimOutcome(ClaimState.NOT_CLAIMED)
    if len(records) > 1:
        logger.warning(
            "Multiple claim records (%d) found for build #%s %s",
            len(records), build.number, build.url,
        )
        return ClaimOutcome(ClaimState.AMBIGUOUS)
    record = records[0]
    if not record.claimed:
        return ClaimOutcome(ClaimState.NOT_CLAIMED)
    return ClaimOutcome(ClaimState.CLAIMED, record.claimed_by, record.reason)


def last_claimable_build(job):
    """Return the newest build that is no longer running.

    Claims can only be made against finished builds, so a build in
    progress defers to its predecessor.
    """
    build = job.last_build
    while build is not None and build.building:
        build = build.previous
    return build


def _failing_combinations(build):
    for run in build.runs:
        # Runs left over from an earlier, cancelled build keep their own number.
        if run.number != build.number:
            continue
        if run.result not in _CLAIMABLE_RESULTS:
            continue
        yield run


def matrix_claims(build) -> list[tuple[str, ClaimOutcome]]:
    """Resolve claims per failing or unstable combination of a matrix build."""
    return [
        (run.combination or f"#{run.number}", resolve_claim(run))
        for run in _failing_combinations(build)
    ]


def format_matrix_claims(claims: list[tuple[str, ClaimOutcome]],
                         include_claimed: bool = True) -> str:
    """Render combination claims, unclaimed ones first, one per line."""
    unclaimed = [f"{combo}: {outcome.describe()}"
                 for combo, outcome in claims if not outcome.claimed]
    claimed = [f"{combo}: {outcome.describe()}"
               for combo, outcome in claims if outcome.claimed]
    lines = unclaimed + claimed if include_claimed else unclaimed
    return "\n".join(lines)


def resolve_job_claim(job, claims_available: bool = True) -> JobClaim:
    """Summarise the claim status of a job's last finished build."""
    if not claims_available:
        return UNAVAILABLE
    build = last_claimable_build(job)
    if build is None:
        return JobClaim(available=True)

    if build.is_matrix:
        claims = matrix_claims(build)
        claimed = any(outcome.claimed for _, outcome in claims)
        return JobClaim(
            available=True,
            text=format_matrix_claims(claims, include_claimed=True),
            unclaimed_combinations=format_matrix_claims(claims, include_claimed=False),
            claimed=claimed,
            completely_claimed=bool(claims) and all(o.claimed for _, o in claims),
        )

    outcome = resolve_claim(build)
    return JobClaim(
        available=True,
        text=outcome.describe(),
        claimed=outcome.claimed,
        completely_claimed=outcome.claimed,
    )
