"""Per-job radiator entry.

A JobEntry is a flat snapshot of one job, computed once from the job's
build history when the entry is created. Nothing is looked up afterwards.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from radiator import claims
from radiator.colors import DEFAULT_PALETTE, DIFF_NEGATIVE, DIFF_NEUTRAL, DIFF_POSITIVE, Palette
from radiator.result import Result, last_finished_result

STATUS_NEVER_BUILT = "never built"
STATUS_SUCCESSFUL = "successful"
STATUS_CLAIMED = "claimed"
STATUS_FAILING = "failing"
STATUS_UNSTABLE = "unstable"


@dataclass(slots=True, frozen=True)
class RenderContext:
    """Read-only state shared by every entry of one render pass."""

    palette: Palette = DEFAULT_PALETTE
    # job URL -> 1-based position in the build queue
    queue_positions: Mapping[str, int] = field(default_factory=dict)
    claims_available: bool = True


def format_diff(diff: int) -> str:
    """Signed test delta, '' when unchanged."""
    if diff == 0:
        return ""
    return f"{diff:+d}"


def diff_color(diff: str) -> str:
    diff = diff.strip()
    if not diff:
        return DIFF_NEUTRAL
    return DIFF_NEGATIVE if diff.startswith("-") else DIFF_POSITIVE


def format_percentage(success: int, total: int) -> str:
    if total <= 0:
        return ""
    return f"{success / total:.0%}"


def _previous_passing(build):
    """Nearest earlier build that finished no worse than UNSTABLE."""
    prev = build.previous
    while prev is not None and (
        prev.building
        or prev.result is None
        or prev.result.is_worse_than(Result.UNSTABLE)
    ):
        prev = prev.previous
    return prev


def passing_tests_diff(job) -> str:
    """Change in passing tests between the last two passing builds."""
    current = job.last_successful_build
    if current is None:
        return ""
    previous = _previous_passing(current)
    if previous is None:
        return ""
    tests, prev_tests = current.tests, previous.tests
    if tests is None or prev_tests is None:
        return ""
    diff = (tests.total - tests.failed) - (prev_tests.total - prev_tests.failed)
    return format_diff(diff)


def collect_culprits(job) -> set[str]:
    """Contributors to the run of non-successful builds ending at the head.

    The newest build always contributes; the walk stops before the first
    earlier SUCCESS.
    """
    culprits = set()
    build = job.last_build
    while build is not None:
        culprits.update(build.culprits)
        build = build.previous
        if build is not None and build.result == Result.SUCCESS:
            break
    return culprits


class JobEntry:
    """Radiator view of a single job."""

    has_children = False

    def __init__(self, job, context: RenderContext | None = None):
        context = context or RenderContext()
        self.job = job
        self.name = job.full_name
        self.url = job.url
        self.project_name = job.project_name

        last_build = job.last_build
        self.last_build_url = last_build.url if last_build and last_build.url else job.url

        self.last_finished_result = last_finished_result(job)
        self.not_built = False
        self.stable = False
        self.broken = False
        self._classify(context.palette)
        self.building = job.icon.is_animated

        self.queued = job.in_queue
        self.queue_number = context.queue_positions.get(job.url)
        self.builds_in_progress = job.builds_in_progress

        completed = job.last_completed_build
        tests = completed.tests if completed is not None else None
        self.test_count = tests.total if tests else 0
        self.fail_count = tests.failed if tests else 0
        self.skip_count = tests.skipped if tests else 0
        self.success_count = self.test_count - self.fail_count - self.skip_count
        self.success_percentage = format_percentage(self.success_count, self.test_count)

        self.diff = passing_tests_diff(job)
        self.diff_color = diff_color(self.diff)

        self.culprits = frozenset(collect_culprits(job))

        self._claim = claims.resolve_job_claim(job, context.claims_available)

        self.last_completed_build = (
            f"{completed.timestamp_string} ({completed.duration_string})"
            if completed is not None else None
        )
        stable_build = job.last_stable_build
        self.last_stable_build = (
            f"{stable_build.timestamp_string} (in {stable_build.duration_string})"
            if stable_build is not None else None
        )

    def _classify(self, palette: Palette) -> None:
        result = self.last_finished_result
        if result is Result.NOT_BUILT:
            self.background_color, self.color = palette.other_bg, palette.other_fg
            self.not_built = True
        elif result is Result.SUCCESS:
            self.background_color, self.color = palette.ok_bg, palette.ok_fg
            self.stable = True
        elif result is Result.UNSTABLE:
            self.background_color, self.color = palette.failed_bg, palette.failed_fg
        else:
            self.background_color, self.color = palette.broken_bg, palette.broken_fg
            self.broken = True

    @property
    def claim(self) -> str | None:
        return self._claim.text

    @property
    def claims_available(self) -> bool:
        return self._claim.available

    @property
    def unclaimed_matrix_builds(self) -> str:
        return self._claim.unclaimed_combinations

    @property
    def claimed(self) -> bool:
        return self._claim.claimed

    @property
    def completely_claimed(self) -> bool:
        return self._claim.completely_claimed

    @property
    def culprit(self) -> str:
        return ", ".join(sorted(self.culprits)) if self.culprits else " - "

    @property
    def status(self) -> str:
        if self.not_built:
            return STATUS_NEVER_BUILT
        if self.stable:
            return STATUS_SUCCESSFUL
        if self.completely_claimed:
            return STATUS_CLAIMED
        if self.broken:
            return STATUS_FAILING
        return STATUS_UNSTABLE

    def __repr__(self) -> str:
        return f"JobEntry({self.name!r}, {self.last_finished_result.name})"
