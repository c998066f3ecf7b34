"""Snapshot of the CI engine's jobs and build history.

These records are read-only inputs: adapters (jenkins, github) or tests
build them, the radiator only walks them.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime

from radiator.result import Result


class IconColor(enum.Enum):
    """Status icon shown by the CI engine. *_ANIME variants are busy."""

    BLUE = "blue"
    BLUE_ANIME = "blue_anime"
    YELLOW = "yellow"
    YELLOW_ANIME = "yellow_anime"
    RED = "red"
    RED_ANIME = "red_anime"
    GREY = "grey"
    GREY_ANIME = "grey_anime"
    DISABLED = "disabled"
    DISABLED_ANIME = "disabled_anime"
    ABORTED = "aborted"
    ABORTED_ANIME = "aborted_anime"
    NOTBUILT = "notbuilt"
    NOTBUILT_ANIME = "notbuilt_anime"

    @property
    def is_animated(self) -> bool:
        return self.value.endswith("_anime")

    @classmethod
    def parse(cls, value: str | None) -> "IconColor":
        """Parse an engine colour name, defaulting to NOTBUILT."""
        if not value:
            return cls.NOTBUILT
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NOTBUILT


@dataclass(slots=True, frozen=True)
class TestSummary:
    __test__ = False  # not a pytest class

    total: int = 0
    failed: int = 0
    skipped: int = 0

    def __add__(self, other: "TestSummary") -> "TestSummary":
        return TestSummary(
            self.total + other.total,
            self.failed + other.failed,
            self.skipped + other.skipped,
        )


@dataclass(slots=True, frozen=True)
class ClaimRecord:
    claimed: bool
    claimed_by: str | None = None
    reason: str | None = None


@dataclass(eq=False)
class Build:
    number: int
    result: Result | None = None
    building: bool = False
    not_started: bool = False
    log_updated: bool = False
    previous: "Build | None" = None
    url: str = ""
    timestamp: datetime | None = None
    duration: float = 0.0  # seconds
    test_results: list[TestSummary] = field(default_factory=list)
    claims: list[ClaimRecord] = field(default_factory=list)
    culprits: list[str] = field(default_factory=list)
    # Matrix builds carry their combination runs; a combination run
    # carries its label (e.g. "jdk=11,os=linux").
    runs: list["Build"] = field(default_factory=list)
    combination: str | None = None

    @property
    def is_matrix(self) -> bool:
        return bool(self.runs)

    @property
    def tests(self) -> TestSummary | None:
        """Summed test results, or None when no test report was recorded."""
        if not self.test_results:
            return None
        total = TestSummary()
        for summary in self.test_results:
            total = total + summary
        return total

    @property
    def previous_in_progress(self) -> "Build | None":
        build = self.previous
        while build is not None and not build.building:
            build = build.previous
        return build

    @property
    def timestamp_string(self) -> str:
        if self.timestamp is None:
            return ""
        return self.timestamp.strftime("%Y-%m-%d %H:%M")

    @property
    def duration_string(self) -> str:
        return format_duration(self.duration)

    def __repr__(self) -> str:
        return f"Build(#{self.number}, {self.result})"


@dataclass(eq=False)
class Job:
    name: str
    full_name: str = ""
    url: str = ""
    disabled: bool = False
    in_queue: bool = False
    icon: IconColor = IconColor.NOTBUILT
    last_build: Build | None = None
    # Explicit radiator group, overrides prefix inference.
    project_name: str | None = None
    pipeline: bool = False

    def __post_init__(self):
        if not self.full_name:
            self.full_name = self.name

    def history(self):
        """Iterate builds newest first."""
        build = self.last_build
        while build is not None:
            yield build
            build = build.previous

    @property
    def last_completed_build(self) -> Build | None:
        return next(
            (b for b in self.history() if not b.building and b.result is not None),
            None,
        )

    @property
    def last_successful_build(self) -> Build | None:
        return next(
            (b for b in self.history()
             if not b.building and b.result is not None
             and b.result.is_better_or_equal_to(Result.UNSTABLE)),
            None,
        )

    @property
    def last_stable_build(self) -> Build | None:
        return next(
            (b for b in self.history()
             if not b.building and b.result == Result.SUCCESS),
            None,
        )

    @property
    def builds_in_progress(self) -> list[Build]:
        runs = []
        build = self.last_build
        if build is None:
            return runs
        if build.building:
            runs.append(build)
        prev = build.previous_in_progress
        while prev is not None:
            runs.append(prev)
            prev = prev.previous_in_progress
        return runs

    def __repr__(self) -> str:
        return f"Job({self.full_name!r})"


@dataclass(eq=False)
class Folder:
    name: str
    items: list = field(default_factory=list)


def link_history(builds: list[Build]) -> Build | None:
    """Chain a newest-first list of builds through their previous links.

    Returns the newest build (the head of the chain), or None if empty.
    """
    for newer, older in zip(builds, builds[1:]):
        newer.previous = older
    if builds:
        builds[-1].previous = None
        return builds[0]
    return None


def format_duration(seconds: float) -> str:
    """Format a duration like '1 hr 5 min', '3 min 2 sec' or '250 ms'."""
    millis = int(round(seconds * 1000))
    if millis < 1000:
        return f"{millis} ms"
    total = millis // 1000
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours} hr {minutes} min"
    if minutes:
        return f"{minutes} min {secs} sec"
    return f"{secs} sec"
