"""Build outcome ordering and last-finished status resolution."""

import enum


class Result(enum.Enum):
    """Outcome of a finished build, ordered from best to worst.

    The ordinal matches the CI engine's vocabulary: a higher ordinal is a
    worse outcome.
    """

    SUCCESS = 0
    UNSTABLE = 1
    FAILURE = 2
    NOT_BUILT = 3
    ABORTED = 4

    @property
    def ordinal(self) -> int:
        return self.value

    def is_better_than(self, other: "Result") -> bool:
        return self.ordinal < other.ordinal

    def is_worse_than(self, other: "Result") -> bool:
        return self.ordinal > other.ordinal

    def is_better_or_equal_to(self, other: "Result") -> bool:
        return self.ordinal <= other.ordinal

    def is_worse_or_equal_to(self, other: "Result") -> bool:
        return self.ordinal >= other.ordinal

    @classmethod
    def from_name(cls, name: str | None) -> "Result | None":
        """Parse an engine result name such as 'FAILURE'. Unknown -> None."""
        if not name:
            return None
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return None


def is_settled(build) -> bool:
    """True if the build has finished and its result can be trusted."""
    return not (build.not_started or build.building or build.log_updated)


def last_finished_result(job) -> Result:
    """Return the result of the job's most recent settled build.

    Builds that have not started, are still running, or are still writing
    their log are skipped. A job without any settled build is NOT_BUILT.
    """
    build = job.last_build
    while build is not None and not is_settled(build):
        build = build.previous
    if build is None:
        return Result.NOT_BUILT
    # A settled build without a result has nothing to report yet.
    return build.result if build.result is not None else Result.NOT_BUILT
