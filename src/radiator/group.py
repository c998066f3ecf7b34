"""Aggregate radiator entries.

A GroupEntry exposes the same read attributes as a JobEntry, computed as
folds over its children, so groups nest and sort like jobs. Children may be
job entries or other groups.
"""

from dataclasses import dataclass

from radiator.colors import DIFF_NEUTRAL, GROUP_BROKEN, GROUP_CLAIMED, GROUP_FOREGROUND, GROUP_OK
from radiator.entry import (
    STATUS_CLAIMED,
    STATUS_FAILING,
    STATUS_NEVER_BUILT,
    STATUS_SUCCESSFUL,
    STATUS_UNSTABLE,
    format_percentage,
)
from radiator.ordering import sort_entries


def needs_attention(entry) -> bool:
    """True for entries that are failing or unstable (never-built excluded)."""
    if entry.has_children:
        return any(needs_attention(child) for child in entry.children)
    return (not entry.stable and not entry.not_built) or entry.fail_count > 0


@dataclass(slots=True, frozen=True)
class Partitions:
    """Children split by status, all derived from the same child list."""

    passing: tuple
    failing: tuple
    claimed: tuple
    unclaimed: tuple
    unbuilt: tuple


def partition(children) -> Partitions:
    """Split children in one pass.

    Unstable children count as passing until some child is broken; from
    then on they are reported with the failing ones.
    """
    has_broken = any(child.broken for child in children)
    passing, failing, claimed, unclaimed, unbuilt = [], [], [], [], []
    for child in children:
        attention = needs_attention(child)
        if child.broken or (attention and has_broken):
            failing.append(child)
        else:
            passing.append(child)
        if attention and child.claimed:
            claimed.append(child)
        if attention and not child.completely_claimed and not child.not_built:
            unclaimed.append(child)
        if child.not_built:
            unbuilt.append(child)
    return Partitions(
        tuple(passing), tuple(failing), tuple(claimed), tuple(unclaimed), tuple(unbuilt),
    )


class GroupEntry:
    """A named collection of entries, e.g. all jobs sharing a prefix."""

    url = None
    last_build_url = None
    queue_number = None
    last_finished_result = None
    last_completed_build = None
    last_stable_build = None
    project_name = None
    diff = ""
    diff_color = DIFF_NEUTRAL
    color = GROUP_FOREGROUND
    claims_available = True

    def __init__(self, name: str = ""):
        self.name = name
        self._children = []
        self._version = 0
        self._cache = None  # (revision, sorted children, partitions)

    def add(self, entry) -> None:
        """Add a child entry. Entries comparing equal are all kept."""
        if entry is None:
            raise ValueError("Cannot add None to a radiator group")
        self._children.append(entry)
        self._version += 1

    @property
    def revision(self) -> int:
        """Changes whenever this group or any nested group gains a child."""
        return self._version + sum(
            getattr(child, "revision", 0) for child in self._children
        )

    def _snapshot(self):
        revision = self.revision
        if self._cache is None or self._cache[0] != revision:
            ordered = tuple(sort_entries(self._children))
            self._cache = (revision, ordered, partition(ordered))
        return self._cache

    @property
    def children(self) -> tuple:
        return self._snapshot()[1]

    @property
    def partitions(self) -> Partitions:
        return self._snapshot()[2]

    @property
    def has_children(self) -> bool:
        return bool(self._children)

    def __iter__(self):
        return iter(self.children)

    # -- partition views -----------------------------------------------------

    @property
    def passing_jobs(self) -> tuple:
        return self.partitions.passing

    @property
    def failing_jobs(self) -> tuple:
        return self.partitions.failing

    @property
    def claimed_builds(self) -> tuple:
        return self.partitions.claimed

    @property
    def unclaimed_jobs(self) -> tuple:
        return self.partitions.unclaimed

    @property
    def unbuilt_jobs(self) -> tuple:
        return self.partitions.unbuilt

    # -- folds ---------------------------------------------------------------

    @property
    def broken(self) -> bool:
        return any(child.broken for child in self._children)

    @property
    def stable(self) -> bool:
        return all(child.stable for child in self._children)

    @property
    def building(self) -> bool:
        return any(child.building for child in self._children)

    @property
    def queued(self) -> bool:
        return any(child.queued for child in self._children)

    @property
    def claimed(self) -> bool:
        return any(child.claimed for child in self._children)

    @property
    def not_built(self) -> bool:
        return bool(self._children) and all(child.not_built for child in self._children)

    @property
    def completely_claimed(self) -> bool:
        return needs_attention(self) and not self.partitions.unclaimed

    @property
    def test_count(self) -> int:
        return sum(child.test_count for child in self._children)

    @property
    def fail_count(self) -> int:
        return sum(child.fail_count for child in self._children)

    @property
    def skip_count(self) -> int:
        return sum(child.skip_count for child in self._children)

    @property
    def success_count(self) -> int:
        return sum(child.success_count for child in self._children)

    @property
    def success_percentage(self) -> str:
        return format_percentage(self.success_count, self.test_count)

    @property
    def background_color(self) -> str:
        if not self.broken and self.fail_count == 0:
            return GROUP_OK
        if not self.partitions.unclaimed:
            return GROUP_CLAIMED
        return GROUP_BROKEN

    @property
    def status(self) -> str:
        if self.not_built:
            return STATUS_NEVER_BUILT
        if self.stable or not needs_attention(self):
            return STATUS_SUCCESSFUL
        if self.completely_claimed:
            return STATUS_CLAIMED
        if self.broken:
            return STATUS_FAILING
        return STATUS_UNSTABLE

    @property
    def claim(self) -> str:
        return "".join(
            f"{child.name}: {child.claim};" for child in self.children if child.claimed
        )

    @property
    def culprits(self) -> frozenset:
        names = set()
        for child in self.partitions.failing:
            names.update(child.culprits)
        return frozenset(names)

    @property
    def culprit(self) -> str | None:
        return ", ".join(sorted(self.culprits)) if self.culprits else None

    @property
    def title(self) -> str:
        return f"{self.name}: " + ", ".join(child.name for child in self.children)

    def __repr__(self) -> str:
        return f"GroupEntry({self.name!r}, {len(self._children)} children)"
