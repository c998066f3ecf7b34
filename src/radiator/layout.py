"""Group entries by name prefix and lay them out in rows."""

import math

from radiator.group import GroupEntry

PREFIX_DELIMITERS = ("_", "-", ":")
UNGROUPED = "No Project"


def group_key(name: str, project_name: str | None = None) -> str:
    """Return the group an entry belongs to.

    An explicit project name wins. Otherwise the name is cut at the first
    delimiter found, trying '_', '-' and ':' in that order.
    """
    if project_name:
        return project_name
    for delimiter in PREFIX_DELIMITERS:
        if delimiter in name:
            return name.split(delimiter, 1)[0]
    return UNGROUPED


def group_by_prefix(entries) -> GroupEntry:
    """Regroup a flat sequence of entries under one group per prefix."""
    root = GroupEntry()
    groups: dict[str, GroupEntry] = {}
    for entry in entries:
        key = group_key(entry.name, entry.project_name)
        group = groups.get(key)
        if group is None:
            group = GroupEntry(key)
            groups[key] = group
            root.add(group)
        group.add(entry)
    return root


def row_width(count: int, failing: bool) -> int:
    """Entries per row.

    Failing entries get big tiles while there are few of them. Passing
    entries are packed tighter.
    """
    if failing:
        width = 1
        if count > 3:
            width = 2
        if count > 9:
            width = 3
        if count > 15:
            width = 4
        return width
    return max(1, int(math.floor(math.sqrt(count) / 1.5)))


def to_rows(entries, failing: bool) -> list[list]:
    """Split entries into fixed-width rows for a grid."""
    entries = list(entries)
    width = row_width(len(entries), failing)
    return [entries[i:i + width] for i in range(0, len(entries), width)]
