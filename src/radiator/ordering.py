"""Display order for radiator entries: worst result first, then by name."""

import functools


def compare_entries(a, b) -> int:
    """Compare two entries by last finished result, then by name.

    A worse result sorts first. When either entry has no result (groups),
    or the results tie, names decide (case-sensitive).
    """
    r1 = a.last_finished_result
    r2 = b.last_finished_result
    if r1 is not None and r2 is not None:
        if r1.is_better_than(r2):
            return 1
        if r1.is_worse_than(r2):
            return -1
    return (a.name > b.name) - (a.name < b.name)


entry_sort_key = functools.cmp_to_key(compare_entries)


def sort_entries(entries) -> list:
    """Sort entries for display.

    The sort is stable, so entries that compare equal keep their insertion
    order and none of them is dropped.
    """
    return sorted(entries, key=entry_sort_key)
