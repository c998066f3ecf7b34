"""Colour palette for radiator tiles."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Palette:
    """Background/foreground pairs per status class.

    ok: last build stable; failed: unstable; broken: failing or aborted;
    other: never built.
    """

    ok_bg: str
    ok_fg: str
    failed_bg: str
    failed_fg: str
    broken_bg: str
    broken_fg: str
    other_bg: str
    other_fg: str


DEFAULT_PALETTE = Palette(
    ok_bg="#88ff88", ok_fg="black",
    failed_bg="yellow", failed_fg="black",
    broken_bg="red", broken_fg="white",
    other_bg="#CCCCCC", other_fg="#FFFFFF",
)

DIFF_NEGATIVE = "#FF0000"
DIFF_POSITIVE = "#00FF00"
DIFF_NEUTRAL = "#FFFFFF"

GROUP_OK = "green"
GROUP_CLAIMED = "orange"
GROUP_BROKEN = "red"
GROUP_FOREGROUND = "white"
