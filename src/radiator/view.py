"""Radiator view configuration and the render pass.

A render reads the current job snapshot once, builds a fresh tree of
entries and hands it to the presentation layer. Nothing is kept between
renders.
"""

import logging
import re
from dataclasses import dataclass, field

from radiator.colors import DEFAULT_PALETTE, Palette
from radiator.entry import JobEntry, RenderContext
from radiator.group import GroupEntry
from radiator.layout import group_by_prefix
from radiator.model import Folder, Job

logger = logging.getLogger(__name__)

DEFAULT_CAPTION_SIZE = 36


def validate_exclude_regex(value: str | None) -> str | None:
    """Check an exclude pattern when the view is configured.

    Returns the pattern, None for empty input. Raises ValueError on an
    invalid regular expression.
    """
    if not value:
        return None
    try:
        re.compile(value)
    except re.error as e:
        raise ValueError(f"Invalid exclude regex '{value}': {e}") from e
    return value


def parse_caption_size(value) -> int:
    """Parse a caption size, falling back to the default on bad input."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return DEFAULT_CAPTION_SIZE


@dataclass
class RadiatorConfig:
    palette: Palette = DEFAULT_PALETTE
    group_by_prefix: bool = True
    exclude_regex: str | None = None
    pipeline_only: bool = False
    show_stable: bool = False
    show_stable_detail: bool = False
    show_build_stability: bool = False
    high_vis: bool = True
    caption_text: str = ""
    caption_size: int = DEFAULT_CAPTION_SIZE
    _exclude: re.Pattern | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.exclude_regex = validate_exclude_regex(self.exclude_regex)
        self._exclude = re.compile(self.exclude_regex) if self.exclude_regex else None
        self.caption_size = parse_caption_size(self.caption_size)

    def is_excluded(self, job: Job) -> bool:
        if self._exclude is None:
            return False
        matches = self._exclude.fullmatch(job.full_name) is not None
        logger.debug("Checking %s, full_name=%s, excluded=%s",
                     job.name, job.full_name, matches)
        return matches


def queue_positions(queue: list[str]) -> dict[str, int]:
    """Map each queued job URL to its 1-based position in the build queue."""
    positions = {}
    for position, url in enumerate(queue, 1):
        positions.setdefault(url, position)
    return positions


def iter_jobs(items):
    """Yield jobs from a list of jobs and folders, recursing into folders."""
    for item in items:
        if isinstance(item, Folder):
            yield from iter_jobs(item.items)
        elif isinstance(item, Job):
            yield item


def build_contents(items, config: RadiatorConfig, queue: list[str] | None = None,
                   claims_available: bool = True) -> GroupEntry:
    """Build one flat group holding an entry per visible job."""
    context = RenderContext(
        palette=config.palette,
        queue_positions=queue_positions(queue or []),
        claims_available=claims_available,
    )
    contents = GroupEntry()
    for job in iter_jobs(items):
        if job.disabled or config.is_excluded(job):
            continue
        if config.pipeline_only and not job.pipeline:
            continue
        logger.debug("Adding entry for %s", job.full_name)
        contents.add(JobEntry(job, context))
    return contents


def render(items, config: RadiatorConfig | None = None, queue: list[str] | None = None,
           claims_available: bool = True) -> GroupEntry:
    """Build the radiator tree, grouped by prefix when configured."""
    config = config or RadiatorConfig()
    contents = build_contents(items, config, queue, claims_available)
    logger.debug("Collected %d entries", len(contents.children))
    if config.group_by_prefix:
        return group_by_prefix(contents.children)
    return contents
