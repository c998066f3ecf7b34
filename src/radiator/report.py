#!/usr/bin/env python3
"""Serialize a radiator tree to JSON-ready dicts and a plain-text board."""

import json
import logging

from radiator.claims import CLAIM_ERROR
from radiator.layout import to_rows

logger = logging.getLogger(__name__)


def entry_to_dict(entry) -> dict:
    """Return every read attribute of a job or group entry as a dict."""
    data = {
        "name": entry.name,
        "status": entry.status,
        "url": entry.url,
        "background_color": entry.background_color,
        "color": entry.color,
        "broken": entry.broken,
        "building": entry.building,
        "stable": entry.stable,
        "not_built": entry.not_built,
        "queued": entry.queued,
        "queue_number": entry.queue_number,
        "test_count": entry.test_count,
        "fail_count": entry.fail_count,
        "skip_count": entry.skip_count,
        "success_count": entry.success_count,
        "success_percentage": entry.success_percentage,
        "diff": entry.diff,
        "diff_color": entry.diff_color,
        "culprits": sorted(entry.culprits),
        "claim": entry.claim,
        "claimed": entry.claimed,
        "completely_claimed": entry.completely_claimed,
        "last_completed_build": entry.last_completed_build,
        "last_stable_build": entry.last_stable_build,
        "last_finished_result": (
            entry.last_finished_result.name if entry.last_finished_result else None
        ),
    }
    if entry.has_children:
        data["children"] = [entry_to_dict(child) for child in entry.children]
    return data


def view_to_dict(config) -> dict:
    """Display settings a front end needs to draw the board."""
    return {
        "caption_text": config.caption_text,
        "caption_size": config.caption_size,
        "show_stable": config.show_stable,
        "show_stable_detail": config.show_stable_detail,
        "show_build_stability": config.show_build_stability,
        "high_vis": config.high_vis,
        "group_by_prefix": config.group_by_prefix,
    }


def write_json(root, output_path: str, config=None) -> None:
    data = entry_to_dict(root)
    if config is not None:
        data["view"] = view_to_dict(config)
    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)
    logger.info("Wrote %s", output_path)


def _tile(entry) -> str:
    """One-line tile text: '[FAILING] name  3/10 failed  (claim)'."""
    parts = [f"[{entry.status.upper()}]", entry.name]
    if entry.building:
        parts.append("(building)")
    if entry.test_count:
        parts.append(f"{entry.fail_count}/{entry.test_count} failed")
    if entry.diff:
        parts.append(entry.diff)
    if not entry.stable and not entry.not_built and entry.culprits:
        parts.append(f"culprits: {', '.join(sorted(entry.culprits))}")
    if entry.claim and (entry.claimed or CLAIM_ERROR in entry.claim):
        claim = "; ".join(entry.claim.splitlines())
        parts.append(f"claim: {claim}")
    return " ".join(parts)


def _write_rows(lines: list[str], entries, failing: bool) -> None:
    for row in to_rows(entries, failing):
        lines.append("  " + " | ".join(_tile(entry) for entry in row))


def format_text(root, caption: str = "", show_stable: bool = True) -> str:
    """Render the tree as a plain-text board, failing entries first."""
    lines = []
    if caption:
        lines.append(caption)
        lines.append("=" * len(caption))

    groups = root.children if root.has_children and all(
        child.has_children for child in root.children
    ) else [root]

    for group in groups:
        if group.name:
            lines.append(f"{group.name} ({group.status})")
        failing = group.failing_jobs
        passing = group.passing_jobs
        if failing:
            _write_rows(lines, failing, failing=True)
        if passing and (show_stable or not failing):
            _write_rows(lines, passing, failing=False)
        if not failing and not passing:
            lines.append("  (no jobs)")
    return "\n".join(lines) + "\n"
