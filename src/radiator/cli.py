#!/usr/bin/env python3
"""Unified CLI for radiator -- CI status board."""

import argparse
import logging
import sys

from radiator import __version__

STATUS_OK = 0
STATUS_ERROR = 1


def _build_config(args):
    from radiator.view import RadiatorConfig
    return RadiatorConfig(
        group_by_prefix=not args.no_group,
        exclude_regex=args.exclude or None,
        pipeline_only=args.pipeline_only,
        show_stable=not args.hide_stable,
        caption_text=args.caption,
        caption_size=args.caption_size,
    )


def _emit(root, config, json_path: str | None) -> int:
    from radiator.report import format_text, write_json
    if json_path:
        write_json(root, json_path, config)
    else:
        sys.stdout.write(format_text(
            root, caption=config.caption_text, show_stable=config.show_stable,
        ))
    return STATUS_OK


def cmd_jenkins(args):
    import requests

    from radiator import jenkins
    from radiator.view import render

    logger = logging.getLogger(__name__)
    try:
        config = _build_config(args)
    except ValueError as e:
        logger.error("%s", e)
        return STATUS_ERROR

    try:
        items = jenkins.fetch_items(args.url, args.view)
        queue = jenkins.fetch_queue(args.url)
        claims = jenkins.claims_available(args.url)
    except (requests.RequestException, RuntimeError, ValueError) as e:
        logger.error("Failed to read Jenkins: %s", e)
        return STATUS_ERROR

    root = render(items, config, queue=queue, claims_available=claims)
    return _emit(root, config, args.json)


def cmd_github(args):
    from github import GithubException

    from radiator.github import list_workflow_jobs
    from radiator.view import render

    logger = logging.getLogger(__name__)
    try:
        config = _build_config(args)
    except ValueError as e:
        logger.error("%s", e)
        return STATUS_ERROR

    try:
        jobs = list_workflow_jobs(args.repo, args.branch or None, args.limit)
    except (GithubException, RuntimeError, ValueError) as e:
        logger.error("Failed to read GitHub Actions: %s", e)
        return STATUS_ERROR

    root = render(jobs, config, claims_available=False)
    return _emit(root, config, args.json)


def _add_view_arguments(parser):
    parser.add_argument(
        "--exclude", default="",
        help="Regex of job full names to hide (default: none)",
    )
    parser.add_argument(
        "--no-group", action="store_true",
        help="Show a flat list instead of grouping jobs by name prefix",
    )
    parser.add_argument(
        "--pipeline-only", action="store_true",
        help="Only show pipeline jobs",
    )
    parser.add_argument(
        "--hide-stable", action="store_true",
        help="Hide passing jobs in groups that have failures",
    )
    parser.add_argument(
        "--caption", default="",
        help="Caption printed above the board (default: none)",
    )
    parser.add_argument(
        "--caption-size", default=36,
        help="Caption size in points, kept for JSON consumers (default: 36)",
    )
    parser.add_argument(
        "--json", default=None,
        help="Write the radiator tree to this JSON file instead of printing",
    )


def main():
    parser = argparse.ArgumentParser(
        prog="radiator",
        description="CI radiator -- last finished status, claims and culprits per job",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable debug logging (verbose output)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- jenkins ---
    p_jenkins = subparsers.add_parser(
        "jenkins", help="Show the radiator for a Jenkins server",
    )
    p_jenkins.add_argument(
        "--url", required=True,
        help="Jenkins base URL (credentials from JENKINS_USER/JENKINS_TOKEN)",
    )
    p_jenkins.add_argument(
        "--view", default=None,
        help="Only show jobs of this Jenkins view (default: all jobs)",
    )
    _add_view_arguments(p_jenkins)
    p_jenkins.set_defaults(func=cmd_jenkins)

    # --- github ---
    p_github = subparsers.add_parser(
        "github", help="Show the radiator for a repository's GitHub Actions workflows",
    )
    p_github.add_argument(
        "--repo", required=True,
        help="Target repository (owner/name)",
    )
    p_github.add_argument(
        "--branch", default="main",
        help="Only consider runs on this branch, empty for all (default: main)",
    )
    p_github.add_argument(
        "--limit", type=int, default=20,
        help="Runs per workflow to read as history (default: 20)",
    )
    _add_view_arguments(p_github)
    p_github.set_defaults(func=cmd_github)

    args = parser.parse_args()

    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=(
            "%(message)s" if level == logging.INFO
            else "%(asctime)s %(name)s %(levelname)s %(message)s"
        ),
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
