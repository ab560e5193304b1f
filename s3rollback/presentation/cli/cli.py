"""
CLI Module

Architectural Intent:
- Command-line interface for s3rollback
- Entry point for all user interactions
- Delegates to the rollback use case via composition root
- Supports --verbose/--debug flags for log level control

Exit Codes:
- 0: clean completion, dry run, or --help
- 1: missing/invalid parameters, unreadable or malformed input, aborted run,
     or any error recorded during a run that performed writes
"""

import argparse
import dataclasses
import logging
import sys
import asyncio
import traceback
from pathlib import Path
from typing import Optional, Sequence

from s3rollback.application.dtos.rollback_dtos import RollbackReport, RollbackRequest
from s3rollback.composition_root import create_container
from s3rollback.domain.errors import InvalidInput
from s3rollback.domain.value_objects.cutoff import Cutoff
from s3rollback.infrastructure.config import RollbackConfig, load_config
from s3rollback.infrastructure.locator_file import read_locator_lines
from s3rollback.infrastructure.logging import configure_logging, level_from_name
from s3rollback.infrastructure.telemetry.otel_exporter import create_exporter
from s3rollback.presentation.cli.progress import ProgressDisplay, timestamp

DESCRIPTION = """\
Roll objects in a versioned S3 bucket back to their state at a point in time
by permanently deleting every object version created after it.

Assume role prior to execution with "export AWS_PROFILE=<profile>" or pass --profile.
"""

EPILOG = """\
The locator file holds one S3 URI per line, i.e. s3://bucket/path/to/object.
Blank lines are ignored. Every URI must name the bucket given with --bucket.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3rollback",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--bucket", "-b", help="Bucket to perform the rollback operation on"
    )
    parser.add_argument(
        "--file", "-f", help="File containing references to the objects to roll back"
    )
    parser.add_argument(
        "--datetime",
        "-d",
        help=(
            "Threshold after which versions are reverted, not including those "
            "on the precise second; format YYYY-MM-DDTHH:MM:SS (local time "
            "unless an offset is given)"
        ),
    )
    parser.add_argument(
        "--dryrun",
        action="store_true",
        help="Do not perform any write operations, only log what would be deleted",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="List matching versions again after rollback to check nothing was left",
    )
    parser.add_argument(
        "--concurrency", type=int, help="Maximum number of in-flight S3 requests"
    )
    parser.add_argument("--region", help="AWS region of the bucket")
    parser.add_argument("--profile", help="AWS credentials profile")
    parser.add_argument("--endpoint-url", help="Custom endpoint for S3-compatible stores")
    parser.add_argument(
        "--include-delete-markers",
        action="store_true",
        default=None,
        help="Also delete delete markers created after the threshold",
    )
    parser.add_argument(
        "--abort-on-fetch-errors",
        action="store_true",
        default=None,
        help="Exit without deleting anything if any version listing fails",
    )
    parser.add_argument(
        "--config", help="Path to JSON config file (default: s3rollback.json)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output with tracebacks"
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit logs as structured JSON"
    )
    return parser


def apply_overrides(config: RollbackConfig, args: argparse.Namespace) -> RollbackConfig:
    """Layer command-line flags over the loaded configuration."""
    s3 = config.s3
    s3_changes = {
        name: value
        for name, value in (
            ("region", args.region),
            ("profile", args.profile),
            ("endpoint_url", args.endpoint_url),
        )
        if value
    }
    if s3_changes:
        s3 = dataclasses.replace(s3, **s3_changes)

    rollback = config.rollback
    rollback_changes = {
        name: value
        for name, value in (
            ("concurrency", args.concurrency),
            ("include_delete_markers", args.include_delete_markers),
            ("abort_on_fetch_errors", args.abort_on_fetch_errors),
        )
        if value is not None
    }
    if rollback_changes:
        rollback = dataclasses.replace(rollback, **rollback_changes)

    return dataclasses.replace(config, s3=s3, rollback=rollback)


def print_report(report: RollbackReport, progress: ProgressDisplay) -> None:
    progress.finish_line()
    for record in report.errors:
        print(record, file=sys.stderr)

    if report.aborted:
        progress.log(f"{len(report.errors)} errors occurred")
        progress.log("Exited safely. No write operations were performed")
        return

    if report.dry_run:
        progress.log(
            f"(dryrun) {report.targets_found} versions would be deleted, "
            f"{len(report.errors)} errors"
        )
        return

    progress.log(
        f"{report.targets_found} targets found, "
        f"{report.deletions_attempted} deletions attempted, "
        f"{report.deletions_succeeded} succeeded, "
        f"{len(report.errors)} errors"
    )
    if report.remaining is not None:
        progress.log(f"{report.remaining} reversions were not performed")


async def async_main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"[-] Invalid configuration: {e}")
        sys.exit(1)

    # Configure logging based on flags
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = level_from_name(config.log_level)
    configure_logging(level=level, json_format=args.json_logs)

    verbose = args.verbose or args.debug

    if not (args.bucket and args.file and args.datetime):
        print("Missing one or more required parameters")
        sys.exit(1)

    try:
        config = apply_overrides(config, args)
    except ValueError as e:
        print(f"[-] Invalid configuration: {e}")
        sys.exit(1)

    progress = ProgressDisplay()
    try:
        cutoff = Cutoff.parse(args.datetime)
        location = Path(args.file).resolve()
        progress.log(f"Reading from {location}")
        locators = read_locator_lines(location)
        request = RollbackRequest(
            container=args.bucket,
            locators=locators,
            cutoff=cutoff,
            dry_run=args.dryrun,
            verify=args.verify,
            abort_on_fetch_errors=config.rollback.abort_on_fetch_errors,
        )
    except InvalidInput as e:
        print(f"[-] {e}")
        sys.exit(1)

    try:
        exporter = await create_exporter(
            config.telemetry.endpoint, insecure=config.telemetry.insecure
        )
    except ValueError as e:
        print(f"[-] Invalid configuration: {e}")
        sys.exit(1)

    try:
        container = create_container(config)
    except Exception as e:
        print(f"[-] Could not set up storage client: {e}")
        if verbose:
            traceback.print_exc()
        sys.exit(1)

    progress.attach(container.event_bus)

    try:
        report = await container.rollback.execute(request)
    except InvalidInput as e:
        progress.finish_line()
        print(f"[-] {e}")
        print(f"{timestamp()} Exited safely. No write operations were performed")
        sys.exit(1)
    except Exception as e:
        progress.finish_line()
        print(f"[-] Rollback Failed: {e}")
        if verbose:
            traceback.print_exc()
        sys.exit(1)
    finally:
        container.close()

    print_report(report, progress)

    exporter.record_rollback_report(report)
    await exporter.export()

    if report.exit_code:
        sys.exit(report.exit_code)


def main():
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
