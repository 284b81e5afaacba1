"""Application entry point for the squad analytics report."""

from __future__ import annotations

import json
import logging
import sys

from .burndown import build_milestone_burndowns
from .cli import parse_args
from .config import Config, load_config
from .dashboard import build_dashboard_data
from .errors import ConfigurationError, DataValidationError, SnapshotError
from .report import dashboard_to_dict, format_standup_report, generate_report, standup_to_dict
from .snapshot import Snapshot, group_issues_by_member, load_snapshot
from .standup import build_standup_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_SNAPSHOT = 3
EXIT_DATA_VALIDATION = 4


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_standup(snapshot: Snapshot, config: Config) -> None:
    report = build_standup_report(
        open_issues=snapshot.open_issues,
        closed_issues=snapshot.closed_issues,
        decisions=snapshot.decisions,
        log_entries=snapshot.log_entries,
        period=config.standup_period,
        now=config.as_of,
    )
    if config.output_format == "json":
        print(json.dumps(standup_to_dict(report), indent=2))
    else:
        print(format_standup_report(report))


def orchestrate_dashboard_build() -> int:
    """Run the end-to-end dashboard build and return a process exit code.

    Exit codes:
        0: success
        1: unexpected failure
        2: invalid configuration
        3: unreadable snapshot
        4: invalid records inside the snapshot
    """
    try:
        args = parse_args()
        _configure_logging(args.verbose)

        config = load_config(
            snapshot_path=args.snapshot,
            output_format=args.output_format,
            as_of=args.as_of,
            verbose=args.verbose,
            standup_period=args.standup,
        )

        snapshot = load_snapshot(config.snapshot_path)
        if config.standup_period is not None:
            _print_standup(snapshot, config)
            return EXIT_OK

        burndowns = build_milestone_burndowns(
            snapshot.milestones,
            snapshot.issues_by_milestone,
            now=config.as_of,
        )
        data = build_dashboard_data(
            log_entries=snapshot.log_entries,
            members=snapshot.members,
            tasks=snapshot.tasks,
            decisions=snapshot.decisions,
            open_issues_by_member=group_issues_by_member(snapshot.open_issues),
            closed_issues_by_member=group_issues_by_member(snapshot.closed_issues),
            milestone_burndowns=burndowns,
            all_closed_issues=snapshot.closed_issues,
            now=config.as_of,
        )

        if config.output_format == "json":
            print(json.dumps(dashboard_to_dict(data), indent=2))
        else:
            print(generate_report(data))
        return EXIT_OK
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIGURATION
    except SnapshotError as exc:
        logger.error("Snapshot error: %s", exc)
        return EXIT_SNAPSHOT
    except DataValidationError as exc:
        logger.error("Data validation error: %s", exc)
        return EXIT_DATA_VALIDATION
    except Exception:
        logger.exception("Unexpected error while building dashboard data")
        return EXIT_UNEXPECTED


def main() -> None:
    """Console script entry point."""
    raise SystemExit(orchestrate_dashboard_build())


if __name__ == "__main__":
    main()
