"""Main CLI entry point."""

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Optional


def main(argv: Optional[list[str]] = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(
        prog="customer-consolidation",
        description="Consolidate call transcripts and email threads into per-customer documents",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings YAML (secrets may also come from the environment)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # sync
    subparsers.add_parser("sync", help="Process every opportunity in the tracker once")

    # init-tracker
    subparsers.add_parser("init-tracker", help="Create the opportunity tracker with its header row")

    # channels
    channels_parser = subparsers.add_parser("channels", help="List Fireflies channel IDs from recent transcripts")
    channels_parser.add_argument("--limit", type=int, default=50, help="Transcripts to scan (default: 50)")

    # last-run
    subparsers.add_parser("last-run", help="Show the last recorded run summary")

    # schedule
    schedule_parser = subparsers.add_parser("schedule", help="Manage the daily cron trigger")
    schedule_parser.add_argument("action", choices=["install", "remove", "list"])
    schedule_parser.add_argument("--hour", type=int, default=None, help="Hour of day, 0-23 (default: from settings)")
    schedule_parser.add_argument(
        "--every-days",
        type=int,
        default=None,
        help="Run every N days (default: from settings)",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from customer_consolidation.models.settings import SyncSettings

    settings = SyncSettings.from_yaml(args.config)

    if args.command == "sync":
        _run_sync(settings)
    elif args.command == "init-tracker":
        _run_init_tracker(settings)
    elif args.command == "channels":
        _run_channels(settings, args)
    elif args.command == "last-run":
        _run_last_run(settings)
    elif args.command == "schedule":
        _run_schedule(settings, args)
    else:
        parser.print_help()


def _google_credentials(settings):
    from customer_consolidation.google_auth import load_credentials

    return load_credentials(settings)


def _build_config_store(settings, credentials=None):
    """Tracker backend selected by settings.tracker_backend."""
    if settings.tracker_backend == "csv":
        from customer_consolidation.store import CsvConfigStore

        if not settings.tracker_path:
            raise SystemExit("tracker.path is required for the csv tracker backend")
        return CsvConfigStore(settings.tracker_path)

    from customer_consolidation.google_auth import build_service
    from customer_consolidation.store import GoogleSheetsConfigStore

    if not settings.spreadsheet_id:
        raise SystemExit("Set tracker.spreadsheet_id or CONSOLIDATION_SPREADSHEET_ID")
    credentials = credentials or _google_credentials(settings)
    service = build_service("sheets", "v4", credentials)
    return GoogleSheetsConfigStore(service, settings.spreadsheet_id, settings.sheet_name)


def build_orchestrator(settings):
    """Wire production collaborators from settings."""
    from customer_consolidation.documents import GoogleDocsStore
    from customer_consolidation.google_auth import build_service
    from customer_consolidation.orchestrator import Orchestrator
    from customer_consolidation.sources import FirefliesClient, GmailClient
    from customer_consolidation.store import RunStore

    credentials = _google_credentials(settings)
    return Orchestrator(
        config_store=_build_config_store(settings, credentials),
        transcripts=FirefliesClient(settings.fireflies_api_key, endpoint=settings.fireflies_endpoint),
        mail=GmailClient(build_service("gmail", "v1", credentials), max_threads=settings.mail_max_threads),
        documents=GoogleDocsStore(build_service("docs", "v1", credentials)),
        settings=settings,
        run_store=RunStore(settings.run_db_path),
    )


def _run_sync(settings) -> None:
    """Run sync command. Exits 1 when any opportunity failed."""
    from customer_consolidation.errors import ConfigStoreNotFoundError, CredentialMissingError

    try:
        summary = build_orchestrator(settings).run()
    except (CredentialMissingError, ConfigStoreNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    title = "Consolidation Complete (with errors)" if summary.failed else "Consolidation Complete"
    print(f"{title}\n{summary.to_text()}")
    if summary.failed:
        raise SystemExit(1)


def _run_init_tracker(settings) -> None:
    """Run init-tracker command."""
    store = _build_config_store(settings)
    if store.ensure_exists():
        print("Created opportunity tracker with header row")
    else:
        print("Opportunity tracker already exists")


def _run_channels(settings, args: argparse.Namespace) -> None:
    """Run channels command."""
    from customer_consolidation.sources import FirefliesClient

    client = FirefliesClient(settings.fireflies_api_key, endpoint=settings.fireflies_endpoint)
    channels = client.list_channels(limit=args.limit)
    if not channels:
        print("No channels found in recent transcripts.")
        return
    for channel in channels:
        print(f"Channel ID: {channel.id}")
        for title in channel.transcript_titles:
            print(f"  - {title}")
    print(f"\nTotal unique channels: {len(channels)}")


def _run_last_run(settings) -> None:
    """Run last-run command."""
    from customer_consolidation.store import RunStore

    summary = RunStore(settings.run_db_path).last()
    if summary is None:
        print("No previous runs found.")
        return
    when = summary.finished_at or summary.started_at
    print(f"Last Run: {when}\n\n{summary.to_text()}")


def _sync_command(config: Optional[Path]) -> str:
    parts = [sys.executable, "-m", "customer_consolidation.cli.main"]
    if config is not None:
        parts += ["--config", str(Path(config).resolve())]
    parts.append("sync")
    return shlex.join(parts)


def _run_schedule(settings, args: argparse.Namespace) -> None:
    """Run schedule command."""
    from customer_consolidation.scheduling import CronScheduler

    scheduler = CronScheduler(_sync_command(args.config))
    if args.action == "install":
        hour = settings.schedule_hour if args.hour is None else args.hour
        every = settings.schedule_interval_days if args.every_days is None else args.every_days
        try:
            line = scheduler.install(hour=hour, interval_days=every)
        except ValueError as e:
            raise SystemExit(str(e))
        print(f"Installed trigger:\n  {line}")
    elif args.action == "remove":
        removed = scheduler.remove()
        print(f"Removed {removed} trigger(s)" if removed else "No triggers found")
    else:
        entries = scheduler.entries()
        if not entries:
            print("No active triggers")
        for entry in entries:
            print(entry)


if __name__ == "__main__":
    main()
