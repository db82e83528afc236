"""CLI entrypoint for the hydrant field survey tool."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from hydrant_survey.common.config_loader import SurveyConfig, load_survey_config
from hydrant_survey.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from hydrant_survey.common.errors import (
    ConfigError,
    InvalidStateError,
    LocationError,
    SurveyError,
    ValidationError,
)
from hydrant_survey.common.logging import build_logger, log_event
from hydrant_survey.report.compiler import compile_report
from hydrant_survey.report.export import REPORT_FORMATS, write_report
from hydrant_survey.survey.capture import CaptureFlow
from hydrant_survey.survey.dispatch import DispatchSink, NullDispatchSink, WebhookDispatchSink, WhatsAppLinkSink
from hydrant_survey.survey.location import HttpLocationProvider, LocationProvider, StaticLocationProvider
from hydrant_survey.survey.models import Coordinate
from hydrant_survey.survey.session import SurveySession
from hydrant_survey.survey.storage import JsonFileBlobStore

USER_CORRECTABLE_ERRORS = (ValidationError, InvalidStateError, LocationError)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--area", default="")
    parser.add_argument("--label", default=None)
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--format", dest="report_format", default="json", choices=REPORT_FORMATS)
    parser.add_argument("--out-dir", default=None)
    parser.add_argument("--yes", action="store_true")
    parser.add_argument("--no-dispatch", action="store_true")
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def build_location_provider(config: SurveyConfig, args: argparse.Namespace) -> LocationProvider:
    if config.location_provider == "http":
        return HttpLocationProvider(config.location_endpoint, source_epsg=config.location_source_epsg)
    if args.lat is None or args.lon is None:
        return StaticLocationProvider(None)
    return StaticLocationProvider(Coordinate(latitude=args.lat, longitude=args.lon))


def build_dispatch_sink(config: SurveyConfig, args: argparse.Namespace) -> DispatchSink:
    if args.no_dispatch or config.dispatch_channel == "none":
        return NullDispatchSink()
    if config.dispatch_channel == "webhook":
        return WebhookDispatchSink(config.webhook_url)
    return WhatsAppLinkSink(config.dispatch_number)


def _print_records(session: SurveySession) -> None:
    records = session.records()
    print(f"Hydrant Registry ({len(records)}) - {session.area_label}")
    if not records:
        print("No hydrants added yet")
        return
    for position, record in reversed(list(enumerate(records, start=1))):
        print(f"#{position} {record.label} ({record.latitude:.5f}, {record.longitude:.5f}) {record.display_code}")


def execute_command(args: argparse.Namespace, config: SurveyConfig, session: SurveySession, data_dir: Path) -> int:
    if args.command == "setup":
        session.setup(args.area)
        print(f"Survey started for {session.area_label} (station {config.station_id})")
    elif args.command == "capture":
        flow = CaptureFlow(
            session,
            build_location_provider(config, args),
            build_dispatch_sink(config, args),
            station_id=config.station_id,
            suffix=config.suffix,
            timeout_seconds=config.location_timeout_seconds,
        )
        result = flow.capture(args.label or "")
        print(result.message)
        if not result.dispatched:
            return EXIT_PARTIAL
    elif args.command == "list":
        _print_records(session)
    elif args.command == "report":
        model = compile_report(session.snapshot(), config.station_id)
        out_dir = Path(args.out_dir) if args.out_dir else data_dir / "reports"
        print(write_report(model, out_dir, args.report_format))
    elif args.command == "reset":
        if not args.yes:
            print("Refusing to clear all data without --yes; this cannot be undone.")
            return EXIT_PARTIAL
        session.reset()
        print("All survey data cleared")
    else:
        raise ValueError(f"Unknown command: {args.command}")
    return EXIT_SUCCESS


def run_command(args: argparse.Namespace) -> int:
    data_dir = Path(args.data_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None

    logger = build_logger(data_dir=data_dir, level=args.log_level)
    config = load_survey_config(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
    session = SurveySession.restore(
        JsonFileBlobStore(data_dir / "state"),
        key=config.storage_key,
        default_area_label=config.default_area_label,
    )

    log_event(logger, "command start", station=config.station_id, event="COMMAND_START", status="ok")
    try:
        exit_code = execute_command(args, config, session, data_dir)
    except USER_CORRECTABLE_ERRORS as exc:
        log_event(
            logger,
            str(exc),
            station=config.station_id,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        print(str(exc), file=sys.stderr)
        return EXIT_PARTIAL
    log_event(logger, "command end", station=config.station_id, event="COMMAND_END", status="ok")
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL
    except SurveyError as exc:
        print(f"{exc.error_code}: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
