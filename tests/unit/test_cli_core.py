from hydrant_survey.cli import build_dispatch_sink, build_location_provider, parse_args
from hydrant_survey.common.config_loader import AreaSuffix, SurveyConfig
from hydrant_survey.survey.dispatch import NullDispatchSink, WebhookDispatchSink, WhatsAppLinkSink
from hydrant_survey.survey.location import HttpLocationProvider, StaticLocationProvider
from hydrant_survey.survey.models import Coordinate


def _config(**overrides):
    values = dict(
        station_id="RS-02",
        dispatch_number="03000710042",
        default_area_label="Main Bazar",
        suffix=AreaSuffix("Gujranwala", "Punjab", "Pakistan"),
        storage_key="hydrant_session",
        location_provider="static",
        location_timeout_seconds=10.0,
        location_endpoint=None,
        location_source_epsg=4326,
        dispatch_channel="whatsapp",
        webhook_url=None,
    )
    values.update(overrides)
    return SurveyConfig(**values)


def test_parse_args_defaults():
    args = parse_args(["list"])
    assert args.command == "list"
    assert args.area == ""
    assert args.report_format == "json"
    assert args.overlay_config_dir is None
    assert args.yes is False


def test_parse_args_capture_coordinates():
    args = parse_args(["capture", "--label", "Near Main Gate", "--lat", "32.18644", "--lon", "74.19079"])
    assert args.label == "Near Main Gate"
    assert args.lat == 32.18644
    assert args.lon == 74.19079


def test_build_location_provider_static_and_http():
    static = build_location_provider(_config(), parse_args(["capture", "--lat", "1", "--lon", "2"]))
    assert isinstance(static, StaticLocationProvider)
    assert static.coordinate == Coordinate(1.0, 2.0)

    missing = build_location_provider(_config(), parse_args(["capture"]))
    assert missing.coordinate is None

    http = build_location_provider(
        _config(location_provider="http", location_endpoint="http://gps.local/fix"),
        parse_args(["capture"]),
    )
    assert isinstance(http, HttpLocationProvider)


def test_build_dispatch_sink_by_channel():
    assert isinstance(build_dispatch_sink(_config(), parse_args(["capture"])), WhatsAppLinkSink)
    assert isinstance(build_dispatch_sink(_config(), parse_args(["capture", "--no-dispatch"])), NullDispatchSink)
    assert isinstance(build_dispatch_sink(_config(dispatch_channel="none"), parse_args(["capture"])), NullDispatchSink)
    webhook = build_dispatch_sink(
        _config(dispatch_channel="webhook", webhook_url="https://hooks.example/d"),
        parse_args(["capture"]),
    )
    assert isinstance(webhook, WebhookDispatchSink)
