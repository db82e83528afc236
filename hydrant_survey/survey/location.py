"""Location providers: single-shot coordinate requests with a bounded timeout."""

from __future__ import annotations

from typing import Any, Protocol

import requests
from pyproj import CRS, Transformer

from hydrant_survey.common.errors import LocationDenied, LocationTimeout, LocationUnavailable
from hydrant_survey.common.http import SINGLE_SHOT, HttpClient, HttpRequestError, TimeoutConfig
from hydrant_survey.survey.models import Coordinate, is_valid_lat_lon

WGS84_EPSG = 4326
DENIED_STATUS_CODES = {401, 403}


class LocationProvider(Protocol):
    def request_coordinate(self, timeout_seconds: float) -> Coordinate: ...


class StaticLocationProvider:
    """Returns a fixed coordinate; ``None`` behaves like a device without a sensor."""

    def __init__(self, coordinate: Coordinate | None) -> None:
        self.coordinate = coordinate

    def request_coordinate(self, timeout_seconds: float) -> Coordinate:
        if self.coordinate is None:
            raise LocationUnavailable("Geolocation is not supported on this device.")
        return self.coordinate


def _safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _first_present(payload: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def transform_to_wgs84(lat: float, lon: float, source_epsg: int) -> tuple[float, float] | None:
    if source_epsg == WGS84_EPSG:
        return lat, lon
    try:
        transformer = Transformer.from_crs(CRS.from_epsg(source_epsg), CRS.from_epsg(WGS84_EPSG), always_xy=True)
        transformed_lon, transformed_lat = transformer.transform(lon, lat)
        return transformed_lat, transformed_lon
    except Exception:
        return None


class HttpLocationProvider:
    """Reads a position fix from a JSON endpoint such as a GPS receiver bridge.

    The payload carries ``latitude``/``longitude`` (or ``lat``/``lon``) in the
    CRS given by ``source_epsg``; projected fixes are y/x in that order.
    """

    def __init__(self, endpoint: str, *, source_epsg: int = WGS84_EPSG, client: HttpClient | None = None) -> None:
        self.endpoint = endpoint
        self.source_epsg = source_epsg
        self.client = client or HttpClient(retry=SINGLE_SHOT)

    def _fetch(self, timeout_seconds: float) -> dict:
        timeout = TimeoutConfig(connect=timeout_seconds, read=timeout_seconds)
        try:
            return self.client.get_json(self.endpoint, timeout=timeout)
        except requests.exceptions.Timeout as exc:
            raise LocationTimeout(f"Location request exceeded {timeout_seconds:g}s") from exc
        except requests.exceptions.RequestException as exc:
            raise LocationUnavailable("Location service is unreachable.") from exc
        except HttpRequestError as exc:
            if exc.status_code in DENIED_STATUS_CODES:
                raise LocationDenied("Location permission was denied.") from exc
            raise LocationUnavailable(f"Location service failed: {exc}") from exc

    def request_coordinate(self, timeout_seconds: float) -> Coordinate:
        payload = self._fetch(timeout_seconds)
        if not isinstance(payload, dict):
            raise LocationUnavailable("Location service returned an unusable fix.")

        raw_lat = _safe_float(_first_present(payload, ("latitude", "lat")))
        raw_lon = _safe_float(_first_present(payload, ("longitude", "lon", "lng")))
        if raw_lat is None or raw_lon is None:
            raise LocationUnavailable("Location service returned an unusable fix.")

        transformed = transform_to_wgs84(raw_lat, raw_lon, self.source_epsg)
        if transformed is None or not is_valid_lat_lon(*transformed):
            raise LocationUnavailable("Location fix could not be placed in WGS84.")
        lat, lon = transformed
        return Coordinate(latitude=lat, longitude=lon)
