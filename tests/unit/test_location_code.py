import re

from hydrant_survey.survey.location_code import compose_display_code, encode
from hydrant_survey.survey.models import Coordinate

CODE_RE = re.compile(r"^[0-9A-F]{4}\+[0-9A-F]{2}$")


def test_encode_is_deterministic():
    coordinate = Coordinate(32.186440, 74.190790)
    assert encode(coordinate) == encode(Coordinate(32.186440, 74.190790))
    assert encode(coordinate) == encode(coordinate)


def test_encode_matches_previously_issued_codes():
    assert encode(Coordinate(32.186440, 74.190790)) == "004F+A0"
    assert encode(Coordinate(0.0, 0.0)) == "0067+84"
    assert encode(Coordinate(-90.0, -180.0)) == "0000+00"


def test_encode_boundary_values_use_epsilon_adjustment():
    at_bound = encode(Coordinate(90.0, 180.0))
    near_bound = encode(Coordinate(90 - 1e-9, 180 - 1e-9))

    assert CODE_RE.match(at_bound)
    assert CODE_RE.match(near_bound)
    assert at_bound == "00CF+09"
    assert near_bound == at_bound


def test_encode_clamps_out_of_range_input():
    assert encode(Coordinate(120.0, 400.0)) == encode(Coordinate(90.0, 180.0))
    assert encode(Coordinate(-95.0, -181.0)) == encode(Coordinate(-90.0, -180.0))


def test_compose_display_code_appends_regional_suffix():
    display = compose_display_code("004F+A0", "Main Bazar", "Gujranwala", "Punjab", "Pakistan")
    assert display == "004F+A0, Main Bazar, Gujranwala, Punjab, Pakistan"
