import pytest

from sitqueue.helpers.geo import distance_in_feet
from sitqueue.model import Location

from tests.shared import BERLIN

FEET_PER_DEGREE_LAT = 364_812  # approx., with the radius used


def test_geo_distance():
    assert distance_in_feet(BERLIN, BERLIN) == 0

    north = Location(latitude=BERLIN.latitude + 0.001, longitude=BERLIN.longitude)
    assert distance_in_feet(BERLIN, north) == pytest.approx(
        FEET_PER_DEGREE_LAT / 1000, rel=1e-3
    )
    assert distance_in_feet(BERLIN, north) == distance_in_feet(north, BERLIN)

    a = Location(latitude=0, longitude=0)
    b = Location(latitude=0, longitude=180)
    assert distance_in_feet(a, b) == pytest.approx(20_902_231 * 3.141592653589793)
