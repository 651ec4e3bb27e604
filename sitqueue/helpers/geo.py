import math

from sitqueue.model import Location

EARTH_RADIUS_FEET = 20_902_231


def distance_in_feet(a: Location, b: Location) -> float:
    """
    Great-circle (haversine) distance between two locations in feet
    """
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.latitude))
        * math.cos(math.radians(b.latitude))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_FEET * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

