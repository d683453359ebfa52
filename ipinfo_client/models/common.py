from typing import Any, TypedDict


class Coordinates(TypedDict):
    """Latitude/longitude pair; either component may be None."""

    latitude: float | None
    longitude: float | None


def coerce_float(value: Any) -> float | None:
    """Convert a coordinate given as a string, number or null into a float.

    ipinfo.io returns coordinates as strings (inside `loc`) or numbers
    (`latitude`/`longitude`); anything that cannot be converted becomes None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_loc(loc: Any) -> Coordinates:
    """Split a combined "lat,lon" string into Coordinates."""
    parts = str(loc).split(",", 1)
    latitude = coerce_float(parts[0])
    longitude = coerce_float(parts[1]) if len(parts) > 1 else None
    return Coordinates(latitude=latitude, longitude=longitude)
