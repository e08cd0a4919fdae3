"""
Distance calculation using the Haversine formula.

Assumption
----------
Transfers are judged on great-circle (Haversine) distance rather than road
distance.  When a profile carries no precise coordinates, the district it
names is resolved through a static table of Bihar district centroids.

Complexity: O(1) per call.
"""

from __future__ import annotations

import math
import re
from typing import Optional

from .entities import Location

EARTH_RADIUS_KM = 6_371.0


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


# ── District centroids ────────────────────────────────────────────────


DISTRICT_COORDINATES: dict[str, Location] = {
    "patna": Location(25.5941, 85.1376),
    "gaya": Location(24.7955, 85.0002),
    "muzaffarpur": Location(26.1209, 85.3647),
    "darbhanga": Location(26.1542, 85.8918),
    "bhagalpur": Location(25.2425, 86.9842),
    "saharsa": Location(25.8781, 86.5975),
    "purnia": Location(25.7776, 87.4753),
    "katihar": Location(25.5386, 87.5819),
    "begusarai": Location(25.4182, 86.1272),
    "samastipur": Location(25.8538, 85.7800),
    "chapra": Location(25.7805, 84.7477),
    "sitamarhi": Location(26.5947, 85.4897),
    "madhubani": Location(26.3489, 86.0644),
    "supaul": Location(26.1266, 86.6025),
    "araria": Location(26.1477, 87.5081),
    "kishanganj": Location(26.1086, 87.9542),
    "aurangabad": Location(24.7521, 84.3742),
    "jehanabad": Location(25.2078, 84.9869),
    "nalanda": Location(25.1372, 85.4441),
    "nawada": Location(24.8813, 85.5431),
    "rohtas": Location(24.9565, 84.0134),
    "buxar": Location(25.5621, 83.9730),
    "kaimur": Location(25.0408, 83.6122),
    "gopalganj": Location(26.4676, 84.4358),
    "siwan": Location(26.2194, 84.3608),
    "saran": Location(25.9222, 84.7411),
    "vaishali": Location(25.7207, 85.1303),
    "east_champaran": Location(26.6447, 84.9259),
    "west_champaran": Location(27.2307, 84.2595),
    "sheohar": Location(26.5189, 85.2961),
    "madhepura": Location(25.9215, 86.7906),
    "khagaria": Location(25.5017, 86.4751),
    "munger": Location(25.3766, 86.4731),
    "lakhisarai": Location(25.1726, 86.0920),
    "sheikhpura": Location(25.1394, 85.8500),
    "jamui": Location(24.9267, 86.2264),
    "banka": Location(24.8881, 86.9219),
    "arwal": Location(25.2520, 84.6819),
}

_WHITESPACE = re.compile(r"\s+")


def normalize_district(name: str) -> str:
    """``"East Champaran"`` -> ``"east_champaran"``."""
    return _WHITESPACE.sub("_", name.lower())


def get_district_coordinates(name: Optional[str]) -> Optional[Location]:
    """Centroid of the named district, or ``None`` if it is not in the table."""
    if not name:
        return None
    return DISTRICT_COORDINATES.get(normalize_district(name))


def resolve_location(*candidates: Optional[Location]) -> Optional[Location]:
    """
    Return the first available location, most specific first.

    Callers pass precise coordinates before the district fallback, e.g.
    ``resolve_location(school, current, get_district_coordinates(district))``.
    """
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def distance_between(a: Optional[Location], b: Optional[Location]) -> float:
    """Haversine distance between two resolved points; 0 when either is missing."""
    if a is None or b is None:
        return 0.0
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)
