"""Geo helpers: great-circle distance and small coordinate offsets."""

import math
import random

from models import Coordinate, Pub

R_KM = 6371.0  # mean Earth radius in kilometers


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Distance in kilometers between two coordinates (haversine formula)."""
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlam = math.radians(b.longitude - a.longitude)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    return 2 * R_KM * math.asin(min(1.0, math.sqrt(h)))


def with_distances(pubs: list[Pub], origin: Coordinate) -> list[tuple[Pub, float]]:
    """Pair each pub with its distance (km) from origin, keeping input order."""
    return [(pub, haversine_km(origin, pub.coordinate)) for pub in pubs]


def jitter(coordinate: Coordinate, max_offset_deg: float, rng: random.Random) -> Coordinate:
    """Shift a coordinate by up to max_offset_deg on each axis, clamped to valid range."""
    lat = coordinate.latitude + rng.uniform(-max_offset_deg, max_offset_deg)
    lon = coordinate.longitude + rng.uniform(-max_offset_deg, max_offset_deg)
    return Coordinate(
        latitude=min(90.0, max(-90.0, lat)),
        longitude=min(180.0, max(-180.0, lon)),
    )
