"""Sample pubs served when Overpass cannot be reached."""

import random

import config
from geo import jitter
from models import Coordinate, Pub

# (name, address, category)
MOCK_PUBS = [
    ("The Red Lion", "123 High Street, London", "pub"),
    ("The Crown & Anchor", "456 King's Road, London", "pub"),
    ("The George Inn", "789 Queen Street, London", "pub"),
]


def mock_pubs_near(
    coordinate: Coordinate,
    rng: random.Random,
    max_offset_deg: float = config.MOCK_MAX_OFFSET_DEG,
) -> list[Pub]:
    """Scatter the sample pubs around the requested point so they plot nearby."""
    return [
        Pub(
            id=f"mock-{i}",
            name=name,
            coordinate=jitter(coordinate, max_offset_deg, rng),
            category=category,
            address=address,
            is_mock=True,
        )
        for i, (name, address, category) in enumerate(MOCK_PUBS, start=1)
    ]
