"""Location providers.

The device-side provider (GPS, permission prompts) lives in the client app;
the backend only needs something that answers "where is the user", with
London as the fallback whenever that answer is unavailable.
"""

import itertools
import logging
from typing import Callable, Protocol

import config
from errors import PermissionDenied
from models import Coordinate

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = Coordinate(latitude=config.DEFAULT_LAT, longitude=config.DEFAULT_LON)


class LocationProvider(Protocol):
    async def get_current_coordinate(self) -> Coordinate: ...

    def watch_coordinate(self, on_update: Callable[[Coordinate], None]) -> int: ...

    def cancel(self, handle: int) -> None: ...


class FixedLocationProvider:
    """Provider that always reports the same coordinate."""

    def __init__(self, coordinate: Coordinate = DEFAULT_LOCATION):
        self.coordinate = coordinate
        self._watchers: dict[int, Callable[[Coordinate], None]] = {}
        self._ids = itertools.count(1)

    async def get_current_coordinate(self) -> Coordinate:
        return self.coordinate

    def watch_coordinate(self, on_update: Callable[[Coordinate], None]) -> int:
        handle = next(self._ids)
        self._watchers[handle] = on_update
        on_update(self.coordinate)
        return handle

    def cancel(self, handle: int) -> None:
        self._watchers.pop(handle, None)

    def set_coordinate(self, coordinate: Coordinate) -> None:
        self.coordinate = coordinate
        for on_update in list(self._watchers.values()):
            on_update(coordinate)


async def resolve_location(provider: LocationProvider) -> Coordinate:
    """Ask the provider for a coordinate, falling back to DEFAULT_LOCATION."""
    try:
        return await provider.get_current_coordinate()
    except PermissionDenied:
        logger.warning("Location permission denied, using default location")
    except Exception as e:
        logger.error("Location error: %s; using default location", e)
    return DEFAULT_LOCATION
