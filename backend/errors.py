"""Failure types raised around pub discovery.

None of these escape PubService.find_nearby; they are converted into the
mock-data fallback there.
"""


class PubDiscoveryError(Exception):
    pass


class PermissionDenied(PubDiscoveryError):
    """The location provider was not allowed to read the device position."""


class NetworkFailure(PubDiscoveryError):
    """Timeout, DNS failure or dropped connection talking to Overpass."""


class UpstreamError(PubDiscoveryError):
    """Overpass answered with a non-2xx status or an unreadable body."""


class NoCoordinateData(PubDiscoveryError):
    """An Overpass element carried neither a point nor a centre coordinate."""
