"""Overpass API client: query construction and response normalization.

- Builds one Overpass QL union covering nodes and ways tagged as pub, bar,
  biergarten or brewery around a point.
- Ways are requested with `out center` so they carry a centroid.
- Elements are normalized into Pub models; elements without a usable
  coordinate are dropped before the result cap is applied.
"""

import asyncio
import logging

import httpx
from pydantic import ValidationError

import config
from errors import NetworkFailure, NoCoordinateData, UpstreamError
from models import NO_ADDRESS, UNNAMED_PUB, Coordinate, Pub

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ["addr:housenumber", "addr:street", "addr:city", "addr:postcode"]


def build_query(
    coordinate: Coordinate,
    radius_m: float,
    timeout_s: int = config.OVERPASS_QUERY_TIMEOUT_S,
) -> str:
    # Fixed-point only; Overpass QL does not accept exponent notation
    around = f"(around:{radius_m:.0f},{coordinate.latitude:.7f},{coordinate.longitude:.7f})"
    lines = [f"[out:json][timeout:{timeout_s}];", "("]
    for kind in ("node", "way"):
        for key, value in config.PUB_TAGS:
            lines.append(f'  {kind}["{key}"="{value}"]{around};')
    lines.append(");")
    lines.append("out center;")
    return "\n".join(lines)


def format_address(tags: dict) -> str:
    parts = [tags[f] for f in ADDRESS_FIELDS if tags.get(f)]
    return ", ".join(parts) if parts else NO_ADDRESS


def _element_coordinate(element: dict) -> Coordinate:
    lat, lon = element.get("lat"), element.get("lon")
    if lat is None or lon is None:
        center = element.get("center")
        if not isinstance(center, dict):
            center = {}
        lat, lon = center.get("lat"), center.get("lon")
    if lat is None or lon is None:
        raise NoCoordinateData(f"{element.get('type')}/{element.get('id')} has no coordinate")
    try:
        return Coordinate(latitude=lat, longitude=lon)
    except ValidationError as e:
        raise NoCoordinateData(f"{element.get('type')}/{element.get('id')}: {e}") from e


def parse_element(element: dict) -> Pub:
    coordinate = _element_coordinate(element)
    tags = element.get("tags")
    if not isinstance(tags, dict):
        tags = {}
    return Pub(
        id=f"osm-{element.get('type')}-{element.get('id')}",
        name=tags.get("name") or tags.get("name:en") or UNNAMED_PUB,
        coordinate=coordinate,
        category=tags.get("amenity") or tags.get("craft") or "pub",
        address=format_address(tags),
        phone=tags.get("phone") or tags.get("contact:phone"),
        website=tags.get("website") or tags.get("contact:website"),
        opening_hours=tags.get("opening_hours"),
        cuisine=tags.get("cuisine"),
        description=tags.get("description"),
        tags={str(k): str(v) for k, v in tags.items()},
    )


def parse_response(payload, limit: int = config.MAX_RESULTS) -> list[Pub]:
    """Normalize an Overpass JSON payload into at most `limit` pubs.

    A payload without `elements` counts as zero results, not as a failure.
    """
    if not isinstance(payload, dict):
        raise UpstreamError(f"Unexpected Overpass payload: {type(payload).__name__}")
    elements = payload.get("elements")
    if elements is None:
        logger.info("Overpass response has no elements; treating as empty")
        return []
    if not isinstance(elements, list):
        raise UpstreamError("Overpass 'elements' is not a list")

    pubs: list[Pub] = []
    dropped = 0
    for element in elements:
        if len(pubs) >= limit:
            break
        if not isinstance(element, dict):
            dropped += 1
            continue
        try:
            pubs.append(parse_element(element))
        except (NoCoordinateData, ValidationError) as e:
            logger.debug("Dropping element: %s", e)
            dropped += 1
    if dropped:
        logger.debug("Dropped %d unusable elements", dropped)
    return pubs


async def fetch_elements(
    client: httpx.AsyncClient,
    endpoint: str,
    query: str,
    timeout_s: float = config.REQUEST_TIMEOUT_S,
) -> dict:
    """POST a query to Overpass and return the decoded JSON body."""
    post = client.post(
        endpoint,
        content=query.encode("utf-8"),
        headers={"Content-Type": "text/plain"},
        timeout=timeout_s,
    )
    try:
        # httpx timeouts are per phase; wait_for bounds the whole exchange
        resp = await asyncio.wait_for(post, timeout_s)
    except (httpx.TimeoutException, asyncio.TimeoutError) as e:
        raise NetworkFailure(f"Overpass timed out after {timeout_s:g}s") from e
    except httpx.TransportError as e:
        raise NetworkFailure(f"Overpass unreachable: {e}") from e

    if not resp.is_success:
        raise UpstreamError(f"Overpass HTTP {resp.status_code}")
    try:
        return resp.json()
    except ValueError as e:
        raise UpstreamError("Overpass returned malformed JSON") from e
