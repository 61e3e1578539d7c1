"""FastAPI application for finding nearby pubs."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Query, HTTPException, Header, Depends, Request
from fastapi.middleware.cors import CORSMiddleware

import config
from geo import with_distances
from location import FixedLocationProvider, LocationProvider, resolve_location
from models import Coordinate, NearbyPub, PubsResponse
from pub_service import PubService

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with httpx.AsyncClient() as client:
        app.state.pub_service = PubService(client=client)
        app.state.location_provider = FixedLocationProvider()
        logger.info("Pub service ready (Overpass: %s)", config.OVERPASS_URL)
        yield


app = FastAPI(title="Pub Finder", version="1.0.0", lifespan=lifespan)

# CORS: allow frontend origin(s)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_pub_service(request: Request) -> PubService:
    return request.app.state.pub_service


def get_location_provider(request: Request) -> LocationProvider:
    return request.app.state.location_provider


# ---------- Admin auth for write endpoints ----------

async def verify_admin(x_api_key: str = Header(default="")):
    """Protect write endpoints with an API key. No key configured = allow (local dev)."""
    admin_key = config.ADMIN_API_KEY
    if not admin_key:
        return
    if x_api_key != admin_key:
        raise HTTPException(403, "Invalid or missing API key")


async def _location(
    lat: float | None,
    lon: float | None,
    provider: LocationProvider,
) -> Coordinate:
    if lat is None and lon is None:
        return await resolve_location(provider)
    if lat is None or lon is None:
        raise HTTPException(400, "Provide both lat and lon, or neither")
    return Coordinate(latitude=lat, longitude=lon)


def _response(location: Coordinate, radius: float, pubs, is_mock_data: bool) -> PubsResponse:
    nearby = [
        NearbyPub(**pub.model_dump(), distance_km=round(d, 3))
        for pub, d in with_distances(pubs, location)
    ]
    return PubsResponse(
        count=len(nearby),
        is_mock_data=is_mock_data,
        location=location,
        radius_m=radius,
        pubs=nearby,
    )


# ---------- Health check ----------

@app.get("/health")
async def health():
    return {"status": "ok"}


# ---------- Pubs ----------

@app.get("/pubs", response_model=PubsResponse)
async def get_nearby_pubs(
    lat: float | None = Query(None, ge=-90, le=90, description="Latitude"),
    lon: float | None = Query(None, ge=-180, le=180, description="Longitude"),
    radius: float = Query(config.DEFAULT_RADIUS_M, gt=0, le=10_000, description="Search radius in meters"),
    service: PubService = Depends(get_pub_service),
    provider: LocationProvider = Depends(get_location_provider),
):
    location = await _location(lat, lon, provider)
    pubs = await service.find_nearby(location, radius)
    return _response(location, radius, pubs, any(p.is_mock for p in pubs))


@app.get("/pubs/search", response_model=PubsResponse)
async def search_nearby_pubs(
    q: str = Query("", description="Matches name, category, cuisine or address"),
    lat: float | None = Query(None, ge=-90, le=90, description="Latitude"),
    lon: float | None = Query(None, ge=-180, le=180, description="Longitude"),
    radius: float = Query(config.DEFAULT_RADIUS_M, gt=0, le=10_000, description="Search radius in meters"),
    service: PubService = Depends(get_pub_service),
    provider: LocationProvider = Depends(get_location_provider),
):
    location = await _location(lat, lon, provider)
    pubs = await service.find_nearby(location, radius)
    # Flag from the unfiltered list so a search cannot hide the fallback
    is_mock_data = any(p.is_mock for p in pubs)
    return _response(location, radius, service.search(pubs, q), is_mock_data)


@app.delete("/cache", dependencies=[Depends(verify_admin)])
async def clear_cache(service: PubService = Depends(get_pub_service)):
    service.clear_cache()
    return {"message": "Cache cleared"}


# ---------- Config (read-only) ----------

@app.get("/config")
async def get_config():
    return {
        "overpass_url": config.OVERPASS_URL,
        "default_radius_m": config.DEFAULT_RADIUS_M,
        "max_results": config.MAX_RESULTS,
        "cache_ttl_s": config.CACHE_TTL_S,
        "request_timeout_s": config.REQUEST_TIMEOUT_S,
        "default_location": {"latitude": config.DEFAULT_LAT, "longitude": config.DEFAULT_LON},
        "venue_tags": [f"{k}={v}" for k, v in config.PUB_TAGS],
    }
