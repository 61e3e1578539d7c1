"""Pydantic models for pubs, coordinates and API responses."""

from pydantic import BaseModel, ConfigDict, Field

UNNAMED_PUB = "Unnamed Pub"
NO_ADDRESS = "Address not available"


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class Pub(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = UNNAMED_PUB
    coordinate: Coordinate
    category: str = "pub"
    address: str = NO_ADDRESS
    phone: str | None = None
    website: str | None = None
    opening_hours: str | None = None
    cuisine: str | None = None
    description: str | None = None
    tags: dict[str, str] = Field(default_factory=dict)
    is_mock: bool = False


class NearbyPub(Pub):
    distance_km: float


class PubsResponse(BaseModel):
    count: int
    is_mock_data: bool
    location: Coordinate
    radius_m: float
    pubs: list[NearbyPub]
