import os
from dotenv import load_dotenv

load_dotenv()

# --- Overpass (OpenStreetMap) ---
OVERPASS_URL = os.getenv("OVERPASS_URL", "https://overpass-api.de/api/interpreter")

# Upstream request timeout in seconds, kept within 15-30s
REQUEST_TIMEOUT_S = min(30.0, max(15.0, float(os.getenv("REQUEST_TIMEOUT_S", "15"))))
# Server-side timeout embedded in the Overpass query itself
OVERPASS_QUERY_TIMEOUT_S = 25

# --- Admin ---
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:8000,http://localhost:3000").split(",")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- Discovery ---
DEFAULT_RADIUS_M = 1000.0
MAX_RESULTS = 50

# Venue tags requested from Overpass: (key, value)
PUB_TAGS = [
    ("amenity", "pub"),
    ("amenity", "bar"),
    ("amenity", "biergarten"),
    ("craft", "brewery"),
]

# --- Cache ---
CACHE_TTL_S = float(os.getenv("CACHE_TTL_S", "300"))  # 5 minutes
CACHE_PRECISION = 4  # decimal places, ~11 m grid

# --- Fallback ---
MOCK_MAX_OFFSET_DEG = 0.005  # ~500 m

# Default location (London) when the device location is unavailable
DEFAULT_LAT = 51.5074
DEFAULT_LON = -0.1278
