import os
from pathlib import Path

API_BASE_URL = os.environ.get("GEOQUERY_API_BASE_URL", "http://localhost:3000/api").rstrip("/")

# Timeout for spatial-index service calls
HTTP_TIMEOUT_SEC = float(os.environ.get("GEOQUERY_HTTP_TIMEOUT", "25.0"))

USER_AGENT = os.environ.get("GEOQUERY_USER_AGENT", "GeoQuery-Console/1.0")

ARTIFACTS_DIR = Path(os.environ.get("ARTIFACTS_DIR", "artifacts")).resolve()

# Initial map view (Jodhpur, India)
DEFAULT_CENTER = (26.4753, 73.1173)
DEFAULT_ZOOM = 13
TILES = os.environ.get("GEOQUERY_TILES", "OpenStreetMap")
FIT_PADDING = (50, 50)
