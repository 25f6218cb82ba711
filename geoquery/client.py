from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from geoquery import settings
from geoquery.errors import BackendError
from geoquery.models import BoundingBox, GeoPoint, IntersectionRequest

log = logging.getLogger("uvicorn.error")

_POINT_LIST = TypeAdapter(List[GeoPoint])


class SpatialIndexClient:
    """Thin client for the spatial-index service REST API (``/api``)."""

    def __init__(
        self,
        base_url: str = settings.API_BASE_URL,
        *,
        timeout: float = settings.HTTP_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, path: str, payload: Dict[str, Any], failure: str) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.post(
                url,
                json=payload,
                headers={"User-Agent": settings.USER_AGENT, "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.warning("POST %s failed: %s: %s", url, type(exc).__name__, exc)
            raise BackendError(failure, status_class="network") from exc
        if not 200 <= r.status_code < 300:
            log.warning("POST %s returned HTTP %s body=%s", url, r.status_code, (r.text or "")[:200])
            raise BackendError.from_status(failure, r.status_code)
        return r

    @staticmethod
    def _json(r: requests.Response, failure: str) -> Any:
        try:
            return r.json()
        except ValueError as exc:
            raise BackendError(failure, status_class="response", status_code=r.status_code) from exc

    def add_point(self, point: GeoPoint) -> None:
        self._post("/point", point.model_dump(), "Failed to add point to the system")

    def nearest_neighbor(self, point: GeoPoint) -> GeoPoint:
        failure = "Failed to find nearest neighbor"
        r = self._post("/nearest_neighbor", point.model_dump(), failure)
        try:
            return GeoPoint.model_validate(self._json(r, failure))
        except ValidationError as exc:
            raise BackendError(failure, status_class="response", status_code=r.status_code) from exc

    def range_query(self, box: BoundingBox) -> List[GeoPoint]:
        failure = "Failed to execute range query"
        r = self._post("/range_query", box.model_dump(), failure)
        return self._points(r, failure)

    def intersection(self, request: IntersectionRequest) -> List[GeoPoint]:
        failure = "Failed to detect intersections"
        r = self._post("/intersection", {"points": [list(p) for p in request.points]}, failure)
        return self._points(r, failure)

    def _points(self, r: requests.Response, failure: str) -> List[GeoPoint]:
        try:
            return _POINT_LIST.validate_python(self._json(r, failure))
        except ValidationError as exc:
            raise BackendError(failure, status_class="response", status_code=r.status_code) from exc


__all__ = ["SpatialIndexClient"]
