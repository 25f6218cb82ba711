from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

from geoquery import settings
from geoquery.bbox import bounds_of, circle_bounds, derive_bounding_box
from geoquery.client import SpatialIndexClient
from geoquery.errors import BackendError, GeoQueryError
from geoquery.models import Circle, GeoPoint, IntersectionRequest, MarkerRole, Polygon, QueryOutcome
from geoquery.overlay import OverlayState
from geoquery.parsing import parse_point, parse_points, parse_radius

log = logging.getLogger("uvicorn.error")

Notifier = Callable[[str], None]


def _log_notifier(message: str) -> None:
    log.warning("User notice: %s", message)


class QueryOrchestrator:
    """Runs the console actions against one overlay state and one backend client.

    Nearest-neighbour, range and intersection queries clear the map when they
    start and bump the generation; a response that comes back after a newer
    query has started is dropped instead of being drawn.
    """

    def __init__(
        self,
        client: SpatialIndexClient,
        overlay: OverlayState,
        notify: Optional[Notifier] = None,
    ) -> None:
        self.client = client
        self.overlay = overlay
        self.notify = notify or _log_notifier
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _begin_query(self) -> int:
        self._generation += 1
        self.overlay.clear_all()
        return self._generation

    def _is_stale(self, generation: int, action: str) -> bool:
        if generation == self._generation:
            return False
        log.info("Discarding stale %s response (generation %s, current %s)", action, generation, self._generation)
        return True

    def _fail(self, exc: GeoQueryError, action: str) -> QueryOutcome:
        log.warning("%s failed: %s", action, exc.message)
        self.notify(exc.message)
        return QueryOutcome(ok=False, message=exc.message, error_kind=type(exc).__name__)

    def _fail_query(self, exc: BackendError, action: str, generation: int) -> QueryOutcome:
        if self._is_stale(generation, action.lower()):
            return QueryOutcome(ok=False, stale=True, message=exc.message, error_kind=type(exc).__name__)
        return self._fail(exc, action)

    async def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except BackendError:
            raise
        except Exception as exc:
            log.exception("Unexpected error calling %s", getattr(fn, "__name__", fn))
            raise BackendError(
                "Unexpected error while talking to the spatial index service",
                status_class="response",
            ) from exc

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    async def add_point(self, point: GeoPoint) -> QueryOutcome:
        generation = self._generation
        try:
            await self._call(self.client.add_point, point)
        except BackendError as exc:
            return self._fail(exc, "Add point")
        if self._is_stale(generation, "add point"):
            return QueryOutcome(ok=True, stale=True, results=[point])
        self.overlay.add_marker(point, MarkerRole.ADDED)
        log.info("Added point %s,%s", point.lat, point.lng)
        return QueryOutcome(ok=True, results=[point])

    async def nearest_neighbor(self, location: str) -> QueryOutcome:
        try:
            query = parse_point(location)
        except GeoQueryError as exc:
            return self._fail(exc, "Nearest neighbor")

        generation = self._begin_query()
        try:
            nearest = await self._call(self.client.nearest_neighbor, query)
        except BackendError as exc:
            return self._fail_query(exc, "Nearest neighbor", generation)
        if self._is_stale(generation, "nearest neighbor"):
            return QueryOutcome(ok=False, stale=True)

        self.overlay.add_marker(query, MarkerRole.QUERY, tooltip="Query Point")
        self.overlay.add_marker(nearest, MarkerRole.RESULT, tooltip="Nearest Point")
        self.overlay.surface.fit_bounds(bounds_of([query, nearest]), settings.FIT_PADDING)
        log.info("Nearest neighbor of %s,%s is %s,%s", query.lat, query.lng, nearest.lat, nearest.lng)
        return QueryOutcome(ok=True, results=[nearest])

    async def range_query(self, center_text: str, radius_text: str) -> QueryOutcome:
        try:
            center = parse_point(center_text)
            radius_km = parse_radius(radius_text)
        except GeoQueryError as exc:
            return self._fail(exc, "Range query")
        box = derive_bounding_box(center, radius_km)

        generation = self._begin_query()
        try:
            points: List[GeoPoint] = await self._call(self.client.range_query, box)
        except BackendError as exc:
            return self._fail_query(exc, "Range query", generation)
        if self._is_stale(generation, "range query"):
            return QueryOutcome(ok=False, stale=True)

        circle = Circle(center=center, radius_m=radius_km * 1000.0)
        self.overlay.set_region(circle)
        for point in points:
            self.overlay.add_marker(point, MarkerRole.RESULT, color="green", tooltip="Found Point")
        self.overlay.surface.fit_bounds(circle_bounds(center, circle.radius_m), settings.FIT_PADDING)
        log.info("Range query %s km around %s,%s returned %s points", radius_km, center.lat, center.lng, len(points))
        return QueryOutcome(ok=True, results=points)

    async def intersection(self, area_text: str) -> QueryOutcome:
        try:
            vertices = parse_points(area_text)
        except GeoQueryError as exc:
            return self._fail(exc, "Intersection")

        generation = self._begin_query()
        try:
            points: List[GeoPoint] = await self._call(
                self.client.intersection, IntersectionRequest.from_vertices(vertices)
            )
        except BackendError as exc:
            return self._fail_query(exc, "Intersection", generation)
        if self._is_stale(generation, "intersection"):
            return QueryOutcome(ok=False, stale=True)

        self.overlay.set_region(Polygon(vertices=tuple(vertices)))
        self.overlay.surface.fit_bounds(bounds_of(vertices), settings.FIT_PADDING)
        for point in points:
            self.overlay.add_marker(point, MarkerRole.RESULT, tooltip="Intersecting Point")
        log.info("Intersection over %s vertices returned %s points", len(vertices), len(points))
        return QueryOutcome(ok=True, results=points)


__all__ = ["QueryOrchestrator", "Notifier"]
