from __future__ import annotations

from typing import Any, Dict, List, Optional

from geoquery.models import ROLE_COLORS, Circle, GeoPoint, MarkerRole, OverlayMarker, Polygon, Region
from geoquery.surface import RenderingSurface


class OverlayState:
    """What is currently drawn: an ordered list of markers and at most one region.

    Every mutation is pushed to the surface immediately.
    """

    def __init__(self, surface: RenderingSurface) -> None:
        self.surface = surface
        self._markers: List[OverlayMarker] = []
        self._region: Optional[Region] = None
        self._region_handle: Optional[int] = None

    @property
    def markers(self) -> List[OverlayMarker]:
        return list(self._markers)

    @property
    def region(self) -> Optional[Region]:
        return self._region

    def is_empty(self) -> bool:
        return not self._markers and self._region is None

    def clear_all(self) -> None:
        for marker in self._markers:
            self.surface.remove_layer(marker.handle)
        self._markers = []
        self._drop_region()
        self.surface.reset_view()

    def add_marker(
        self,
        point: GeoPoint,
        role: MarkerRole,
        color: Optional[str] = None,
        tooltip: Optional[str] = None,
    ) -> int:
        tag = color or ROLE_COLORS[role]
        handle = self.surface.add_marker(point, tag, tooltip)
        self._markers.append(OverlayMarker(point=point, role=role, color=tag, handle=handle))
        return handle

    def set_region(self, region: Region) -> int:
        self._drop_region()
        if isinstance(region, Circle):
            handle = self.surface.draw_circle(region.center, region.radius_m)
        elif isinstance(region, Polygon):
            handle = self.surface.draw_polygon(region.vertices)
        else:
            raise TypeError(f"Unsupported region overlay: {type(region).__name__}")
        self._region = region
        self._region_handle = handle
        return handle

    def _drop_region(self) -> None:
        if self._region_handle is not None:
            self.surface.remove_layer(self._region_handle)
        self._region = None
        self._region_handle = None

    def snapshot(self) -> Dict[str, Any]:
        region: Optional[Dict[str, Any]] = None
        if isinstance(self._region, Circle):
            region = {
                "type": "circle",
                "center": self._region.center.model_dump(),
                "radius_m": self._region.radius_m,
            }
        elif isinstance(self._region, Polygon):
            region = {
                "type": "polygon",
                "vertices": [v.model_dump() for v in self._region.vertices],
            }
        return {
            "markers": [
                {"lat": m.point.lat, "lng": m.point.lng, "role": m.role.value, "color": m.color}
                for m in self._markers
            ],
            "region": region,
        }


__all__ = ["OverlayState"]
