from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple

import folium

from geoquery import settings
from geoquery.bbox import LatLngBounds
from geoquery.models import GeoPoint

log = logging.getLogger("uvicorn.error")

REGION_STYLE = {"color": "blue", "fill_color": "#3388ff", "fill_opacity": 0.2}


class RenderingSurface(Protocol):
    """Drawing capability the overlay store renders through."""

    def add_marker(self, point: GeoPoint, color: str, tooltip: Optional[str] = None) -> int: ...

    def remove_layer(self, handle: int) -> None: ...

    def draw_circle(self, center: GeoPoint, radius_m: float, style: Optional[Dict] = None) -> int: ...

    def draw_polygon(self, vertices: Sequence[GeoPoint], style: Optional[Dict] = None) -> int: ...

    def fit_bounds(self, bounds: LatLngBounds, padding: Tuple[int, int] = settings.FIT_PADDING) -> None: ...

    def reset_view(self) -> None: ...


class FoliumSurface:
    """Keeps the live layers and renders them onto a fresh ``folium.Map`` on demand."""

    def __init__(
        self,
        center: Tuple[float, float] = settings.DEFAULT_CENTER,
        zoom: int = settings.DEFAULT_ZOOM,
        tiles: str = settings.TILES,
    ) -> None:
        self.center = center
        self.zoom = zoom
        self.tiles = tiles
        self._ids = itertools.count(1)
        self._layers: Dict[int, Callable[[], Any]] = {}
        self._bounds: Optional[LatLngBounds] = None
        self._padding: Tuple[int, int] = settings.FIT_PADDING

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    @property
    def bounds(self) -> Optional[LatLngBounds]:
        return self._bounds

    def _register(self, factory: Callable[[], Any]) -> int:
        handle = next(self._ids)
        self._layers[handle] = factory
        return handle

    def add_marker(self, point: GeoPoint, color: str, tooltip: Optional[str] = None) -> int:
        location = point.as_tuple()
        return self._register(
            lambda: folium.Marker(location, tooltip=tooltip, popup=tooltip, icon=folium.Icon(color=color))
        )

    def remove_layer(self, handle: int) -> None:
        self._layers.pop(handle, None)

    def draw_circle(self, center: GeoPoint, radius_m: float, style: Optional[Dict] = None) -> int:
        location = center.as_tuple()
        opts = dict(REGION_STYLE, **(style or {}))
        return self._register(lambda: folium.Circle(location, radius=radius_m, **opts))

    def draw_polygon(self, vertices: Sequence[GeoPoint], style: Optional[Dict] = None) -> int:
        latlngs = [v.as_tuple() for v in vertices]
        opts = dict(REGION_STYLE, **(style or {}))
        return self._register(lambda: folium.Polygon(latlngs, **opts))

    def fit_bounds(self, bounds: LatLngBounds, padding: Tuple[int, int] = settings.FIT_PADDING) -> None:
        self._bounds = bounds
        self._padding = padding

    def reset_view(self) -> None:
        self._bounds = None
        self._padding = settings.FIT_PADDING

    def to_map(self) -> folium.Map:
        m = folium.Map(location=self.center, zoom_start=self.zoom, tiles=self.tiles, control_scale=True)
        for factory in self._layers.values():
            factory().add_to(m)
        if self._bounds is not None:
            south_west, north_east = self._bounds
            m.fit_bounds([list(south_west), list(north_east)], padding=self._padding)
        return m

    def render_html(self) -> str:
        return self.to_map().get_root().render()

    def save(self, out_html: Path) -> Path:
        out_html.parent.mkdir(parents=True, exist_ok=True)
        self.to_map().save(str(out_html))
        log.info("Map written to %s (%s layers)", out_html, self.layer_count)
        return out_html


__all__ = ["RenderingSurface", "FoliumSurface", "REGION_STYLE"]
