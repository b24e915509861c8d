"""Rendering surface interface and marker icon defaults.

The engine never draws anything itself. A :class:`RenderingSurface` is
handed to :class:`~pyshiptrack.view.TrackingView` and receives every
:class:`~pyshiptrack.route_view.RouteView` the view derives.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Protocol

from pyshiptrack.route_view import MarkerKind, RouteView

_logger = logging.getLogger(__name__)

_LEAFLET_IMAGES = "https://unpkg.com/leaflet@1.9.4/dist/images"


class RenderingSurface(Protocol):
    """Anything that can draw a route view (a map widget, a terminal, a test double)."""

    def render(self, view: RouteView) -> None:
        ...

    def clear(self) -> None:
        ...


@dataclasses.dataclass(frozen=True)
class IconSet:
    """Default marker image URLs for map libraries with a global icon config."""

    icon_url: str
    icon_retina_url: str
    shadow_url: str


DEFAULT_ICONS = IconSet(
    icon_url=f"{_LEAFLET_IMAGES}/marker-icon.png",
    icon_retina_url=f"{_LEAFLET_IMAGES}/marker-icon-2x.png",
    shadow_url=f"{_LEAFLET_IMAGES}/marker-shadow.png",
)


@dataclasses.dataclass(frozen=True)
class MarkerIconSpec:
    """Pixel size and anchor of a marker glyph."""

    size: tuple[int, int]
    anchor: tuple[int, int]


_MARKER_ICONS: dict[MarkerKind, MarkerIconSpec] = {
    MarkerKind.ORIGIN: MarkerIconSpec(size=(36, 36), anchor=(18, 32)),
    MarkerKind.DESTINATION: MarkerIconSpec(size=(36, 36), anchor=(18, 32)),
    MarkerKind.LIVE: MarkerIconSpec(size=(52, 52), anchor=(26, 26)),
}


def marker_icon(kind: MarkerKind) -> MarkerIconSpec:
    return _MARKER_ICONS[kind]


class IconRegistry:
    """Process-wide icon defaults of a rendering adapter."""

    def __init__(self) -> None:
        self._icons: IconSet | None = None

    @property
    def icons(self) -> IconSet | None:
        return self._icons

    @property
    def installed(self) -> bool:
        return self._icons is not None

    def set_icons(self, icons: IconSet) -> None:
        self._icons = icons


def install_default_icons(registry: IconRegistry, icons: IconSet = DEFAULT_ICONS) -> bool:
    """Install *icons* once. Returns ``False`` if defaults were already set.

    Called by rendering adapters at startup, never by the engine.
    """
    if registry.installed:
        return False
    registry.set_icons(icons)
    _logger.debug("Installed default marker icons from %s", icons.icon_url)
    return True
