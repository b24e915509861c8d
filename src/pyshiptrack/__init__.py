"""pyshiptrack - Live shipment tracking and cost estimation engine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyshiptrack")
except PackageNotFoundError:
    __version__ = "0+local"
from pyshiptrack.client import TrackingClient
from pyshiptrack.config import TrackingConfig
from pyshiptrack.display import StatusStyle, format_eta, format_time_ago, staleness_label, status_style
from pyshiptrack.estimation import EstimationEngine, estimate_preview, validate_weight
from pyshiptrack.exceptions import (
    ShipTrackConfigError,
    ShipTrackError,
    ShipTrackFetchError,
    ShipTrackLocationError,
    ShipTrackNotFoundError,
)
from pyshiptrack.geomath import distance_km, estimate_cost, round_distance
from pyshiptrack.location import (
    DeviceLocationProvider,
    LocationErrorReason,
    LocationPicker,
    PickerMode,
    request_device_location,
)
from pyshiptrack.models import (
    Coordinate,
    CostPreview,
    NamedPoint,
    RouteSample,
    ShipmentRecord,
    ShipmentStatus,
    TrackingSnapshot,
    ViewportBounds,
)
from pyshiptrack.reconcile import PositionSource, ResolvedPosition, last_speed, resolve_position
from pyshiptrack.rendering import IconRegistry, RenderingSurface, install_default_icons
from pyshiptrack.route_view import RouteView, RouteViewState, build_route_view
from pyshiptrack.scheduler import RefreshScheduler, SchedulerState
from pyshiptrack.timeline import Milestone, TimelineStep, derive_timeline
from pyshiptrack.view import SnapshotFetcher, TrackingView

__all__ = [
    "__version__",
    "Coordinate",
    "CostPreview",
    "DeviceLocationProvider",
    "EstimationEngine",
    "IconRegistry",
    "LocationErrorReason",
    "LocationPicker",
    "Milestone",
    "NamedPoint",
    "PickerMode",
    "PositionSource",
    "RefreshScheduler",
    "RenderingSurface",
    "ResolvedPosition",
    "RouteSample",
    "RouteView",
    "RouteViewState",
    "SchedulerState",
    "ShipTrackConfigError",
    "ShipTrackError",
    "ShipTrackFetchError",
    "ShipTrackLocationError",
    "ShipTrackNotFoundError",
    "ShipmentRecord",
    "ShipmentStatus",
    "SnapshotFetcher",
    "StatusStyle",
    "TimelineStep",
    "TrackingClient",
    "TrackingConfig",
    "TrackingSnapshot",
    "TrackingView",
    "ViewportBounds",
    "build_route_view",
    "derive_timeline",
    "distance_km",
    "estimate_cost",
    "estimate_preview",
    "format_eta",
    "format_time_ago",
    "install_default_icons",
    "last_speed",
    "request_device_location",
    "resolve_position",
    "round_distance",
    "staleness_label",
    "status_style",
    "validate_weight",
]
