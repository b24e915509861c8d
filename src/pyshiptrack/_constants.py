"""Internal constants shared across the library."""

USER_AGENT = "pyshiptrack"

ROUTE_ENDPOINT = "/tracking/shipment/{shipment_id}/route"
SHIPMENT_ENDPOINT = "/shipments/{shipment_id}"
PUBLIC_TRACK_ENDPOINT = "/shipments/public/track"

# ------------------------------------------------------------------
# Great-circle distance
# ------------------------------------------------------------------

EARTH_RADIUS_KM = 6371.0

# ------------------------------------------------------------------
# Tiered pricing (whole currency units, mirrors the backend)
# ------------------------------------------------------------------

BASE_FEE = 200
FIRST_TIER_KM = 10.0
FIRST_TIER_RATE = 50
SECOND_TIER_KM = 50.0
SECOND_TIER_RATE = 40
BEYOND_RATE = 30

WEIGHT_THRESHOLD_KG = 20.0
WEIGHT_STEP_KG = 10.0
WEIGHT_STEP_SURCHARGE = 20

MAX_WEIGHT_KG = 10_000.0

# ------------------------------------------------------------------
# Refresh cadence
# ------------------------------------------------------------------

DEFAULT_REFRESH_INTERVAL = 30.0
DEFAULT_TICK_INTERVAL = 1.0
DEFAULT_FRESH_THRESHOLD = 5

# ------------------------------------------------------------------
# Location picker
# ------------------------------------------------------------------

#: Nairobi CBD, used when no initial location is supplied.
DEFAULT_LOCATION: tuple[float, float] = (-1.286389, 36.817223)
DEFAULT_LOCATION_TIMEOUT = 10.0
