"""Application constants."""

USER_AGENT = "postcode-finder/1.0 (+nearby-postcode search)"
OUTSIDE_REGION = "Outside"
DEFAULT_REGION_COLOUR = "#999999"
DEFAULT_FACILITY_K = 5
COMMANDS = (
    "radius",
    "region",
    "boundaries",
    "stats",
)
EXIT_SUCCESS = 0
EXIT_REQUEST_FAILED = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "request_id",
    "operation",
    "event",
    "status",
    "identifier",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
