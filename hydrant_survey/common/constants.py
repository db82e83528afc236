"""Application constants."""

USER_AGENT = "hydrant-survey/1.0 (+field-survey tool)"

DEFAULT_STATION_ID = "RS-02"
DEFAULT_MAIN_AREA = "Shaheenabad Main Bazar Gujranwala"
DEFAULT_DISPATCH_NUMBER = "03000710042"
SESSION_KEY = "hydrant_session"
HYDRANT_TYPE = "Pillor"

LOCATION_PROVIDERS = ("static", "http")
DISPATCH_CHANNELS = ("whatsapp", "webhook", "none")
COMMANDS = ("setup", "capture", "list", "report", "reset")

EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20

JSON_LOG_FIELDS = (
    "timestamp",
    "level",
    "station",
    "event",
    "status",
    "area",
    "record_id",
    "rows_out",
    "error_code",
    "message",
)
