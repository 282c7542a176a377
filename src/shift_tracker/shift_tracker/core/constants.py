"""Collection names, display formats and stream defaults."""

SHIFTS_COLLECTION = "shifts"
CLICKS_COLLECTION = "clicks"

# Shown where a value does not exist (first click gap, open shift check-out).
EMPTY_MARK = "—"

DISPLAY_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
ISO_DATE_FORMAT = "%Y-%m-%d"

DEFAULT_STREAM_KEEPALIVE_SECONDS = 15
