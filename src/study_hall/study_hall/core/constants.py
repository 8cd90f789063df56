"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CHECKIN_TOKEN = "TAXSHILA_LIBRARY_CHECKIN_QR_V1"
DEFAULT_TIMEZONE = "Asia/Kolkata"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

STUDY_HOURS_DECIMALS = 2
