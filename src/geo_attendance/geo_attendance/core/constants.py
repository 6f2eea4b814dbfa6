"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_OFFICE_RADIUS_METERS = 100
DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "17:00"
DEFAULT_MAX_DEVICES_PER_USER = 2

# Validation score weights; they add up to 100.
LOCATION_WEIGHT = 40
WIFI_WEIGHT = 25
DEVICE_WEIGHT = 25
WORK_HOURS_WEIGHT = 10

DEFAULT_AUTO_APPROVE_THRESHOLD = 80
HIGH_PRIORITY_BELOW = 50
MEDIUM_PRIORITY_BELOW = 70

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_QUEUE_LIMIT = 500
