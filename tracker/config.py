DATE_FORMAT = "%Y-%m-%d"
MAX_STEP_NUMBER = 32767
MAX_INTERVAL_DAYS = 32767
DEFAULT_TARGET_WEIGHT = "unset"
