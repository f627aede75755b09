"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EMPLOYEE_CODE_DIGITS = 5
DEFAULT_LIST_LIMIT = 200
MIN_MOBILE_LENGTH = 10
