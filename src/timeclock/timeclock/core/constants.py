"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MONTHLY_PTO_HOURS = 16
YEARLY_PTO_HOURS = MONTHLY_PTO_HOURS * 12
MIN_PTO_HOURS = 1
MAX_PTO_HOURS = 8

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

DEFAULT_TOKEN_DAYS = 7
MIN_PASSWORD_LENGTH = 8

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
