"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SCAN_DEBOUNCE_SECONDS = 3.0
DEFAULT_IMPORT_CHUNK_SIZE = 400
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_FEED_LIMIT = 20
DEFAULT_RECENT_SENT_LIMIT = 10

# Roles the gate scanner accepts.
SCANNABLE_ROLES = ("student", "faculty")

DAILY_LIMIT_REASON = "Daily Limit Reached (Already Checked Out)"
ALERT_TYPE_BLOCKED = "BLOCKED"

BREAK_CODE = "BREAK"
BREAK_NAME = "Break / Recess"
TBA_FACULTY = "TBA"

ALL_DEPARTMENTS = "ALL"
NOT_AVAILABLE = "N/A"

STRUCTURE_DOC_ID = "main"
GLOBAL_RULES_DOC_ID = "global_rules"
