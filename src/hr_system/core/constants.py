"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ORG_TIMEZONE = "Asia/Phnom_Penh"
DEFAULT_LATE_CUTOFF = "08:15"
DEFAULT_HALF_DAY_HOURS = 4
DEFAULT_LIST_LIMIT = 200

APPROVER_ROLES = frozenset({"manager", "hr_manager", "admin"})
HR_ADMIN_ROLES = frozenset({"hr_manager", "admin"})
