"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# Collections in the document store
ADMINS = "admins"
EMPLOYEES = "employees"
EMPLOYMENTS = "employments"
SALARIES = "salaries"
ADMIN_SESSIONS = "admin_sessions"
COUNTERS = "counters"
ENQUIRIES = "enquiries"

DEFAULT_ADMIN_SESSION_TTL_HOURS = 24
DEFAULT_OFFICE_START = time(10, 0)
DEFAULT_OFFICE_END = time(18, 0)
DEFAULT_LATE_GRACE_MINUTES = 0
DEFAULT_HALF_DAY_HOURS = 4.0

MAX_SECONDARY_EDUCATION = 2
CURRENT_EMPLOYEE_SCHEMA_VERSION = 2

# entity type -> (prefix, zero padding)
DEFAULT_ID_FORMATS = {
    "employee": ("EMP", 3),
    "employment": ("EMT", 3),
    "salary": ("SAL", 3),
}

UNKNOWN_DISPLAY_NAME = "Unknown"

# Keys only an administrator may change on an employee record
ADMIN_ONLY_EMPLOYEE_FIELDS = frozenset(
    {
        "status",
        "isActive",
        "resigned",
        "employmentStatus",
        "resignationDate",
        "lastWorkingDate",
        "employeeId",
    }
)

CREDENTIAL_FIELDS = frozenset({"password", "passwordHash"})
