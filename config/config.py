"""Settings shared by every environment. Environment modules import from here and override."""

import os

SECRET_KEY = os.environ.get("SECRET_KEY") or "hr-records-dev-secret"

# Cấu hình DB
DB_CONFIG = {
    "host": os.environ.get("DB_HOST", "localhost"),
    "port": int(os.environ.get("DB_PORT", "3306")),
    "user": os.environ.get("DB_USER", "root"),
    "password": os.environ.get("DB_PASSWORD", ""),
    "database": os.environ.get("DB_NAME", "hr_records"),
}

# "mysql" or "memory" (process-local, data is lost on restart)
STORE_BACKEND = os.environ.get("STORE_BACKEND", "mysql")

ADMIN_SESSION_TTL_HOURS = int(os.environ.get("ADMIN_SESSION_TTL_HOURS", "24"))

# Attendance cut-offs (HH:MM)
OFFICE_START = os.environ.get("OFFICE_START", "10:00")
OFFICE_END = os.environ.get("OFFICE_END", "18:00")
LATE_GRACE_MINUTES = int(os.environ.get("LATE_GRACE_MINUTES", "0"))
HALF_DAY_HOURS = float(os.environ.get("HALF_DAY_HOURS", "4"))

# entity type -> (prefix, zero padding) for sequential ids
ID_FORMATS = {
    "employee": (os.environ.get("EMPLOYEE_ID_PREFIX", "EMP"), 3),
    "employment": (os.environ.get("EMPLOYMENT_ID_PREFIX", "EMT"), 3),
    "salary": (os.environ.get("SALARY_ID_PREFIX", "SAL"), 3),
}

# YAML dictConfig file; ignored when missing
LOGGING_CONFIG = os.environ.get("LOGGING_CONFIG", "logging.yaml")

DEBUG = bool(int(os.environ.get("DEBUG", "1")))

# If enabled, the app creates the documents table on startup (idempotent)
AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))
