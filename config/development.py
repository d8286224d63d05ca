import os

from .config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Optional bootstrap administrator (created/refreshed on startup when both are set)
BOOTSTRAP_ADMIN_MOBILE = os.getenv("BOOTSTRAP_ADMIN_MOBILE", "")
BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD", "")
