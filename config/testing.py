from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

STORE_BACKEND = "memory"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
LOGGING_CONFIG = ""
