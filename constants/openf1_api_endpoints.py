import os

# https://openf1.org
OPENF1_BASE_URL = os.getenv("OPENF1_BASE_URL", "https://api.openf1.org/v1").rstrip("/")

SESSIONS_API_URL = f"{OPENF1_BASE_URL}/sessions"
SESSION_RESULTS_API_URL = f"{OPENF1_BASE_URL}/session_result"
DRIVERS_API_URL = f"{OPENF1_BASE_URL}/drivers"
