import os

from dotenv import load_dotenv

load_dotenv()

# Calendar backend: "lunar" (lunar_python) or "swisseph" (Swiss Ephemeris)
CALENDAR_BACKEND = os.getenv("DESTINY_CALENDAR", "lunar").strip().lower()

# Offset of birth clock times from UTC, in hours. China Standard Time by default.
UTC_OFFSET = float(os.getenv("DESTINY_UTC_OFFSET", "8.0"))

# Swiss Ephemeris data files. Unset → built-in Moshier ephemeris.
EPHE_PATH = os.getenv("DESTINY_EPHE_PATH") or None

# Logging
LOG_LEVEL = os.getenv("DESTINY_LOG_LEVEL", "INFO").upper()
