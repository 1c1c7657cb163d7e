"""Static configuration for the dashboard."""

from pathlib import Path

TITLE = "Arrogance Admin"
TABS = ("Home", "Users", "Routines")

# Tab indices
HOME_TAB = 0
USERS_TAB = 1
ROUTINES_TAB = 2

# Spinner frame interval in seconds
TICK_INTERVAL = 0.1

# Rows reserved for tab bar, table header and footer
TABLE_CHROME_MARGIN = 13
DEFAULT_TABLE_HEIGHT = 10

USERS_PAGE_SIZE = 1000
ROUTINES_COLLECTION = "routines"

# Credential lookup
SERVICE_ACCOUNT_ENV = "FIREBASE_SERVICE_ACCOUNT"
GOOGLE_CREDENTIALS_ENV = "GOOGLE_APPLICATION_CREDENTIALS"
SERVICE_ACCOUNT_FILENAME = "service-account.json"
CONFIG_DIR = Path(".config") / "arrogance"

LOG_FILE_ENV = "ARROGANCE_LOG_FILE"
DEFAULT_LOG_FILE = "debug.log"
