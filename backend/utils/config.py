"""Configuration from environment."""
import os

PORT = int(os.environ.get("PORT", "8001"))

# When TESTING=true, use test DB URL so tests never touch production.
if os.environ.get("TESTING") == "true":
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./registry.db",
    )

# PEM public key used to verify bearer tokens. Plain path or file:// URL; read once at startup.
PUBLIC_KEY_PATH = os.environ.get("PUBLIC_KEY_PATH", "")

API_VERSION = "2.0.0"
MDS_CONTENT_TYPE = "application/vnd.mds+json"
MAX_PAGE_LIMIT = 20

# Per-request budget in seconds. Bulk writes stop starting new items once it is spent,
# and server databases cancel any single statement that runs longer.
REQUEST_TIMEOUT_SECONDS = float(os.environ.get("REQUEST_TIMEOUT_SECONDS", "15"))
