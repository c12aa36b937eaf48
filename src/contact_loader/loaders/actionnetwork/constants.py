"""Action Network config keys, defaults and upstream field names."""

# Config keys (organization features or environment variables)
API_KEY = "ACTION_NETWORK_API_KEY"
DOMAIN = "ACTION_NETWORK_API_DOMAIN"
BASE_URL = "ACTION_NETWORK_API_BASE_URL"
CACHE_TTL = "ACTION_NETWORK_CONTACT_LOADER_CACHE_TTL"
REQUESTS_PER_SECOND = "ACTION_NETWORK_REQUESTS_PER_SECOND"
COOLDOWN_SECONDS = "ACTION_NETWORK_COOLDOWN_SECONDS"
RETRY_ATTEMPTS = "ACTION_NETWORK_RETRY_ATTEMPTS"
RETRY_BACKOFF_SECONDS = "ACTION_NETWORK_RETRY_BACKOFF_SECONDS"
TIMEOUT_SECONDS = "ACTION_NETWORK_TIMEOUT_SECONDS"

# Defaults
DEFAULT_DOMAIN = "https://actionnetwork.org"
DEFAULT_BASE_URL = "/api/v2"
DEFAULT_CACHE_TTL = 1800
DEFAULT_REQUESTS_PER_SECOND = 4
# Slightly over one second so a tranche never lands in the previous window
DEFAULT_COOLDOWN_SECONDS = 1.1
DEFAULT_RETRY_ATTEMPTS = 1
DEFAULT_RETRY_BACKOFF_SECONDS = 0.5
DEFAULT_TIMEOUT_SECONDS = 30.0

# Upstream
AUTH_HEADER = "OSDI-API-Token"
IDENTIFIER_PATTERN = r"action_network:(.*)"
PHONE_FIELD = "Phone"
COUNTRY_CODE_PREFIX = "+1"
# Boston; only used for timezone derivation
FALLBACK_POSTAL_CODE = "02118"

# Storage
INSERT_BATCH_SIZE = 100
