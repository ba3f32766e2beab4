"""Core constants: cache key prefixes and multitenant protocol literals.

Single source of truth for cache key structure and the legacy lookup
vocabulary (DRY).
"""

# Cache key prefixes
CACHE_PREFIX_TENANT = "tenant"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Broker REST paths (relative to the broker base URL)
BROKER_TENANTS_PATH = "/api/v1/tenants/"
BROKER_TOKEN_PATH = "/oauth/token"
BROKER_TOKEN_SCOPE = "api"

# Multitenant lookup (legacy XML API)
LOOKUP_GET_USER_ACTION = "getUser"
LOOKUP_RETURNCODE_SUCCESS = "SUCCESS"
LOOKUP_MESSAGE_KEY_NO_SUCH_USER = "noSuchUser"

# Endpoint suffixes used by normalize_endpoint
BBB_PATH_SUFFIX = "bigbluebutton/"
BBB_API_PATH_SUFFIX = "bigbluebutton/api/"

# Settings keys returned by the broker and the static credential table
SETTING_BBB_URL = "bigbluebutton_url"
SETTING_BBB_SECRET = "bigbluebutton_secret"
SETTING_FORWARD_PARAMS_PREFIX = "forward_params_"
