"""Cart-wide constants and configuration defaults.

Centralizes magic values so storage backends, settings and the cart
store agree on them.
"""

# ============== STORAGE ==============
CART_STORAGE_KEY = "@GoMarketplace:products"
DEFAULT_STORAGE_PATH = ".gomarketplace/storage.json"

STORAGE_BACKEND_MEMORY = "memory"
STORAGE_BACKEND_FILE = "file"
STORAGE_BACKEND_REDIS = "redis"
STORAGE_BACKENDS = (STORAGE_BACKEND_MEMORY, STORAGE_BACKEND_FILE, STORAGE_BACKEND_REDIS)

REDIS_SOCKET_TIMEOUT_SECONDS = 5

# ============== WRITE RETRIES ==============
CART_WRITE_ATTEMPTS = 3
CART_WRITE_INITIAL_DELAY = 0.05  # seconds
CART_WRITE_MAX_DELAY = 1.0  # seconds

# ============== LINE ITEMS ==============
MIN_QUANTITY = 1

# ============== LOGGING ==============
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
