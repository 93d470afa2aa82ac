"""Infrastructure and technical constants."""

from typing import Final

# Technical configuration constants
MIN_SECRET_KEY_LENGTH: Final = 32
DEFAULT_PORT: Final = 5000
DEFAULT_HOST: Final = "0.0.0.0"
DEFAULT_STATIC_DIR: Final = "static"

# Routing
AUTH_PREFIX: Final = "/api/auth"
ENTRY_PAGE: Final = "index.html"

# Client storage keys
TOKEN_KEY: Final = "token"
USER_KEY: Final = "user"
