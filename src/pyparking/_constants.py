"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000/api/v1"
WS_URL = "ws://localhost:3000/api/v1/ws"
USER_AGENT = "pyparking/0.1"

TOKEN_KEY = "parking_token"
REGISTERED_USERS_KEY = "registered_users"

PRODUCTION_ENVIRONMENT = "production"

# ------------------------------------------------------------------
# Result messages
# ------------------------------------------------------------------

NETWORK_ERROR_MESSAGE = "Network error occurred"
OFFLINE_ERROR_MESSAGE = "Backend server not available (offline mode)"
GENERIC_ERROR_MESSAGE = "An error occurred"
INVALID_RESPONSE_MESSAGE = "Invalid response from server"
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"
USERNAME_TOO_SHORT_MESSAGE = "Username must be at least 3 characters long"
PASSWORD_TOO_SHORT_MESSAGE = "Password must be at least 6 characters long"
USERNAME_TAKEN_MESSAGE = "This username is already taken. Please choose a different username."
REGISTERED_MESSAGE = "Account created successfully! You can now sign in with your credentials."

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

# ------------------------------------------------------------------
# Realtime channel
# ------------------------------------------------------------------

RECONNECT_BASE_DELAY = 1.0
MAX_RECONNECT_ATTEMPTS = 5
SUBSCRIBE = "subscribe"
UNSUBSCRIBE = "unsubscribe"
