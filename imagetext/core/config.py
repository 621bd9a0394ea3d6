# =============================================================================
# Read API wire constants
# =============================================================================

READ_ANALYZE_PATH = "vision/v2.0/read/core/asyncBatchAnalyze"
SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"
OPERATION_LOCATION_HEADER = "Operation-Location"

SUBMIT_CONTENT_TYPE = "application/octet-stream"
POLL_CONTENT_TYPE = "application/json"

# Poll body "status" values
PENDING_STATUSES = frozenset({"notstarted", "running"})
FAILED_STATUSES = frozenset({"failed"})


# =============================================================================
# Timing (seconds)
# =============================================================================

DEFAULT_POLL_DELAY_SECONDS = 3.0  # Read results are never ready sooner
DEFAULT_CLIENT_TIMEOUT_SECONDS = 30.0


# =============================================================================
# Validation
# =============================================================================

# Compared case-insensitively
ACCEPTED_MEDIA_SUBTYPES = frozenset({"jpeg", "jpg", "png"})

BASE64_MARKER = ";base64,"
ERROR_MESSAGE_MAX_CHARS = 500  # Cap on the parsed error message
DEFAULT_ERROR_REASON = "Error."
