"""
Constantes globales pour Pollinations Relay.
"""

# ============================================================================
# UPSTREAM
# ============================================================================
DEFAULT_UPSTREAM_URL = "https://text.pollinations.ai/"
DEFAULT_MODEL = "mistral"
SEED_UPPER_BOUND = 100000  # seed tiré dans [0, 100000)

# ============================================================================
# STREAM RELAY
# ============================================================================
DONE_SENTINEL = "[DONE]"
SSE_CONTENT_TYPE = "text/event-stream"
JSON_CONTENT_FIELD = "content"
ERROR_PREVIEW_LENGTH = 200
GENERIC_ERROR_MESSAGE = "Error"  # seul message renvoyé au client HTTP

# ============================================================================
# MEDIA (analyse image / vidéo)
# ============================================================================
DEFAULT_MEDIA_MODEL = "openai"
DEFAULT_MAX_WIDTH = 768
DEFAULT_MAX_HEIGHT = 768
DEFAULT_FRAME_INTERVAL = 1.0  # secondes entre deux frames
IMAGE_DATA_URL_PREFIX = "data:image/jpeg;base64,"

# ============================================================================
# SERVEUR
# ============================================================================
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
CONFIG_ENV_VAR = "POLLINATIONS_RELAY_CONFIG"
