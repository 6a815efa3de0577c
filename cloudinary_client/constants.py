"""
Constants for the Cloudinary client library.
Field names and defaults used by the Cloudinary upload API.
"""

API_BASE_URL = "https://api.cloudinary.com/v1_1"

# Form fields with special handling (never signed as ordinary options)
FIELD_API_KEY = "api_key"
FIELD_TIMESTAMP = "timestamp"
FIELD_RESOURCE_TYPE = "resource_type"
FIELD_SIGNATURE = "signature"
FIELD_FILE = "file"

RESERVED_FIELDS = frozenset({
    FIELD_API_KEY,
    FIELD_TIMESTAMP,
    FIELD_RESOURCE_TYPE,
    FIELD_SIGNATURE,
})

QUERY_PARAM_SEPARATOR = "&"

# The service sniffs the real type itself
FILE_CONTENT_TYPE = "image/*"

ENV_CLOUDINARY_URL = "CLOUDINARY_URL"

DEFAULT_CHUNK_SIZE = 64 * 1024  # 64KB

# Default configuration values
DEFAULT_CONFIG = {
    'timeout': 60,                       # HTTP timeout in seconds
    'chunk_size': DEFAULT_CHUNK_SIZE,    # bytes read per streamed chunk
    'api_base_url': API_BASE_URL,
}
