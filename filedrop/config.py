from pathlib import Path

# Server
HOST = "0.0.0.0"
PORT = 15007

# Default storage directory, relative to the working directory and created
# when the app is built; start_server.py pins it next to itself
UPLOAD_DIR = Path("uploads")

# Stored files are served read-only under this prefix
STATIC_PREFIX = "/uploads"

# Multipart form field carrying the uploaded file
UPLOAD_FIELD_NAME = "file"

# Media type recorded when the client declares none
DEFAULT_MIMETYPE = "application/octet-stream"

# Listing classifies entries with these (lower-cased) extensions as images
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})

# One of "timestamp-random", "uuid", "content-hash"
NAMING_STRATEGY = "timestamp-random"

# Attempts at a disambiguated name before giving up on an existing file
MAX_NAME_ATTEMPTS = 100

# Uploads are copied to disk in chunks of this many bytes
CHUNK_SIZE = 1024 * 1024

origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
