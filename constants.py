import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 10000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

DEFAULT_ROOM_ID = os.getenv("DEFAULT_ROOM_ID", "general")
ANONYMOUS_USER = {"id": "anon", "name": "Anon", "glyph": "🙂"}

# Outbound buffering per connection
SEND_QUEUE_SIZE = int(os.getenv("SEND_QUEUE_SIZE", 100))
SEND_TIMEOUT_SECONDS = float(os.getenv("SEND_TIMEOUT_SECONDS", 5))
