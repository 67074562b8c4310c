# vote_api/config.py
# Central place for environment settings and constants
import os

from dotenv import load_dotenv

load_dotenv()

# --- Database ---
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "voting_system")
VOTES_COLLECTION = os.getenv("VOTES_COLLECTION", "votes")

# Seconds between connection attempts; retried forever at a fixed interval
MONGO_RETRY_DELAY = float(os.getenv("MONGO_RETRY_DELAY", "5"))
MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "10000"))
MONGO_SOCKET_TIMEOUT_MS = int(os.getenv("MONGO_SOCKET_TIMEOUT_MS", "45000"))
MONGO_HEARTBEAT_FREQUENCY_MS = int(os.getenv("MONGO_HEARTBEAT_FREQUENCY_MS", "2000"))

# --- Server ---
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
APP_ENV = os.getenv("APP_ENV", "production")
DEBUG = APP_ENV == "development"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma-separated list, e.g. "http://localhost:3000,https://vote.example.org"
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# --- Admin ---
# Single shared credential pair and a static token that never expires.
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
# bcrypt hash of the admin password, see `python -m vote_api.hash_admin_password`.
# Unset means every login is rejected.
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "")
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "admin-token")

# --- Votes ---
VOTE_CHOICES = ("for", "against")
LATEST_VOTES_LIMIT = 10
