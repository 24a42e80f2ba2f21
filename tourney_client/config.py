import os
from dotenv import load_dotenv

load_dotenv()

API_URL = os.getenv("TOURNEY_API_URL", "http://localhost:8000/api/v1")
DB_PATH = os.environ.get("DB_PATH", "tourney.db")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# row key of the persisted bearer token
TOKEN_KEY = "token"

try:
    HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "15.0"))
except ValueError:
    raise RuntimeError("HTTP_TIMEOUT must be a number of seconds")
