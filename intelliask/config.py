import os
from dotenv import load_dotenv

# Loads values from .env into os.environ
load_dotenv()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest")
GEMINI_API_URL = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "60"))

# Registry snapshot and per-slug answers live under DATA_DIR
DATA_DIR = os.getenv("DATA_DIR", "data")
STATIC_DIR = os.getenv("STATIC_DIR", "public")

# Used for absolute links in the sitemap
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "https://intelliask.netlify.app").rstrip("/")

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",") if os.getenv("ALLOWED_ORIGINS") else ["*"]

MAX_QUESTION_LENGTH = int(os.getenv("MAX_QUESTION_LENGTH", "500"))

# 100 requests per 15 minutes per client on /ask
RATE_LIMIT_MAX = int(os.getenv("RATE_LIMIT_MAX", "100"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Deployed behind exactly one reverse proxy that appends to X-Forwarded-For
TRUST_PROXY = os.getenv("TRUST_PROXY", "true").lower() in ("1", "true", "yes")
