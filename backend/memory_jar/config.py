import os
from dotenv import load_dotenv

load_dotenv()

APP_NAME = "Memory Jar"
APP_VERSION = "1.0.0"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./memory_jar.db")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# REQUIRED in production: set this in env
SESSION_SECRET = os.getenv("SESSION_SECRET", "dev-change-me")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(30 * 24 * 3600)))
SESSION_COOKIE = "memory_jar_session"

# inline photos travel in the JSON body, so this is mostly the image size
MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", str(5 * 1024 * 1024)))

UPSERT_MAX_ATTEMPTS = int(os.getenv("UPSERT_MAX_ATTEMPTS", "3"))

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
