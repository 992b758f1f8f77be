import os
from dotenv import load_dotenv

load_dotenv()

# Database: a full DATABASE_URL wins, otherwise build the asyncpg URL from parts
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_HOST = os.getenv("PG_HOST")
DB_NAME = os.getenv("DB_NAME")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}/{DB_NAME}",
)
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

# Gemini text generation
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "30"))

# Free-tier quotas (in-memory, reset on restart)
LLM_DAILY_LIMIT = int(os.getenv("LLM_DAILY_LIMIT", "1500"))
LLM_PER_MINUTE_LIMIT = int(os.getenv("LLM_PER_MINUTE_LIMIT", "15"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Seed values for a user's first daily spending goal
DEFAULT_DAILY_GOAL_NAME = "Daily Spending Limit"
DEFAULT_DAILY_LIMIT = 100.0

DEFAULT_CURRENCY = "USD"
