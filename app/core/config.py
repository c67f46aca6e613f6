import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./mockai.db")

# ✅ Auth
SESSION_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "30"))
MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
INTERVIEW_COACH_MODEL = os.getenv("INTERVIEW_COACH_MODEL", "gpt-4o-mini")
COACH_CONFIG_TIMEOUT_SECONDS = float(os.getenv("COACH_CONFIG_TIMEOUT_SECONDS", "20"))

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"

# ✅ CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]
