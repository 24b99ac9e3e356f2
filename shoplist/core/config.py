import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
	return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
	APP_NAME = os.getenv("APP_NAME", "Shopping List API")
	DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./shoplist.db")
	DATABASE_ECHO = _as_bool(os.getenv("DATABASE_ECHO", "false"))

	JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
	JWT_ALG = "HS256"
	# 7 days; tokens are not revoked on logout
	ACCESS_TOKEN_EXPIRES_MIN = int(os.getenv("ACCESS_TOKEN_EXPIRES_MIN", "10080"))

	BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
	PASSWORD_MIN_LENGTH = int(os.getenv("PASSWORD_MIN_LENGTH", "6"))

	ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
	ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
	ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")

	SEED_CATALOG = _as_bool(os.getenv("SEED_CATALOG", "false"))

	CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

	LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
