import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Bearer tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_TTL_SECONDS = int(data.get("ACCESS_TOKEN_TTL_SECONDS", 86400))
    REFRESH_TOKEN_TTL_SECONDS = int(data.get("REFRESH_TOKEN_TTL_SECONDS", 604800))
    TOKEN_LEEWAY_SECONDS = int(data.get("TOKEN_LEEWAY_SECONDS", 0))

    # Ephemeral credentials (memory | redis)
    CACHE_BACKEND = data.get("CACHE_BACKEND", "memory")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    OTP_TTL_SECONDS = int(data.get("OTP_TTL_SECONDS", 300))
    RESET_TOKEN_TTL_SECONDS = int(data.get("RESET_TOKEN_TTL_SECONDS", 3600))
    OTP_MAX_ATTEMPTS = int(data.get("OTP_MAX_ATTEMPTS", 5))

    # Reminder scheduler
    SCHEDULER_ENABLED = bool(data.get("SCHEDULER_ENABLED", True))
    REMINDER_BATCH_SIZE = int(data.get("REMINDER_BATCH_SIZE", 100))
    DISPATCH_TIMEOUT_SECONDS = float(data.get("DISPATCH_TIMEOUT_SECONDS", 10))

    # Mail (console | smtp)
    MAIL_BACKEND = data.get("MAIL_BACKEND", "console")
    SMTP_HOST = data.get("SMTP_HOST", "localhost")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USERNAME = data.get("SMTP_USERNAME", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
    MAIL_FROM = data.get("MAIL_FROM", "no-reply@localhost")
    PASSWORD_RESET_URL = data.get(
        "PASSWORD_RESET_URL", "http://localhost:3000/reset-password"
    )
