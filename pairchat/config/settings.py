"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    TESTING = _env_flag("TESTING")
    DEBUG = _env_flag("DEBUG")

    # Auth
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    # Empty issuer/audience disables that check
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "")
    SERVICE_AUTH_ALGORITHMS = os.getenv("SERVICE_AUTH_ALGORITHMS", "HS256").split(",")
    SERVICE_AUTH_IDENTITY_CLAIM = os.getenv("SERVICE_AUTH_IDENTITY_CLAIM", "userId")

    # Storage: "memory" (single process, non-persistent) or "prisma" (PostgreSQL)
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # Redis history cache
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_CACHE_ENABLED: bool = _env_flag("REDIS_CACHE_ENABLED")
    REDIS_CACHE_TTL: int = int(os.getenv("REDIS_CACHE_TTL", "3600"))

    # Chat
    STORE_TIMEOUT_SECONDS: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))
    SEND_TIMEOUT_SECONDS: float = float(os.getenv("SEND_TIMEOUT_SECONDS", "5"))
    MAX_MESSAGE_LENGTH: int = int(os.getenv("MAX_MESSAGE_LENGTH", "4000"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    STORAGE_BACKEND = "memory"
    REDIS_CACHE_ENABLED = False


class ProductionConfig(Config):
    """Production configuration"""

    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "prisma")


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
