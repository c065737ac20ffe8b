import os
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings and configuration"""

    # ============ APP SETTINGS ============
    APP_NAME: str = "Electro Shop Assistant"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"

    # ============ SERVER SETTINGS ============
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8000))
    RELOAD: bool = os.getenv("RELOAD", "True").lower() == "true"

    # ============ CORS SETTINGS ============
    ALLOWED_ORIGINS: list = os.getenv("ALLOWED_ORIGINS", "http://localhost:8080").split(",")

    # ============ LLM SETTINGS (Ollama) ============
    LLM_TYPE: str = "ollama"
    LLM_MODEL_NAME: str = os.getenv("LLM_MODEL_NAME", "deepseek-r1:7b")
    OLLAMA_BASE_URL: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    # LLM Model Parameters
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", 0.7))
    LLM_TOP_P: float = float(os.getenv("LLM_TOP_P", 0.9))
    # Only the connect phase is bounded; the stream inherits the request's lifetime
    LLM_CONNECT_TIMEOUT: float = float(os.getenv("LLM_CONNECT_TIMEOUT", 10))

    # ============ CATALOG SETTINGS ============
    STORE_NAME: str = os.getenv("STORE_NAME", "Elektro Shop")
    CATALOG_PATH: str = os.getenv("CATALOG_PATH", "./data/products.json")
    CATALOG_SNAPSHOT_PAGE_SIZE: int = int(os.getenv("CATALOG_SNAPSHOT_PAGE_SIZE", 10))
    PROMPT_SAMPLE_SIZE: int = int(os.getenv("PROMPT_SAMPLE_SIZE", 5))
    CURRENCY_PREFIX: str = os.getenv("CURRENCY_PREFIX", "Rp")
    THOUSANDS_SEPARATOR: str = os.getenv("THOUSANDS_SEPARATOR", ".")

    # ============ LOGGING SETTINGS ============
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE", "logs/app.log")

    # ============ SECURITY SETTINGS ============
    AUTH_ENABLED: bool = os.getenv("AUTH_ENABLED", "True").lower() == "true"
    JWT_SECRET: Optional[str] = os.getenv("JWT_SECRET", None)
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Instantiate settings
settings = Settings()
