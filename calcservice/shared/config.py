"""
Centralized configuration management for CalcService.
Uses environment variables with defaults following 12-factor app principles.
"""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv
from enum import Enum
from urllib.parse import quote_plus


class HistoryBackend(Enum):
    """Where calculation history is persisted."""
    MONGO = "mongo"
    JSONL = "jsonl"


@dataclass(frozen=True)
class MongoConfig:
    """MongoDB connection settings."""
    username: str = "calculator-user"
    password: str = "calculator-password"
    host: str = "mongodb-service"
    port: int = 27017
    database: str = "calculator"
    auth_source: str = "admin"
    collection: str = "calculations"
    timeout_ms: int = 5000  # server selection / socket timeout

    @property
    def uri(self) -> str:
        return (
            f"mongodb://{quote_plus(self.username)}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.database}?authSource={self.auth_source}"
        )


@dataclass(frozen=True)
class HistoryConfig:
    """History store configuration."""
    backend: HistoryBackend = HistoryBackend.MONGO
    file_path: str = "data/calculations.jsonl"
    limit: int = 100


@dataclass(frozen=True)
class AppConfig:
    """Root application configuration - assembled from environment."""
    mongo: MongoConfig = field(default_factory=MongoConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    log_level: str = "INFO"
    log_file_dir: str = "logs"  # combined.log + error.log; empty = no file logging
    service_name: str = "calculator-microservice"
    environment: str = "production"


def load_config() -> AppConfig:
    """
    Load configuration from environment variables.
    Defaults are used when env vars are not set.
    """
    load_dotenv()  # Load .env file if present

    mongo = MongoConfig(
        username=os.environ.get("MONGO_USERNAME", "calculator-user"),
        password=os.environ.get("MONGO_PASSWORD", "calculator-password"),
        host=os.environ.get("MONGO_HOST", "mongodb-service"),
        port=int(os.environ.get("MONGO_PORT", "27017")),
        database=os.environ.get("MONGO_DB", "calculator"),
        auth_source=os.environ.get("MONGO_AUTH_SOURCE", "admin"),
        timeout_ms=int(os.environ.get("MONGO_TIMEOUT_MS", "5000")),
    )

    backend_str = os.environ.get("HISTORY_BACKEND", "mongo").lower()
    try:
        backend = HistoryBackend(backend_str)
    except ValueError:
        backend = HistoryBackend.MONGO

    history = HistoryConfig(
        backend=backend,
        file_path=os.environ.get("HISTORY_FILE_PATH", "data/calculations.jsonl"),
        limit=int(os.environ.get("HISTORY_LIMIT", "100")),
    )

    return AppConfig(
        mongo=mongo,
        history=history,
        api_host=os.environ.get("API_HOST", "0.0.0.0"),
        api_port=int(os.environ.get("API_PORT", "3000")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        log_file_dir=os.environ.get("LOG_FILE_DIR", "logs"),
        service_name=os.environ.get("SERVICE_NAME", "calculator-microservice"),
        environment=os.environ.get("ENVIRONMENT", "production"),
    )
