# Knowledge Hub Configuration

import os

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class ServerConfig(BaseModel):
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    default_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]
    # Comma separated, appended to default_origins
    allowed_origins: list[str] = [
        origin.strip()
        for origin in os.getenv("ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    @property
    def cors_origins(self) -> list[str]:
        """Return default origins followed by any configured extras."""
        return self.default_origins + [
            o for o in self.allowed_origins if o not in self.default_origins
        ]


class DatabaseConfig(BaseModel):
    url: str = os.getenv("DATABASE_URL", "sqlite:///./database/knowledge_hub.db")
    # Seconds: pool wait, SQLite busy timeout and per-statement limit on servers
    timeout: float = float(os.getenv("DB_TIMEOUT", "10"))
    echo: bool = _env_flag("DB_ECHO", "false")

    @property
    def sqlalchemy_url(self) -> str:
        """Return the URL in the form SQLAlchemy 2.x expects."""
        # Hosted Postgres often hands out postgres://, SQLAlchemy requires postgresql://
        if self.url.startswith("postgres://"):
            return self.url.replace("postgres://", "postgresql://", 1)
        return self.url


class AIConfig(BaseModel):
    # LLM provider: "groq" or "mistral"
    provider: str = os.getenv("LLM_PROVIDER", "groq")
    temperature: float = 0.3
    max_tokens: int = 1024
    timeout: float = float(os.getenv("LLM_TIMEOUT", "30"))
    # Groq
    groq_api_key: str = os.getenv("GROQ_API_KEY", "")
    groq_model: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    # Mistral
    mistral_api_key: str = os.getenv("MISTRAL_API_KEY", "")
    mistral_model: str = os.getenv("MISTRAL_MODEL", "mistral-small-latest")

    @property
    def api_key(self) -> str:
        """Return API key for the active provider."""
        if self.provider == "mistral":
            return self.mistral_api_key
        return self.groq_api_key

    @property
    def model(self) -> str:
        """Return model name for the active provider."""
        if self.provider == "mistral":
            return self.mistral_model
        return self.groq_model


class RateLimitConfig(BaseModel):
    # Format: "requests/period" e.g. "100/minute", "1000/hour"
    default: str = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
    ai: str = os.getenv("RATE_LIMIT_AI", "20/minute")
    enabled: bool = _env_flag("RATE_LIMIT_ENABLED", "true")


class SecurityConfig(BaseModel):
    # When empty, article writes are not guarded
    api_key: str = os.getenv("API_KEY", "")

    @property
    def writes_protected(self) -> bool:
        return bool(self.api_key)


class Config(BaseModel):
    server: ServerConfig = ServerConfig()
    database: DatabaseConfig = DatabaseConfig()
    ai: AIConfig = AIConfig()
    rate_limit: RateLimitConfig = RateLimitConfig()
    security: SecurityConfig = SecurityConfig()
    debug: bool = _env_flag("DEBUG", "false")


# Global configuration instance
config = Config()


if __name__ == "__main__":
    print("Configuration loaded successfully")
