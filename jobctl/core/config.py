# jobctl/core/config.py
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    # -------- Kubernetes client --------
    kubeconfig: Optional[str] = None          # falls back to $KUBECONFIG / ~/.kube/config
    context: Optional[str] = None             # kubeconfig context, None = current-context
    namespace: Optional[str] = None           # overrides the context namespace

    # -------- Requests --------
    field_manager: str = "jobctl"

    # -------- Logging --------
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="JOBCTL_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v


settings = Settings()
