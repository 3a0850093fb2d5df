from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MetricsConfig(BaseModel):
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 9090


class RelayConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="RPC_RELAY_",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    # Optional provider endpoint; when set it is the only target contacted
    preferred_target: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "preferred_target", "RPC_RELAY_PREFERRED_TARGET", "SOLANA_RPC_URL"
        ),
    )
    timeout: float = 8.0  # seconds
    metrics: MetricsConfig = MetricsConfig()

    @field_validator("preferred_target")
    @classmethod
    def blank_target_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("timeout")
    @classmethod
    def timeout_must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than zero")
        return value
