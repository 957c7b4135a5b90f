"""Application configuration models."""

from typing import Optional

from pydantic import BaseModel, Field

from .certificate import KeyConfig


class IssuerSettings(BaseModel):
    """Subject and key settings for issued chains."""

    organization: str = "certchain"
    ca_common_name: str = Field("Root CA", min_length=1)
    server_common_name: str = Field("certchain generated server cert", min_length=1)
    client_common_name: str = Field("certchain generated client cert", min_length=1)
    default_validity: str = "8760h"
    key_config: KeyConfig = Field(default_factory=KeyConfig)


class LoggingSettings(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = "./logs/certchain.log"  # None disables file logging


class AppConfig(BaseModel):
    """Main application configuration."""

    issuer: IssuerSettings = Field(default_factory=IssuerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
