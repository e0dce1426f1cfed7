"""Application configuration powered by environment variables."""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Central application settings backed by environment variables."""

    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(default=8080, alias="SERVER_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    allowed_origins: str = Field(default="*", alias="ALLOWED_ORIGINS")
    customer_ids: str = Field(default="0000", alias="VALID_CUSTOMER_IDS")
    requestor_ids: str = Field(default="0000", alias="VALID_REQUESTOR_IDS")
    api_keys: str = Field(default="0000", alias="VALID_API_KEYS")
    exception_probability: float = Field(default=0.25, ge=0.0, le=1.0, alias="EXCEPTION_PROBABILITY")
    random_seed: Optional[int] = Field(default=None, alias="RANDOM_SEED")
    report_min_items: int = Field(default=0, ge=0, alias="REPORT_MIN_ITEMS")
    report_extra_items: int = Field(default=10, ge=0, alias="REPORT_EXTRA_ITEMS")
    optional_field_probability: float = Field(default=0.5, ge=0.0, le=1.0, alias="OPTIONAL_FIELD_PROBABILITY")
    created_by: str = Field(default="Fake Counter Endpoint", alias="REPORT_CREATED_BY")
    institution_name: Optional[str] = Field(default=None, alias="INSTITUTION_NAME")

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    @property
    def valid_customer_ids(self) -> List[str]:
        return _split_list(self.customer_ids)

    @property
    def valid_requestor_ids(self) -> List[str]:
        return _split_list(self.requestor_ids)

    @property
    def valid_api_keys(self) -> List[str]:
        return _split_list(self.api_keys)

    @property
    def cors_origins(self) -> Union[str, List[str]]:
        """Return ``"*"`` or the explicit list of allowed origins."""
        if self.allowed_origins.strip() == "*":
            return "*"
        return _split_list(self.allowed_origins)


def _split_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
