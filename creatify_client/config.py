import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "https://api.creatify.ai"


class ClientOptions(BaseModel):
    api_id: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=30.0, gt=0)  # seconds
    debug: bool = False

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls, prefix: str = "CREATIFY_", **overrides) -> "ClientOptions":
        """Build options from ``CREATIFY_API_ID``, ``CREATIFY_API_KEY``,
        ``CREATIFY_BASE_URL`` and ``CREATIFY_TIMEOUT``; keyword arguments win."""
        values: dict[str, Optional[str]] = {
            "api_id": os.getenv(f"{prefix}API_ID"),
            "api_key": os.getenv(f"{prefix}API_KEY"),
            "base_url": os.getenv(f"{prefix}BASE_URL"),
            "timeout": os.getenv(f"{prefix}TIMEOUT"),
        }
        data = {key: value for key, value in values.items() if value is not None}
        data.update(overrides)
        return cls(**data)
