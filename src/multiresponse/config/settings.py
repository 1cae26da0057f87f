"""Configuration settings for multiresponse.

This module defines which wire formats are enabled for the process and
how responses are rendered. Settings are loaded from environment
variables (prefixed ``MULTIRESPONSE_``) and .env files, and are read
once at startup to build the format registry.
"""

from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..media.types import FormatTag


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    :param enabled_formats: Wire formats available for negotiation
    :type enabled_formats: List[FormatTag]
    :param default_format: Response format used when neither ``Accept``
        nor ``Content-Type`` names an enabled format
    :type default_format: Optional[FormatTag]
    :param json_indent: Indentation for JSON output, or None for compact
    :type json_indent: Optional[int]
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTIRESPONSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled_formats: Annotated[List[FormatTag], NoDecode] = Field(
        default_factory=lambda: [FormatTag.JSON, FormatTag.PROTOBUF],
        description="Wire formats enabled for this process",
    )
    default_format: Optional[FormatTag] = Field(
        None,
        description="Explicit response default (priority order when unset)",
    )
    json_indent: Optional[int] = Field(
        2, ge=0, description="Indentation for JSON output"
    )

    @field_validator("enabled_formats", mode="before")
    @classmethod
    def split_format_list(cls, v):
        """Accept a comma-separated string as well as a list.

        :param v: Raw value from the environment or constructor
        :return: List of format names
        """
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                import json

                return json.loads(stripped)
            return [part.strip().lower() for part in stripped.split(",") if part.strip()]
        return v

    @field_validator("enabled_formats")
    @classmethod
    def reject_sentinel(cls, v: List[FormatTag]) -> List[FormatTag]:
        """Drop duplicates and refuse the ``unrecognized`` sentinel."""
        if FormatTag.UNRECOGNIZED in v:
            raise ValueError("'unrecognized' is not a wire format")
        return list(dict.fromkeys(v))

    @field_validator("default_format", mode="before")
    @classmethod
    def blank_default_is_unset(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("default_format")
    @classmethod
    def default_not_sentinel(cls, v: Optional[FormatTag]) -> Optional[FormatTag]:
        if v is FormatTag.UNRECOGNIZED:
            raise ValueError("'unrecognized' is not a wire format")
        return v

    @field_validator("json_indent", mode="before")
    @classmethod
    def blank_indent_is_compact(cls, v):
        """An empty value selects compact JSON output."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


settings = Settings()
"""Global settings instance for multiresponse.

This instance is created once at import and used as the default
configuration wherever no explicit settings are passed.
"""
