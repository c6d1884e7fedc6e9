"""Engine settings.

Values come from keyword arguments, environment variables prefixed with
``INVOICE_ENGINE_`` and an optional ``.env`` file. :func:`get_settings`
caches the merged result.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Tunable defaults for pagination, tax-mode policy and checks."""

    model_config = SettingsConfigDict(env_prefix="INVOICE_ENGINE_", env_file=".env", extra="ignore")

    default_page_size: int = Field(default=40, gt=0)
    # IGST when either side's state is unknown; flip to charge CGST+SGST instead
    assume_interstate_when_unknown: bool = True
    tolerance: float = Field(default=1e-6, gt=0)
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> EngineSettings:
    return EngineSettings()
