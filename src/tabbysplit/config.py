from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tabbysplit.models import SplitMode, UnassignedPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    unassigned_policy: UnassignedPolicy = Field(UnassignedPolicy.EVEN_SPLIT_ALL, alias="SPLIT_UNASSIGNED_POLICY")
    default_payer_id: Optional[str] = Field(None, alias="SPLIT_DEFAULT_PAYER")
    strict: bool = Field(False, alias="SPLIT_STRICT")
    tax_mode: SplitMode = Field(SplitMode.PROPORTIONAL, alias="SPLIT_TAX_MODE")
    tip_mode: SplitMode = Field(SplitMode.PROPORTIONAL, alias="SPLIT_TIP_MODE")
    include_zero_people: bool = Field(True, alias="SPLIT_INCLUDE_ZERO_PEOPLE")
    rounding: Literal["ROUND_HALF_UP", "ROUND_HALF_EVEN"] = Field("ROUND_HALF_UP", alias="SPLIT_ROUNDING")
    currency: str = Field("USD", alias="SPLIT_CURRENCY")
    log_level: str = Field("INFO", alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
