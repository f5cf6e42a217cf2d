# File: src/slotpool/config.py
"""
Configuration for the slot pool simulator

Settings are a validated pydantic model. Defaults describe the classic three-slot
lot (bike 5, car 10, truck 20 per unit) and every field can be
overridden from the environment with the SLOTPOOL_ prefix, for example
SLOTPOOL_CAPACITY=50 or SLOTPOOL_CAR_RATE=12.5.
"""

from decimal import Decimal
from typing import Any, Dict, Mapping, Optional
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .domain.models import Money
from .domain.strategies import RateTable

ENV_PREFIX = "SLOTPOOL_"


class PoolSettings(BaseModel):
    """Runtime settings for one slot pool"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    capacity: int = Field(default=3, ge=0, description="Number of slots in the pool")
    currency: str = Field(default="INR", min_length=3, max_length=3)
    bike_rate: Decimal = Field(default=Decimal('5'), ge=0)
    car_rate: Decimal = Field(default=Decimal('10'), ge=0)
    truck_rate: Decimal = Field(default=Decimal('20'), ge=0)
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def _rates_ordered(self) -> 'PoolSettings':
        # RateTable raises ValueError on bike >= car or car >= truck
        self.rate_table()
        return self

    def rate_table(self) -> RateTable:
        return RateTable(
            bike=Money(self.bike_rate, self.currency),
            car=Money(self.car_rate, self.currency),
            truck=Money(self.truck_rate, self.currency),
        )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = ENV_PREFIX,
        **overrides: Any
    ) -> 'PoolSettings':
        """
        Build settings from environment variables

        Explicit keyword overrides win over the environment. Unset or None
        overrides are ignored.
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            key = f"{prefix}{name.upper()}"
            if key in environ:
                values[name] = environ[key]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
