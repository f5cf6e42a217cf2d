# File: src/slotpool/application/dtos.py
"""
Data Transfer Objects (DTOs) for the slot pool

DTOs carry operation results across the application boundary to whatever
presentation layer renders them. They hold data only; business rules stay in
the domain layer.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
import json

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.models import SlotHandle


# ============================================================================
# BASE DTO CLASSES
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        return self.model_dump(exclude_none=exclude_none, **kwargs)

    def to_json(self, **kwargs) -> str:
        """Convert DTO to JSON string"""
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseDTO':
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> 'BaseDTO':
        return cls(**json.loads(json_str))


# ============================================================================
# INPUT DTOs
# ============================================================================

class ParkingRequestDTO(BaseDTO):
    """Request to park one vehicle"""
    vehicle_id: str = Field(..., min_length=1, description="Plate number or other identifier")
    category: str = Field(..., description="bike, car or truck")
    duration_units: int = Field(..., ge=0, description="Billed duration, fixed at entry")

    @field_validator("vehicle_id")
    @classmethod
    def _strip_vehicle_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("vehicle_id cannot be blank")
        return value


# ============================================================================
# OUTPUT DTOs
# ============================================================================

class ParkingAllocationDTO(BaseDTO):
    """Result of a parking request"""
    success: bool
    vehicle_id: str
    handle: Optional[SlotHandle] = None
    slot_number: Optional[int] = None
    fee: Optional[Decimal] = None
    currency: Optional[str] = None
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class PaymentReceiptDTO(BaseDTO):
    """Result of paying for an occupancy"""
    slot_number: int
    amount: Decimal
    currency: str
    method: Optional[str] = None
    reference: Optional[str] = None
    already_paid: bool = False
    timestamp: datetime = Field(default_factory=datetime.now)


class ParkingExitDTO(BaseDTO):
    """Result of an exit request"""
    success: bool
    slot_number: int
    released: bool = False
    payment_required: bool = False
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class PoolStatusDTO(BaseDTO):
    """Point-in-time view of the pool"""
    pool_id: str
    capacity: int
    free: int
    occupied: int
    paid: int
    occupancy_rate: float
    timestamp: datetime = Field(default_factory=datetime.now)


class SimulationReportDTO(BaseDTO):
    """Summary of a simulation run"""
    vehicles: int
    capacity: int
    parked: int = 0
    turned_away: int = 0
    exits_refused_unpaid: int = 0
    payments_declined: int = 0
    paid: int = 0
    released: int = 0
    revenue: Decimal = Decimal('0.00')
    currency: str = "INR"
    slots_free_at_end: int = 0
