# File: src/slotpool/infrastructure/factories.py
"""
Factory Pattern Implementation for the Slot Pool

1. VehicleFactory - builds Vehicle records from enums or raw strings
2. SlotPoolFactory - builds the process-wide pool from settings

The pool factory is called once by the entry point; the resulting pool is
passed to every collaborator by reference rather than looked up globally.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, TypeVar, Union
import logging

from ..domain.models import Vehicle, VehicleCategory
from ..domain.aggregates import SlotPool
from ..domain.strategies import FeePolicy
from ..domain.exceptions import InvalidCategory, VehicleValidationError
from ..config import PoolSettings

T = TypeVar('T')


# ============================================================================
# FACTORY INTERFACES
# ============================================================================

class Factory(ABC, Generic[T]):
    """Base factory interface"""

    @abstractmethod
    def create(self, *args, **kwargs) -> T:
        """Create an instance of T"""
        pass


# ============================================================================
# DOMAIN OBJECT FACTORIES
# ============================================================================

class VehicleFactory(Factory[Vehicle]):
    """Factory for creating Vehicle records"""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def parse_category(category: Union[VehicleCategory, str]) -> VehicleCategory:
        """
        Convert a category enum, name or value into a VehicleCategory
        Raises: InvalidCategory for an unrecognised tag
        """
        if isinstance(category, VehicleCategory):
            return category

        if isinstance(category, str):
            tag = category.strip()
            try:
                return VehicleCategory(tag.lower())
            except ValueError:
                pass
            try:
                return VehicleCategory[tag.upper()]
            except KeyError:
                pass

        raise InvalidCategory(f"Invalid vehicle category: {category!r}")

    def create(self, vehicle_id: str, category: Union[VehicleCategory, str]) -> Vehicle:
        """
        Create a Vehicle

        Args:
            vehicle_id: Caller-supplied identifier, e.g. a plate number
            category: VehicleCategory or its name/value in any case
        """
        vehicle = Vehicle(vehicle_id=vehicle_id, category=self.parse_category(category))
        self.logger.debug(f"Created vehicle {vehicle}")
        return vehicle

    def create_from_dict(self, data: Dict[str, Any]) -> Vehicle:
        """Create a Vehicle from a dictionary with vehicle_id and category"""
        for required in ('vehicle_id', 'category'):
            if required not in data:
                raise VehicleValidationError(f"Missing required field: {required}")
        return self.create(data['vehicle_id'], data['category'])

    def create_many(self, specs: List[Dict[str, Any]]) -> List[Vehicle]:
        return [self.create_from_dict(spec) for spec in specs]


class SlotPoolFactory(Factory[SlotPool]):
    """Factory for the slot pool aggregate"""

    def __init__(self, settings: PoolSettings):
        self.settings = settings
        self.logger = logging.getLogger(self.__class__.__name__)

    def create(self) -> SlotPool:
        fee_policy = FeePolicy(self.settings.rate_table())
        self.logger.info(
            f"Building pool with capacity {self.settings.capacity} and {fee_policy!r}"
        )
        return SlotPool(self.settings.capacity, fee_policy=fee_policy)
