# File: src/slotpool/application/simulation.py
"""
Concurrent parking simulation

Runs a batch of simulated vehicles against one shared ParkingService from a
thread pool. Every vehicle follows the same script:
park -> try to leave unpaid (refused) -> pay -> leave.
Vehicles that find the pool full are turned away.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Callable, List, Optional, Sequence
import logging
import threading

from ..domain.models import VehicleCategory
from ..domain.strategies import PaymentGate
from ..domain.exceptions import PaymentDeclined
from .dtos import ParkingRequestDTO, SimulationReportDTO
from .parking_service import ParkingService

GateProvider = Callable[[ParkingRequestDTO], PaymentGate]

CATEGORY_CYCLE = (VehicleCategory.CAR, VehicleCategory.BIKE, VehicleCategory.TRUCK)


def build_requests(count: int, duration_units: int = 4) -> List[ParkingRequestDTO]:
    """Vehicles SIM-0001.. whose categories cycle bike, truck, car"""
    return [
        ParkingRequestDTO(
            vehicle_id=f"SIM-{index:04d}",
            category=CATEGORY_CYCLE[index % len(CATEGORY_CYCLE)].value,
            duration_units=duration_units,
        )
        for index in range(1, count + 1)
    ]


class ParkingSimulation:
    """Drives many vehicles through one service concurrently"""

    def __init__(
        self,
        service: ParkingService,
        gate_provider: GateProvider,
        workers: int = 4,
        start_barrier: bool = True
    ):
        if workers < 1:
            raise ValueError("Workers must be at least 1")
        self.service = service
        self.gate_provider = gate_provider
        self.workers = workers
        self.start_barrier = start_barrier
        self.logger = logging.getLogger(self.__class__.__name__)

        self._lock = threading.Lock()
        self._report: Optional[SimulationReportDTO] = None

    def run(self, requests: Sequence[ParkingRequestDTO]) -> SimulationReportDTO:
        """Run every request to completion and return the tallies"""
        pool = self.service.pool
        self._report = SimulationReportDTO(
            vehicles=len(requests),
            capacity=pool.capacity,
            currency=pool.fee_policy.currency,
        )
        barrier = (
            threading.Barrier(min(self.workers, len(requests)))
            if self.start_barrier and requests else None
        )

        self.logger.info(
            f"Simulating {len(requests)} vehicles on {pool.capacity} slots with {self.workers} workers"
        )
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [
                executor.submit(self._drive, request, barrier, index < self.workers)
                for index, request in enumerate(requests)
            ]
            for future in futures:
                future.result()

        self._report.slots_free_at_end = pool.available_count()
        self.logger.info(f"Simulation finished: {self._report.to_dict()}")
        return self._report

    def _drive(self, request: ParkingRequestDTO, barrier: Optional[threading.Barrier], waits: bool) -> None:
        if barrier is not None and waits:
            barrier.wait()

        allocation = self.service.park(request)
        if not allocation.success:
            self._tally(turned_away=1)
            return
        self._tally(parked=1)

        handle = allocation.handle
        early_exit = self.service.leave(handle)
        if early_exit.payment_required:
            self._tally(exits_refused_unpaid=1)

        try:
            receipt = self.service.pay(handle, self.gate_provider(request))
        except PaymentDeclined as e:
            # the vehicle stays in its slot; that capacity remains taken
            self.logger.warning(f"{request.vehicle_id}: {e}")
            self._tally(payments_declined=1)
            return
        self._tally(paid=1, revenue=receipt.amount)

        if self.service.leave(handle).released:
            self._tally(released=1)

    def _tally(self, revenue: Decimal = Decimal('0'), **counts: int) -> None:
        with self._lock:
            for name, value in counts.items():
                setattr(self._report, name, getattr(self._report, name) + value)
            self._report.revenue += revenue
