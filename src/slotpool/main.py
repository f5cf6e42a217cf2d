# File: src/slotpool/main.py
"""
Main entry point for the slot pool simulator

Builds the single process-wide pool from settings, wires the service around
it, and either replays the classic single-car walkthrough (--demo) or runs a
concurrent simulation and prints its report as JSON.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import PoolSettings
from .domain.models import SlotHandle
from .domain.strategies import PaymentMethod
from .application.dtos import ParkingRequestDTO
from .application.parking_service import ParkingService
from .application.simulation import ParkingSimulation, build_requests
from .infrastructure.factories import SlotPoolFactory
from .infrastructure.messaging import ALL_EVENTS, EventBus, EventRecorder
from .infrastructure.payments import PaymentGateFactory


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Setup application logging configuration"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )
    return logging.getLogger("slotpool")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slotpool-sim",
        description="Simulate vehicles parking, paying and leaving a fixed pool of slots",
    )
    parser.add_argument('--capacity', type=int, default=None,
                        help='Number of slots (default: SLOTPOOL_CAPACITY or 3)')
    parser.add_argument('--vehicles', type=int, default=10,
                        help='Number of simulated vehicles (default: 10)')
    parser.add_argument('--workers', type=int, default=4,
                        help='Concurrent callers (default: 4)')
    parser.add_argument('--duration', type=int, default=4,
                        help='Billed duration units per vehicle (default: 4)')
    parser.add_argument('--payment', choices=PaymentGateFactory.available_methods(),
                        default=PaymentMethod.CARD.value,
                        help='Payment rail used by every vehicle (default: card)')
    parser.add_argument('--demo', action='store_true',
                        help='Run the single-car walkthrough instead of the simulation')
    parser.add_argument('--log-level', default=None,
                        help='Logging level (default: SLOTPOOL_LOG_LEVEL or INFO)')
    parser.add_argument('--log-file', default=None,
                        help='Also write logs to this file')
    return parser


def run_demo(service: ParkingService, payment: str) -> int:
    """Park one car for 4 units, try to leave unpaid, pay, leave"""
    allocation = service.park(
        ParkingRequestDTO(vehicle_id="KA01AB1234", category="car", duration_units=4)
    )
    print(allocation.message)
    if not allocation.success:
        return 1

    handle: SlotHandle = allocation.handle
    print(f"Total Fee: {service.quote(handle).format()}")

    refused = service.leave(handle)
    print(refused.message)

    receipt = service.pay(handle, PaymentGateFactory.create(payment))
    print(f"Paid {receipt.amount} {receipt.currency} via {receipt.method} ({receipt.reference})")

    print(service.leave(handle).message)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.vehicles < 0:
        parser.error("--vehicles cannot be negative")
    if args.workers < 1:
        parser.error("--workers must be at least 1")
    if args.duration < 0:
        parser.error("--duration cannot be negative")

    try:
        settings = PoolSettings.from_env(
            capacity=args.capacity, log_level=args.log_level, log_file=args.log_file
        )
    except ValidationError as e:
        parser.error(f"invalid settings: {e}")

    logger = setup_logging(settings.log_level, settings.log_file)
    logger.info("Starting slot pool simulator...")

    pool = SlotPoolFactory(settings).create()
    event_bus = EventBus()
    recorder = EventRecorder()
    event_bus.subscribe(ALL_EVENTS, recorder)
    service = ParkingService(pool, event_bus=event_bus)

    if args.demo:
        return run_demo(service, args.payment)

    simulation = ParkingSimulation(
        service,
        gate_provider=lambda request: PaymentGateFactory.create(args.payment),
        workers=args.workers,
    )
    report = simulation.run(build_requests(args.vehicles, args.duration))

    output = report.to_dict(mode="json")
    output["events_published"] = len(recorder.events)
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
