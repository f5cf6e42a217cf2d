#!/usr/bin/env python3
"""
Event Bus Unit Tests
"""

import unittest
from unittest.mock import Mock

from slotpool.domain.models import Vehicle, VehicleCategory, VehicleParkedEvent, VehicleLeftEvent
from slotpool.infrastructure.messaging import ALL_EVENTS, EventBus, EventHandler, EventRecorder


def parked():
    return VehicleParkedEvent("pool", 1, Vehicle("A", VehicleCategory.CAR), 2)


def left():
    return VehicleLeftEvent("pool", 1, Vehicle("A", VehicleCategory.CAR))


class TestEventBus(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()

    def test_handler_receives_subscribed_type_only(self):
        handler = Mock(spec=EventHandler)
        handler.can_handle.return_value = True
        self.bus.subscribe("vehicle.parked", handler)

        event = parked()
        self.bus.publish(event)
        self.bus.publish(left())

        handler.handle.assert_called_once_with(event)

    def test_wildcard_receives_everything(self):
        recorder = EventRecorder()
        self.bus.subscribe(ALL_EVENTS, recorder)
        self.bus.publish_all([parked(), left()])
        self.assertEqual(len(recorder.events), 2)
        self.assertEqual(recorder.count("vehicle.left"), 1)

    def test_failing_handler_does_not_stop_others(self):
        broken = Mock(spec=EventHandler)
        broken.can_handle.return_value = True
        broken.handle.side_effect = RuntimeError("boom")
        recorder = EventRecorder()
        self.bus.subscribe("vehicle.parked", broken)
        self.bus.subscribe("vehicle.parked", recorder)

        with self.assertLogs("EventBus", level="ERROR"):
            self.bus.publish(parked())
        self.assertEqual(len(recorder.events), 1)

    def test_unsubscribe(self):
        recorder = EventRecorder()
        self.bus.subscribe("vehicle.parked", recorder)
        self.bus.unsubscribe("vehicle.parked", recorder)
        self.bus.publish(parked())
        self.assertEqual(recorder.events, [])

    def test_subscribe_same_handler_once(self):
        recorder = EventRecorder()
        self.bus.subscribe("vehicle.parked", recorder)
        self.bus.subscribe("vehicle.parked", recorder)
        self.bus.publish(parked())
        self.assertEqual(len(recorder.events), 1)

    def test_clear_subscribers(self):
        recorder = EventRecorder()
        self.bus.subscribe(ALL_EVENTS, recorder)
        self.bus.subscribe("vehicle.left", recorder)
        self.bus.clear_subscribers()
        self.bus.publish_all([parked(), left()])
        self.assertEqual(recorder.events, [])


if __name__ == '__main__':
    unittest.main()
