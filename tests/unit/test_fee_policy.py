#!/usr/bin/env python3
"""
Fee Policy Unit Tests
"""

import unittest
from decimal import Decimal

from slotpool.domain.models import Money, VehicleCategory
from slotpool.domain.strategies import FeePolicy, RateTable, quote_fee, DEFAULT_RATES
from slotpool.domain.exceptions import InvalidCategory, InvalidDuration


class TestRateTable(unittest.TestCase):
    """Unit tests for the rate table value object"""

    def test_default_rates(self):
        self.assertEqual(DEFAULT_RATES.rate_for(VehicleCategory.BIKE), Money(5))
        self.assertEqual(DEFAULT_RATES.rate_for(VehicleCategory.CAR), Money(10))
        self.assertEqual(DEFAULT_RATES.rate_for(VehicleCategory.TRUCK), Money(20))

    def test_ordering_enforced(self):
        with self.assertRaises(ValueError):
            RateTable(bike=Money(10), car=Money(10), truck=Money(20))
        with self.assertRaises(ValueError):
            RateTable(bike=Money(5), car=Money(30), truck=Money(20))

    def test_single_currency_enforced(self):
        with self.assertRaises(ValueError):
            RateTable(bike=Money(1, "USD"), car=Money(2, "INR"), truck=Money(3, "INR"))

    def test_unknown_category_not_priced(self):
        with self.assertRaises(InvalidCategory):
            DEFAULT_RATES.rate_for("car")


class TestFeePolicy(unittest.TestCase):
    """Unit tests for quoting"""

    def setUp(self):
        self.policy = FeePolicy()

    def test_car_for_four_units(self):
        self.assertEqual(self.policy.quote(VehicleCategory.CAR, 4).amount, Decimal('40.00'))

    def test_linear_in_duration(self):
        for category in VehicleCategory:
            one = self.policy.quote(category, 1)
            for units in (0, 2, 7, 24):
                self.assertEqual(self.policy.quote(category, units), one * units)

    def test_zero_duration_is_free(self):
        for category in VehicleCategory:
            self.assertEqual(self.policy.quote(category, 0), Money.zero())

    def test_bike_cheaper_than_car_cheaper_than_truck(self):
        bike = self.policy.quote(VehicleCategory.BIKE, 3).amount
        car = self.policy.quote(VehicleCategory.CAR, 3).amount
        truck = self.policy.quote(VehicleCategory.TRUCK, 3).amount
        self.assertLess(bike, car)
        self.assertLess(car, truck)

    def test_negative_duration_rejected(self):
        with self.assertRaises(InvalidDuration):
            self.policy.quote(VehicleCategory.CAR, -1)

    def test_non_integer_duration_rejected(self):
        for bad in (1.5, "4", True):
            with self.assertRaises(InvalidDuration):
                self.policy.quote(VehicleCategory.CAR, bad)

    def test_unknown_category_raises_instead_of_zero(self):
        with self.assertRaises(InvalidCategory):
            self.policy.quote("bus", 2)
        with self.assertRaises(InvalidCategory):
            self.policy.quote(None, 2)

    def test_quote_is_deterministic(self):
        first = self.policy.quote(VehicleCategory.TRUCK, 5)
        self.assertEqual([self.policy.quote(VehicleCategory.TRUCK, 5) for _ in range(5)], [first] * 5)

    def test_custom_rates(self):
        policy = FeePolicy(RateTable(bike=Money(2, "USD"), car=Money(3, "USD"), truck=Money(8, "USD")))
        self.assertEqual(policy.quote(VehicleCategory.TRUCK, 2), Money(16, "USD"))
        self.assertEqual(policy.currency, "USD")

    def test_module_function_matches_policy(self):
        self.assertEqual(quote_fee(VehicleCategory.BIKE, 6), self.policy.quote(VehicleCategory.BIKE, 6))


if __name__ == '__main__':
    unittest.main()
