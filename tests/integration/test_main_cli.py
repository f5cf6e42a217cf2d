#!/usr/bin/env python3
"""
Command-line entry point tests
"""

import io
import json
import os
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from slotpool.main import build_parser, main


class TestMainCli(unittest.TestCase):

    def setUp(self):
        env = {k: v for k, v in os.environ.items() if not k.startswith("SLOTPOOL_")}
        patcher = patch.dict(os.environ, env, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_main(self, *argv):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            code = main(list(argv) + ["--log-level", "WARNING"])
        return code, buffer.getvalue()

    def test_demo_walkthrough(self):
        code, output = self.run_main("--demo", "--payment", "card")
        self.assertEqual(code, 0)
        self.assertIn("Parked: KA01AB1234", output)
        self.assertIn("Total Fee: 40.00 INR", output)
        self.assertIn("payment not done", output)
        self.assertIn("Vehicle exited successfully.", output)

    def test_demo_with_empty_pool(self):
        code, output = self.run_main("--demo", "--capacity", "0")
        self.assertEqual(code, 1)
        self.assertIn("No available slots.", output)

    def test_simulation_report(self):
        code, output = self.run_main("--capacity", "2", "--vehicles", "6", "--workers", "3",
                                     "--payment", "upi")
        self.assertEqual(code, 0)
        report = json.loads(output)
        self.assertEqual(report["vehicles"], 6)
        self.assertEqual(report["capacity"], 2)
        self.assertEqual(report["parked"] + report["turned_away"], 6)
        self.assertEqual(report["released"], report["parked"])
        self.assertEqual(report["slots_free_at_end"], 2)
        self.assertGreater(report["events_published"], 0)

    def test_capacity_from_environment(self):
        with patch.dict(os.environ, {"SLOTPOOL_CAPACITY": "5"}):
            code, output = self.run_main("--vehicles", "1")
        self.assertEqual(json.loads(output)["capacity"], 5)

    def assert_usage_error(self, *argv):
        stderr = io.StringIO()
        with redirect_stdout(io.StringIO()), patch("sys.stderr", stderr):
            with self.assertRaises(SystemExit) as ctx:
                main(list(argv))
        self.assertEqual(ctx.exception.code, 2)
        return stderr.getvalue()

    def test_negative_capacity_is_usage_error(self):
        self.assertIn("invalid settings", self.assert_usage_error("--capacity", "-1"))

    def test_zero_workers_is_usage_error(self):
        self.assertIn("--workers", self.assert_usage_error("--workers", "0"))

    def test_negative_duration_is_usage_error(self):
        self.assertIn("--duration", self.assert_usage_error("--duration", "-2"))

    def test_misordered_rates_from_environment_is_usage_error(self):
        with patch.dict(os.environ, {"SLOTPOOL_BIKE_RATE": "50"}):
            message = self.assert_usage_error("--vehicles", "1")
        self.assertIn("bike < car < truck", message)

    def test_parser_rejects_unknown_payment(self):
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit):
            with patch("sys.stderr", io.StringIO()):
                build_parser().parse_args(["--payment", "cheque"])


if __name__ == '__main__':
    unittest.main()
