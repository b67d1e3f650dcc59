import os
import random
import sys
import tempfile
import unittest
from collections import Counter
from contextlib import redirect_stdout
from io import StringIO
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from ring_router import simulate
from ring_router import Router


class SimulateHelpersTest(unittest.TestCase):
    def test_make_random_key(self):
        key = simulate.make_random_key(random.Random(1), 8)
        self.assertEqual(len(key), 8)
        self.assertTrue(key.isalpha() and key.isupper())
        self.assertEqual(key, simulate.make_random_key(random.Random(1), 8))

    def test_run_simulation_counts_unrouted(self):
        router = Router(4)
        self.assertEqual(simulate.run_simulation(router, ["a", "b"]), Counter({None: 2}))
        router.add_host("A", 1.0)
        self.assertEqual(simulate.run_simulation(router, ["a", "b"]), Counter({"A": 2}))

    def test_format_histogram(self):
        lines = simulate.format_histogram(Counter({"srv-02": 1, "srv-01": 3}), 4)
        self.assertEqual(
            lines,
            ["Histogram:", "server: srv-01, load: 75.00", "server: srv-02, load: 25.00"],
        )

    def test_build_router_applies_removals(self):
        config = simulate.parse_args(["--host", "a=1", "--host", "b=2", "--remove", "a"])
        router = simulate.build_router(config)
        self.assertEqual(router.hosts(), ["b"])


class SimulateCliTest(unittest.TestCase):
    def test_parse_args_defaults_from_env(self):
        env = {"ROUTER_REPLICAS": "16", "ROUTER_REQUESTS": "50", "ROUTER_SEED": "9"}
        with mock.patch.dict(os.environ, env):
            config = simulate.parse_args([])
        self.assertEqual(config.replicas, 16)
        self.assertEqual(config.requests, 50)
        self.assertEqual(config.seed, 9)
        self.assertEqual(len(config.hosts), 6)

    def test_non_numeric_env_default_exits(self):
        with mock.patch.dict(os.environ, {"ROUTER_REPLICAS": "many"}):
            with mock.patch("sys.stderr", new=StringIO()):
                with self.assertRaises(SystemExit) as cm:
                    simulate.parse_args([])
        self.assertEqual(cm.exception.code, 2)

    def test_invalid_arguments_exit(self):
        with redirect_stdout(StringIO()), mock.patch("sys.stderr", new=StringIO()):
            with self.assertRaises(SystemExit) as cm:
                simulate.parse_args(["--replicas", "0"])
            self.assertEqual(cm.exception.code, 2)
            with self.assertRaises(SystemExit):
                simulate.parse_args(["--host", "a=99"])

    def test_main_prints_histogram(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_path = os.path.join(tmpdir, "events.txt")
            out = StringIO()
            with redirect_stdout(out):
                rc = simulate.main(
                    [
                        "--replicas", "32",
                        "--requests", "2000",
                        "--seed", "5",
                        "--host", "x=1",
                        "--host", "y=1",
                        "--event-log", log_path,
                    ]
                )
            self.assertEqual(rc, 0)
            lines = out.getvalue().splitlines()
            self.assertEqual(lines[0], "Histogram:")
            self.assertTrue(lines[1].startswith("server: x, load: "))
            self.assertTrue(lines[2].startswith("server: y, load: "))
            loads = [float(line.rsplit(" ", 1)[1]) for line in lines[1:]]
            self.assertAlmostEqual(sum(loads), 100.0, places=1)
            with open(log_path, encoding="utf-8") as fh:
                self.assertEqual(len(fh.read().splitlines()), 2)


if __name__ == "__main__":
    unittest.main()
