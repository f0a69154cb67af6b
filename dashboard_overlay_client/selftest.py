"""Bundled test runner for environments without pytest.

Collects the ``test_*`` functions of every test module in the package and
reports them the same way pytest would count them.

Usage:
    python -m dashboard_overlay_client.selftest
    python cli.py test
"""

from __future__ import annotations

import importlib
import inspect
import logging
import sys
import traceback
from typing import Callable, List, Optional, Tuple

TEST_MODULES = [
    "dashboard_overlay_client.scene.test_scene",
    "dashboard_overlay_client.telemetry.test_telemetry",
    "dashboard_overlay_client.control.test_control",
    "dashboard_overlay_client.gauges.test_gauges",
    "dashboard_overlay_client.overlay.test_overlay",
    "dashboard_overlay_client.hosts.test_hosts",
    "dashboard_overlay_client.render.test_render",
    "dashboard_overlay_client.test_config",
    "dashboard_overlay_client.test_task",
    "dashboard_overlay_client.test_video",
]


class TestResult:
    __test__ = False

    def __init__(self, name: str):
        self.name = name
        self.passed = False
        self.error: Optional[str] = None

    def __repr__(self) -> str:
        status = "PASS" if self.passed else f"FAIL: {self.error}"
        return f"{self.name}: {status}"


def collect_tests() -> List[Tuple[str, Callable[[], None]]]:
    tests = []
    for module_name in TEST_MODULES:
        module = importlib.import_module(module_name)
        short = module_name.rsplit(".", 1)[-1]
        for name, func in inspect.getmembers(module, inspect.isfunction):
            if name.startswith("test_") and func.__module__ == module.__name__:
                tests.append((f"{short}.{name}", func))
    return tests


def run_test(name: str, func: Callable[[], None]) -> TestResult:
    result = TestResult(name)
    try:
        func()
        result.passed = True
    except Exception as exc:
        result.error = f"{type(exc).__name__}: {exc}"
        logging.debug("%s", traceback.format_exc())
    return result


def run_all_tests() -> Tuple[int, int, List[TestResult]]:
    """Run all tests and return (passed, total, results)."""
    tests = collect_tests()
    results = []
    passed = 0
    for name, func in tests:
        logging.info("Running %s...", name)
        result = run_test(name, func)
        results.append(result)
        if result.passed:
            passed += 1
        else:
            logging.error("  FAIL: %s", result.error)

    return passed, len(tests), results


def main() -> int:
    print("=" * 60)
    print("Dashboard Overlay Test Suite")
    print("=" * 60)

    passed, total, results = run_all_tests()

    print("\n" + "=" * 60)
    print(f"Results: {passed}/{total} tests passed")
    print("=" * 60)

    for r in results:
        status = "✓ PASS" if r.passed else "✗ FAIL"
        print(f"  {status}: {r.name}")
        if not r.passed and r.error:
            print(f"         Error: {r.error}")

    return 0 if passed == total else 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    sys.exit(main())
