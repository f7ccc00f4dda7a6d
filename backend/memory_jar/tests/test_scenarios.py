# tests/test_scenarios.py
import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

SCENARIOS_PATH = Path(__file__).parent / "scenarios.json"

with open(SCENARIOS_PATH, "r", encoding="utf-8") as f:
    SCENARIOS: List[Dict[str, Any]] = json.load(f)


def _fail(name: str, msg: str) -> None:
    raise AssertionError(f"[{name}] {msg}")


def _get(d: Dict[str, Any], path: str) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _assert_expect(test_name: str, status: int, resp_json: Dict[str, Any], expect: Dict[str, Any]) -> None:
    if "status" in expect and status != expect["status"]:
        _fail(test_name, f"Expected HTTP {expect['status']}, got {status}: {resp_json}")

    # error_contains: list of substrings
    if "error_contains" in expect:
        error = resp_json.get("error", "") or ""
        for s in expect["error_contains"]:
            if s.lower() not in error.lower():
                _fail(test_name, f"Expected error to contain '{s}', got: {error}")

    # json_path_equals: {"path":"value"}
    if "json_path_equals" in expect:
        for path, expected_value in expect["json_path_equals"].items():
            actual = _get(resp_json, path)
            if actual != expected_value:
                _fail(test_name, f"Expected {path}={expected_value}, got {actual}")

    # list_length: {"path": n}
    if "list_length" in expect:
        for path, n in expect["list_length"].items():
            actual = _get(resp_json, path)
            if not isinstance(actual, list) or len(actual) != n:
                _fail(test_name, f"Expected {path} to have {n} items, got: {actual}")


@pytest.mark.parametrize("scenario", SCENARIOS, ids=[sc["name"] for sc in SCENARIOS])
def test_scenario(scenario, client, alice_headers, bob_headers):
    name = scenario["name"]
    identities = {"alice": alice_headers, "bob": bob_headers}

    for i, step in enumerate(scenario["steps"], start=1):
        headers = identities.get(step.get("as"), {})
        kwargs: Dict[str, Any] = {"headers": headers}
        if "params" in step:
            kwargs["params"] = step["params"]
        if "payload" in step:
            kwargs["json"] = step["payload"]

        r = getattr(client, step["method"])(step["endpoint"], **kwargs)
        _assert_expect(f"{name} / step {i}", r.status_code, r.json(), step.get("expect", {}))
