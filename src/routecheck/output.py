"""TOON / JSON formatting of case results and route data, plus exit codes."""

from __future__ import annotations

import json
import sys
from typing import Any

from .cases import CaseResult


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS = 0
EXIT_CLI_ERROR = 1
EXIT_FAILED = 2


def exit_code_for_results(results: list[CaseResult]) -> int:
    if all(r.passed for r in results):
        return EXIT_SUCCESS
    return EXIT_FAILED


# ---------------------------------------------------------------------------
# TOON encoder
# ---------------------------------------------------------------------------

def _toon_value(value: Any) -> str:
    """Encode a single scalar value for TOON."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if "," in text or "\n" in text:
        return json.dumps(text)
    return text


def _toon_tabular(key: str, rows: list[dict[str, Any]]) -> str:
    """Encode a uniform list of dicts as TOON tabular format."""
    if not rows:
        return f"{key}[0]:"
    cols = list(rows[0].keys())
    lines = [f"{key}[{len(rows)}]{{{','.join(cols)}}}:"]
    for row in rows:
        lines.append(" " + ",".join(_toon_value(row.get(c)) for c in cols))
    return "\n".join(lines)


def _result_row(result: CaseResult) -> dict[str, Any]:
    return {
        "status": "ok" if result.passed else "FAIL",
        "method": result.case.method,
        "url": result.case.url,
        "expected": result.case.description,
        "error": result.code,
        "message": result.message,
    }


def encode_toon(results: list[CaseResult]) -> str:
    passed = sum(1 for r in results if r.passed)
    lines = [
        _toon_tabular("results", [_result_row(r) for r in results]),
        f"passed: {passed}",
        f"failed: {len(results) - passed}",
    ]
    return "\n".join(lines)


def encode_match_toon(url: str, match: Any) -> str:
    lines = [f"url: {url}", f"handler: {_toon_value(_handler_name(match.handler))}"]
    values = dict(match.values or {})
    lines.append(f"values[{len(values)}]:")
    for key, value in values.items():
        lines.append(f" {key}: {_toon_value(value)}")
    return "\n".join(lines)


def _handler_name(handler: Any) -> str | None:
    if handler is None:
        return None
    if isinstance(handler, type):
        return handler.__qualname__
    return getattr(handler, "__qualname__", type(handler).__qualname__)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def encode_json(results: list[CaseResult]) -> str:
    passed = sum(1 for r in results if r.passed)
    envelope = {
        "results": [_result_row(r) for r in results],
        "passed": passed,
        "failed": len(results) - passed,
    }
    return json.dumps(envelope, indent=2, default=str)


def encode_match_json(url: str, match: Any) -> str:
    return json.dumps(
        {
            "url": url,
            "handler": _handler_name(match.handler),
            "values": dict(match.values or {}),
        },
        indent=2,
        default=str,
    )


# ---------------------------------------------------------------------------
# Error formatting (always JSON)
# ---------------------------------------------------------------------------

def format_error(code: str, message: str) -> str:
    return json.dumps({"error": code, "message": message})


def print_results(results: list[CaseResult], use_json: bool = False) -> int:
    """Print the case report and return the appropriate exit code."""
    print(encode_json(results) if use_json else encode_toon(results))
    return exit_code_for_results(results)


def print_error(code: str, message: str) -> None:
    print(format_error(code, message), file=sys.stderr)
