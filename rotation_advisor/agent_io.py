"""
I/O helpers for schemas and message construction.

PURPOSE: Central place for JSON schema validation and message formatting used by the
         strategy/report pipeline, the controller and the Lambda entry point.
CONTEXT: Schemas ship inside the package (rotation_advisor/schemas/) so validation works
         regardless of the current working directory.
"""

from __future__ import annotations

import json
import pathlib
from functools import lru_cache
from typing import Any, Dict

from jsonschema import Draft7Validator, ValidationError

SCHEMA_DIR = pathlib.Path(__file__).resolve().parent / "schemas"


# -------------------- Schema loading utilities -------------------- #

@lru_cache(maxsize=64)
def _load_schema_cached(abs_path: str) -> Dict[str, Any]:
    """Read and parse a JSON schema file once per absolute path."""
    return json.loads(pathlib.Path(abs_path).read_text(encoding="utf-8"))


def load_schema(name: str) -> Dict[str, Any]:
    """
    Load a JSON schema by file name (looked up in SCHEMA_DIR) or by path.

    parameters:
    - name: str – e.g. "agent_output.schema.json", or a relative/absolute path.

    returns:
    - dict – schema as a Python dictionary.

    raises:
    - FileNotFoundError – if neither location holds the file.
    - json.JSONDecodeError – if the file is not valid JSON.
    """
    p = SCHEMA_DIR / name
    if not p.exists():
        p = pathlib.Path(name)
        if not p.exists():
            raise FileNotFoundError(f"Schema not found at: {name}")
    return _load_schema_cached(str(p.resolve()))


# -------------------- Validation helpers -------------------- #

def validate_with_schema(instance: Dict[str, Any], schema: Dict[str, Any]) -> None:
    """
    Validate a given instance against a provided schema.

    raises:
    - ValidationError – if instance fails to meet schema requirements.
    """
    Draft7Validator(schema).validate(instance)


def validate_strategy_request(payload: Dict[str, Any]) -> None:
    """Portfolio snapshot request: requires portfolioState.marketCondition.vix."""
    validate_with_schema(payload, load_schema("strategy_request.schema.json"))


def validate_report_request(payload: Dict[str, Any]) -> None:
    validate_with_schema(payload, load_schema("report_request.schema.json"))


def validate_agent_output(agent_output: Dict[str, Any]) -> None:
    validate_with_schema(agent_output, load_schema("agent_output.schema.json"))


def validate_allocation_plan(plan: Dict[str, Any]) -> None:
    validate_with_schema(plan, load_schema("allocation_plan.schema.json"))


def validate_response(response: Dict[str, Any]) -> None:
    """
    Validate the final response envelope returned to callers.
    Both "ok" and "error" bodies must pass.
    """
    validate_with_schema(response, load_schema("response.schema.json"))


# -------------------- Message construction helpers -------------------- #

def make_ok_message(content: str) -> Dict[str, str]:
    """Create an assistant-style message (role='assistant')."""
    return {"role": "assistant", "content": str(content)}


def make_system_message(content: str) -> Dict[str, str]:
    return {"role": "system", "content": str(content)}


def error_to_string(err: Exception) -> str:
    """
    Convert exceptions into readable strings for user-facing error messages.

    notes:
    - ValidationError messages include a pointer path showing where validation failed.
    """
    if isinstance(err, ValidationError):
        # Include JSON path context (e.g. $.portfolioState.marketCondition)
        path = "$" + "".join(f"[{repr(p)}]" if isinstance(p, int) else f".{p}" for p in err.path)
        return f"{err.message} at {path}"
    return f"{type(err).__name__}: {err}"


__all__ = [
    "SCHEMA_DIR",
    "load_schema",
    "validate_with_schema",
    "validate_strategy_request",
    "validate_report_request",
    "validate_agent_output",
    "validate_allocation_plan",
    "validate_response",
    "make_ok_message",
    "make_system_message",
    "error_to_string",
]
