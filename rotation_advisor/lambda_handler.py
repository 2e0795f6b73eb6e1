"""
AWS Lambda handler: normalises the event, calls Agent, returns a schema-valid response.
Adds structured, JSON CloudWatch-friendly logs with correlation IDs.

PURPOSE:
- Entry point behind API Gateway for the strategy analysis and combined report.

CONTEXT:
- Logging includes request_id and correlation_id so one request is easy to follow.
- Always answers 200 with a status field so API Gateway does not retry.
"""

from __future__ import annotations
import json
import time
import traceback
import uuid
from typing import Any, Dict

from jsonschema import ValidationError

from rotation_advisor.logging_setup import configure_logging
from rotation_advisor.agent import Agent
from rotation_advisor.agent_io import make_ok_message, validate_response


log = configure_logging()


def _response(body: Dict[str, Any], status_code: int = 200) -> Dict[str, Any]:
    """Wrap a dict into an API Gateway compatible response."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Lambda entry point.

    flow:
    1) Bind request/correlation IDs for traceability.
    2) Normalise body (handles API Gateway proxy format if present).
    3) Create Agent and call handle(body).
    4) Validate result against the Response schema.
       - If the schema fails, return an error payload (still HTTP 200).
    5) On unhandled exceptions, return an "error" payload and log the traceback.
    """
    t0 = time.time()

    request_id = getattr(context, "aws_request_id", None) or str(uuid.uuid4())
    correlation_id = ((event.get("headers") if isinstance(event, dict) else None) or {}).get(
        "x-correlation-id") or str(uuid.uuid4())
    req_log = log.bind(request_id=request_id, correlation_id=correlation_id)
    req_log.info("request.received", event_type=type(event).__name__)

    body = event
    if isinstance(event, dict) and "body" in event:
        try:
            body = json.loads(event["body"]) if isinstance(event["body"], str) else (event["body"] or {})
        except json.JSONDecodeError:
            body = {}
            req_log.warning("request.body_parse_failed")

    try:
        result = Agent().handle(body)

        try:
            validate_response(result)
        except ValidationError as e:
            latency_ms = round((time.time() - t0) * 1000, 1)
            err_payload = {
                "status": "error",
                "messages": [make_ok_message(f"Response schema violation: {e.message}")],
                "latency_ms": latency_ms,
                "trace": result.get("trace", []),
            }
            req_log.error("response.schema_invalid", error=e.message, latency_ms=latency_ms)
            return _response(err_payload, 200)

        latency_ms = round((time.time() - t0) * 1000, 1)
        if result["status"] == "ok":
            req_log.info("response.success", latency_ms=latency_ms, run_id=result.get("run_id"))
        else:
            req_log.warning("response.agent_error", latency_ms=latency_ms,
                            error=result["messages"][0]["content"])
        return _response(result, 200)

    except Exception as e:
        latency_ms = round((time.time() - t0) * 1000, 1)
        req_log.error(
            "response.error",
            error=str(e),
            traceback=traceback.format_exc(limit=2),
            latency_ms=latency_ms,
        )
        error_body = {
            "status": "error",
            "messages": [make_ok_message(f"{type(e).__name__}: {e}")],
            "latency_ms": latency_ms,
        }
        return _response(error_body, 200)
