"""
Agent controller: decides which pipeline a request needs and records a lightweight trace.

PURPOSE: High-level controller used by both the CLI and the Lambda entry point.
CONTEXT: Requests carrying upstream "analyses" get the combined report; everything else
         gets the strategy analysis.
"""

import traceback
from typing import Dict, Any

from rotation_advisor.agent_io import make_ok_message, make_system_message, error_to_string
from rotation_advisor import pipeline


class Agent:
    """High-level controller for the rotation advisor."""

    def __init__(self):
        # In-memory trace of planning/execution steps for debugging.
        self.trace = []

    def handle(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Main entry point. Plans the request and dispatches to the matching pipeline.

        returns:
        - dict – pipeline output with 'trace' attached, or a structured error payload
          ({"status": "error", "messages": [...], "trace": [...]}) if anything fails.
        """
        try:
            plan = self._plan(payload)
            self.trace.append(plan)

            if plan["next"] == "report":
                out = pipeline.run_report(payload)
            else:
                out = pipeline.run_pipeline(payload)
            self.trace.append({"step": "done", "status": out.get("status"), "run_id": out.get("run_id")})
            out["trace"] = self.trace
            return out

        except Exception as e:
            tb = traceback.format_exc(limit=2)
            return {
                "status": "error",
                "messages": [make_ok_message(error_to_string(e)), make_system_message(tb)],
                "trace": self.trace,
            }

    def _plan(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rule-based planner.

        rules:
        - Payload is not a dict → reject.
        - Payload has 'analyses' → combined report.
        - Otherwise → strategy analysis.
        """
        if not isinstance(payload, dict):
            raise TypeError(f"Expected a JSON object payload, got {type(payload).__name__}")
        if "analyses" in payload:
            return {"step": "plan", "next": "report", "symbol": payload.get("symbol")}
        return {"step": "plan", "next": "strategy"}
