# PURPOSE: Validated end-to-end runs for the strategy analysis and the combined report.
# CONTEXT: Inputs are checked against the bundled JSON schemas before any calculation and
#          the outputs are checked again before they leave the pipeline.

from __future__ import annotations
import json, time, uuid
from datetime import datetime
from zoneinfo import ZoneInfo

import structlog

from rotation_advisor.agent_io import (
    make_ok_message,
    validate_agent_output,
    validate_allocation_plan,
    validate_report_request,
    validate_response,
    validate_strategy_request,
)
from rotation_advisor.model_impl.report_agent import ReportGenerationAgent
from rotation_advisor.model_interface.loader import load_summary_agent
from rotation_advisor.utils.rounding import round_percentages

TZ = ZoneInfo("UTC")

log = structlog.get_logger(__name__)

def _run_id() -> str:
    """
    Readable run ID: short random prefix plus a timestamp suffix.
    Example: 'a1b2c3d4-20261018XXXXXX'
    """
    return uuid.uuid4().hex[:8] + "-" + datetime.now(TZ).strftime("%Y%m%d%H%M%S")

def _agent_input(payload: dict) -> dict:
    return {
        "symbol": payload.get("symbol") or "PORTFOLIO",
        "stockData": payload.get("stockData") or [],
        "portfolioState": payload["portfolioState"],
        "actualAllocations": payload.get("actualAllocations") or {},
        "positionLimits": payload.get("positionLimits") or {},
    }

def run_pipeline(payload: dict) -> dict:
    """
    Strategy run:

    steps:
    1) Validate input against the StrategyRequest schema.
    2) Run the summary agent (NaturalLanguageSummaryAgent unless SUMMARY_AGENT_MODULE overrides it).
    3) Validate the AgentOutput and its recommended allocation plan.
    4) Assemble the response with run_id, whole-percent figures and latency.

    returns:
    - dict – {"status", "run_id", "messages", "analysis", "allocation", "percentages", "latency_ms"}
    """
    t0 = time.time()
    validate_strategy_request(payload)

    analysis = load_summary_agent().analyze(_agent_input(payload))
    validate_agent_output(analysis)
    plan = analysis["metrics"]["recommendedAllocations"]
    validate_allocation_plan(plan)

    out = {
        "status": "ok",
        "run_id": _run_id(),
        "messages": [make_ok_message(analysis["summary"])],
        "analysis": analysis,
        "allocation": plan,
        "percentages": round_percentages(plan),
        "latency_ms": round((time.time() - t0) * 1000, 1),
    }
    validate_response(out)
    log.info("pipeline.strategy.done", run_id=out["run_id"], confidence=analysis["confidence"],
             income_pie=plan["incomePie"]["total"])
    return out

def run_report(payload: dict) -> dict:
    """
    Report run:

    steps:
    1) Validate input against the ReportRequest schema.
    2) Run the summary agent; it doubles as the macro analysis unless one is supplied.
    3) Validate every upstream AgentOutput, then compose the report.

    returns:
    - dict – {"status", "run_id", "messages", "report", "latency_ms"}
    """
    t0 = time.time()
    validate_report_request(payload)

    agent_input = _agent_input(payload)
    summary = load_summary_agent().analyze(agent_input)
    analyses = payload["analyses"]
    macro = analyses.get("macro") or summary
    for upstream in (analyses["fundamental"], analyses["technical"], analyses["sentiment"], macro, summary):
        validate_agent_output(upstream)

    report = ReportGenerationAgent().generate_report(
        agent_input,
        analyses["fundamental"],
        analyses["technical"],
        analyses["sentiment"],
        macro,
        summary,
    )
    out = {
        "status": "ok",
        "run_id": _run_id(),
        "messages": [make_ok_message(report["finalRecommendation"])],
        "report": report,
        "latency_ms": round((time.time() - t0) * 1000, 1),
    }
    validate_response(out)
    log.info("pipeline.report.done", run_id=out["run_id"], symbol=report["symbol"],
             confidence=report["confidence"], short_term=report["shortTermOutlook"],
             long_term=report["longTermOutlook"])
    return out

if __name__ == "__main__":
    demo = {
        "portfolioState": {
            "marketCondition": {"vix": 27.4, "vixTrend": "RISING", "riskLevel": "ELEVATED",
                                "tenYearYield": 4.3, "twoYearYield": 4.0},
            "metrics": {"sharpeRatio": 0.8, "totalYield": 0.14},
            "holdings": [],
            "rotationSignals": [],
        }
    }
    print(json.dumps(run_pipeline(demo), indent=2))
