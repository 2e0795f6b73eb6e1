# PURPOSE: Combine the upstream agent outputs into one Markdown report with a weighted confidence.
# CONTEXT: The macro output is expected to come from NaturalLanguageSummaryAgent, whose metrics
#          carry the VIX level, recommended allocations and rotation signals.

from __future__ import annotations
import copy
import math
import time
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from rotation_advisor.constants.thresholds import (
    FALLBACK_ALLOCATIONS,
    REPORT_WEIGHTS,
    TRACKED_SYMBOLS,
    VIX_THRESHOLDS,
)
from rotation_advisor.model_impl.allocation import normalize_allocations, resolve_position_limits
from rotation_advisor.model_interface.types import AgentInput, AgentOutput, AnalysisReport, Recommendation
from rotation_advisor.tools.rotation_signals import position_status, signal_actions

CONTEXT_KEYWORDS = ("trend", "momentum", "sentiment", "support", "resistance")
MAX_PRIORITY_ACTIONS = 4
GENERAL_ACTIONS = (
    "Monitor Treasury yield curve for rotation signals between income ETFs and Treasury ETFs.",
    "Review distribution schedules for upcoming payouts from income ETFs.",
)


def _vix(output: AgentOutput) -> float:
    return float((output.get("metrics") or {}).get("vixLevel") or 0.0)


def _first_recommendation(output: AgentOutput) -> Optional[Recommendation]:
    recs = output.get("recommendations") or []
    return recs[0] if recs else None


def vix_description(vix_level: float) -> str:
    if vix_level > VIX_THRESHOLDS["SECOND_REDUCTION"]:
        return "Highly Elevated - Defensive Positioning Required"
    if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
        return "Elevated - Reduce Risk Exposure"
    if vix_level > VIX_THRESHOLDS["MONITOR"]:
        return "Moderately Elevated - Monitor Closely"
    return "Normal Range - Standard Positioning"


def format_vix_thresholds(metrics: Dict[str, Any]) -> str:
    vix_level = float(metrics.get("vixLevel") or 0.0)
    return f"Current VIX: {vix_level:.2f} ({vix_description(vix_level)})"


def conviction_vote(recs: List[Recommendation]) -> Optional[Tuple[str, int]]:
    """
    Conviction-weighted vote over BUY/SELL/HOLD.

    parameters:
    - recs: list[Recommendation] – the subset being voted on.

    returns:
    - (action, conviction) or None for an empty subset.

    notes:
    - Each rec weighs conviction / total conviction (equal weights when every conviction is 0).
    - Ties go to the action that appears first in recs.
    - Conviction is the rounded mean over the recs that voted for the winning action.
    """
    if not recs:
        return None
    total = sum(float(r.get("conviction") or 0) for r in recs)
    scores: Dict[str, float] = {}
    for r in recs:
        weight = float(r.get("conviction") or 0) / total if total > 0 else 1.0 / len(recs)
        scores[r["action"]] = scores.get(r["action"], 0.0) + weight
    # max() keeps the first key on ties; dicts preserve insertion order.
    action = max(scores, key=scores.get)
    backing = [float(r.get("conviction") or 0) for r in recs if r["action"] == action]
    conviction = int(math.floor(sum(backing) / len(backing) + 0.5))
    return action, conviction


def format_vote(recs: List[Recommendation]) -> Optional[str]:
    vote = conviction_vote(recs)
    if vote is None:
        return None
    action, conviction = vote
    return f"{action} (Conviction: {conviction}/10)"


class ReportGenerationAgent:
    """Assemble the final AnalysisReport from the specialist agents' outputs."""

    def generate_report(self,
                        input: AgentInput,
                        fundamental_analysis: AgentOutput,
                        technical_analysis: AgentOutput,
                        sentiment_analysis: AgentOutput,
                        macro_analysis: AgentOutput,
                        natural_language_analysis: AgentOutput) -> AnalysisReport:
        """
        Build the combined report.

        parameters:
        - input: AgentInput – symbol and stockData (last bar's close is the base price).
        - *_analysis: AgentOutput – upstream outputs; natural_language_analysis supplies the headline summary.

        returns:
        - AnalysisReport – Markdown finalRecommendation plus structured fields for the UI.
        """
        symbol = input.get("symbol") or "PORTFOLIO"
        bars = input.get("stockData") or []
        current_price = float(bars[-1]["close"]) if bars and bars[-1].get("close") is not None else None

        final_recommendation = f"""# {symbol} Analysis Summary

{natural_language_analysis.get('summary', '')}

## Strategic Assessment

{self._strategic_assessment(macro_analysis)}

## Action Plan

{self._action_plan(macro_analysis)}

## Market Context

{self._market_context(technical_analysis)}

## Risk Snapshot

{self._risk_snapshot(fundamental_analysis, technical_analysis, sentiment_analysis, macro_analysis)}"""

        outputs = {
            "fundamental": fundamental_analysis,
            "technical": technical_analysis,
            "sentiment": sentiment_analysis,
            "macro": macro_analysis,
        }
        confidence = float(np.average(
            [float(outputs[k].get("confidence") or 0.0) for k in REPORT_WEIGHTS],
            weights=list(REPORT_WEIGHTS.values()),
        ))

        technical_rec = _first_recommendation(technical_analysis)
        short_term = [r for r in (technical_rec,
                                  _first_recommendation(sentiment_analysis),
                                  _first_recommendation(macro_analysis))
                      if r and r.get("timeframe") == "short-term"]
        long_term = [r for r in (_first_recommendation(fundamental_analysis), technical_rec)
                     if r and r.get("timeframe") == "long-term"]

        technical_metrics = technical_analysis.get("metrics") or {}
        risks = [risk for out in outputs.values() for risk in (out.get("risks") or [])]
        vix_level = _vix(macro_analysis)
        signals = (macro_analysis.get("metrics") or {}).get("rotationSignals")

        return {
            "symbol": symbol,
            "timestamp": int(time.time() * 1000),
            "fundamentalAnalysis": fundamental_analysis,
            "technicalAnalysis": technical_analysis,
            "sentimentAnalysis": sentiment_analysis,
            "macroAnalysis": macro_analysis,
            "finalRecommendation": final_recommendation,
            "confidence": round(confidence, 4),
            "risks": risks,
            "supportLevels": list(technical_metrics.get("supportLevels") or []),
            "resistanceLevels": list(technical_metrics.get("resistanceLevels") or []),
            "priceTargets": self._price_targets(current_price, technical_rec),
            "shortTermOutlook": format_vote(short_term),
            "longTermOutlook": format_vote(long_term),
            "positionStatus": {s: position_status(s, vix_level, signals) for s in TRACKED_SYMBOLS},
        }

    def _price_targets(self, current_price: Optional[float],
                       technical_rec: Optional[Recommendation]) -> Optional[Dict[str, float]]:
        if current_price is None:
            return None
        targets = {
            "bullish": current_price * 1.1,
            "base": current_price,
            "bearish": current_price * 0.9,
        }
        if technical_rec and technical_rec.get("targetPrice"):
            targets["bullish"] = float(technical_rec["targetPrice"])
            targets["bearish"] = float(technical_rec.get("stopLoss") or targets["bearish"])
        return targets

    def _strategic_assessment(self, macro_analysis: AgentOutput) -> str:
        metrics = macro_analysis.get("metrics") or {}
        vix_level = _vix(macro_analysis)
        vix_trend = str(metrics.get("vixTrend") or "NEUTRAL")
        if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
            attention = "immediate attention"
        elif vix_level > VIX_THRESHOLDS["MONITOR"]:
            attention = "careful monitoring"
        else:
            attention = "standard oversight"
        opening = "\n".join((macro_analysis.get("analysis") or "").split("\n")[:3])
        return (
            f"The market environment is currently showing {(macro_analysis.get('summary') or '').lower()}\n\n"
            f"With VIX at {vix_level:.2f} and {vix_trend.lower()} trend, your portfolio requires {attention}.\n"
            f"{format_vix_thresholds(metrics)}\n\n"
            f"{opening}"
        )

    def _action_plan(self, macro_analysis: AgentOutput) -> str:
        metrics = macro_analysis.get("metrics") or {}
        recommended = metrics.get("recommendedAllocations")
        if not (isinstance(recommended, dict) and "incomePie" in recommended):
            recommended = FALLBACK_ALLOCATIONS
        # Copy so the macro output keeps the plan it was given.
        plan = normalize_allocations(copy.deepcopy(recommended))

        vix_level = _vix(macro_analysis)
        actions: List[str] = []
        if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
            actions.append(
                f"Reduce option ETF exposure to {plan['incomePie']['total'] * 100:.0f}% of portfolio "
                f"due to elevated VIX ({vix_level:.2f})."
            )

        rotation = signal_actions(metrics.get("rotationSignals"))
        if rotation:
            actions.append(rotation[0])

        limits = resolve_position_limits(metrics.get("positionLimits"))

        if metrics.get("exceedsPositionLimits"):
            actions.append(
                "Rebalance individual option ETF positions to stay within "
                f"{limits['maxSingleOptionETF']:.0%} individual position limits."
            )
        if metrics.get("exceedsCombinedLimits"):
            actions.append(
                "Reduce combined option ETF allocation to maximum "
                f"{limits['maxCombinedOptionETFs']:.0%} of portfolio."
            )

        for general in GENERAL_ACTIONS:
            if len(actions) < 3:
                actions.append(general)

        return "\n\n".join(f"{i}. {a}" for i, a in enumerate(actions[:MAX_PRIORITY_ACTIONS], start=1))

    def _market_context(self, technical_analysis: AgentOutput) -> str:
        lines = [
            line for line in (technical_analysis.get("analysis") or "").split("\n")
            if any(k in line for k in CONTEXT_KEYWORDS)
        ][:3]
        if not lines:
            return technical_analysis.get("summary") or ""
        return "\n".join(lines)

    def _risk_snapshot(self, fundamental_analysis: AgentOutput, technical_analysis: AgentOutput,
                       sentiment_analysis: AgentOutput, macro_analysis: AgentOutput) -> str:
        # Macro risks lead.
        top = [
            risk
            for out in (macro_analysis, technical_analysis, fundamental_analysis, sentiment_analysis)
            for risk in (out.get("risks") or [])
        ][:3]
        vix_level = _vix(macro_analysis)
        protection = ("increase Treasury allocations to at least 50% of portfolio"
                      if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]
                      else "maintain balanced exposure between option ETFs and Treasuries")
        mitigation = [
            f"For protection, {protection}",
            f"Set price alerts for VIX at {math.floor(vix_level) + 5} to trigger defensive action if volatility increases",
        ]
        return "Key risks to watch: " + ", ".join(f"*{r}*" for r in top) + "\n\n" + "\n\n".join(mitigation)
