# PURPOSE: Strategy agent that turns a portfolio snapshot into allocation targets and narrative text.
# CONTEXT: Output feeds the report composer as the "macro" analysis, so metrics keep the
#          camelCase keys the composer reads (vixLevel, recommendedAllocations, rotationSignals ...).

from __future__ import annotations
from typing import Any, Dict, List

from rotation_advisor.constants.thresholds import VIX_THRESHOLDS
from rotation_advisor.model_impl.allocation import (
    adjust_for_position_limits,
    calculate_allocations,
    resolve_position_limits,
    symbol_weights,
)
from rotation_advisor.model_interface.analysis_agent import AnalysisAgent
from rotation_advisor.model_interface.types import AgentInput, AgentOutput, AllocationPlan, Recommendation
from rotation_advisor.tools.risk_alerts import risks_from_portfolio
from rotation_advisor.tools.rotation_signals import signal_to_recommendation
from rotation_advisor.utils.rounding import percent, round_percentages

MONITORING_CHECKLIST = """### Daily Monitoring
- [ ] Check VIX level and trend
- [ ] Monitor option ETF price movements
- [ ] Review market news for volatility triggers

### Weekly Review
- [ ] Calculate 5-day VIX moving average
- [ ] Assess Treasury yield curve changes
- [ ] Review option ETF performance metrics
- [ ] Evaluate rotation signals

### Monthly Assessment
- [ ] Calculate 3-month rolling performance
- [ ] Evaluate NAV erosion metrics
- [ ] Update distribution yield calculations
- [ ] Review strategy effectiveness"""


def _clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x to the [lo, hi] interval."""
    return min(hi, max(lo, x))


def vix_status_summary(vix_level: float) -> str:
    if vix_level > VIX_THRESHOLDS["SECOND_REDUCTION"]:
        return "⚠️ HIGH RISK ALERT: VIX above 30 - Implement maximum defensive positioning"
    if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
        return "⚠️ ELEVATED RISK: VIX above 25 - Reduce option ETF exposure"
    if vix_level > VIX_THRESHOLDS["MONITOR"]:
        return "📊 MONITOR: VIX above 20 - Enhanced monitoring required"
    return "✅ NORMAL: VIX below 20 - Maintain standard allocations"


def vix_threshold_analysis(vix_level: float) -> str:
    """Tiered guidance block for the detailed analysis."""
    vix = f"{vix_level:.2f}"
    if vix_level > VIX_THRESHOLDS["SECOND_REDUCTION"]:
        return (f"🚨 CRITICAL: VIX ({vix}) exceeds {VIX_THRESHOLDS['SECOND_REDUCTION']}\n"
                "- Reduce option ETF exposure to 25% of original position\n"
                "- Increase Treasury allocations significantly\n"
                "- Implement strict risk controls")
    if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
        return (f"⚠️ WARNING: VIX ({vix}) exceeds {VIX_THRESHOLDS['FIRST_REDUCTION']}\n"
                "- Reduce option ETF exposure by 25%\n"
                "- Increase Treasury allocations moderately\n"
                "- Enhanced monitoring required")
    if vix_level > VIX_THRESHOLDS["MONITOR"]:
        return (f"📊 MONITOR: VIX ({vix}) exceeds {VIX_THRESHOLDS['MONITOR']}\n"
                "- Maintain current positions\n"
                "- Prepare for potential adjustments\n"
                "- Increase monitoring frequency")
    return (f"✅ NORMAL: VIX ({vix}) below {VIX_THRESHOLDS['MONITOR']}\n"
            "- Maintain standard allocations\n"
            "- Regular monitoring sufficient\n"
            "- Focus on yield optimization")


class NaturalLanguageSummaryAgent(AnalysisAgent):
    """
    Rotation-strategy agent:
    1) Derive market metrics (trend from Sharpe, 10y-2y treasury spread).
    2) Pick a VIX preset allocation and cap it to the position limits.
    3) Write a short summary and a Markdown detailed analysis.
    4) Map rotation signals to recommendations, score confidence, list risks.
    """

    def analyze(self, input: AgentInput) -> AgentOutput:
        """
        Produce the strategy analysis for one portfolio snapshot.

        parameters:
        - input: AgentInput – uses portfolioState, actualAllocations and positionLimits.

        returns:
        - AgentOutput – {"summary", "analysis", "confidence", "recommendations", "risks", "metrics"}
        """
        portfolio_state = input.get("portfolioState") or {}
        actual = input.get("actualAllocations") or {}
        limits = input.get("positionLimits")

        market = portfolio_state.get("marketCondition") or {}
        vix_level = float(market.get("vix") or 0.0)
        sharpe = float((portfolio_state.get("metrics") or {}).get("sharpeRatio") or 0.0)
        rotation_signals = portfolio_state.get("rotationSignals") or []

        exceeded = actual.get("limitExceeded") or {}
        exceeds_positions = bool(exceeded.get("individualPositions"))
        exceeds_combined = bool(exceeded.get("combinedOptionETFs"))

        market_metrics = self._market_metrics(portfolio_state)
        allocations = adjust_for_position_limits(calculate_allocations(vix_level, actual, limits), limits)

        return {
            "summary": self._summary(vix_level, market_metrics, allocations, exceeds_positions or exceeds_combined),
            "analysis": self._detailed_analysis(vix_level, market_metrics, allocations, portfolio_state),
            "confidence": self._confidence(vix_level, sharpe, market_metrics),
            "recommendations": self._recommendations(portfolio_state),
            "risks": risks_from_portfolio(portfolio_state, exceeds_positions),
            "metrics": {
                "vixLevel": vix_level,
                "vixTrend": market.get("vixTrend", "NEUTRAL"),
                "riskLevel": market.get("riskLevel"),
                "sharpeRatio": sharpe,
                "actualAllocations": actual,
                "recommendedAllocations": allocations,
                "rotationSignals": rotation_signals,
                "exceedsPositionLimits": exceeds_positions,
                "exceedsCombinedLimits": exceeds_combined,
                "positionLimits": resolve_position_limits(limits),
            },
        }

    def _market_metrics(self, portfolio_state: Dict[str, Any]) -> Dict[str, Any]:
        market = portfolio_state.get("marketCondition") or {}
        sharpe = float((portfolio_state.get("metrics") or {}).get("sharpeRatio") or 0.0)
        ten = float(market.get("tenYearYield") or 0.0)
        two = float(market.get("twoYearYield") or 0.0)
        return {
            "marketTrend": "positive" if sharpe > 0 else "negative",
            "treasuryTrend": "positive" if ten > two else "negative",
            "treasurySpread": ten - two,
            "marketSentiment": market.get("riskLevel"),
        }

    def _summary(self, vix_level: float, market_metrics: Dict[str, Any],
                 allocations: AllocationPlan, limits_exceeded: bool) -> str:
        warning = ("\n⚠️ POSITION LIMIT ALERT: Current allocations exceed recommended limits. Adjustments needed."
                   if limits_exceeded else "")
        pct = round_percentages(allocations)
        return (
            "M1 Portfolio Strategy Analysis\n\n"
            f"Current market conditions indicate a {market_metrics['marketTrend']} trend with VIX at "
            f"{vix_level:.2f}. Based on our strategic rotation system:\n\n"
            f"{vix_status_summary(vix_level)}{warning}\n\n"
            "Recommended Portfolio Allocation:\n"
            f"- Income Factory: {pct['incomePie']}%\n"
            f"- Short-Term Treasury: {pct['shortTermTreasury']}%\n"
            f"- Treasury ETF: {pct['treasuryETF']}%"
        )

    def _detailed_analysis(self, vix_level: float, market_metrics: Dict[str, Any],
                           allocations: AllocationPlan, portfolio_state: Dict[str, Any]) -> str:
        pie = allocations["incomePie"]
        weights = symbol_weights(allocations)
        limit_notes = f"\n## Position Limit Notes\n{allocations['note']}" if allocations.get("note") else ""
        risk_level = (portfolio_state.get("marketCondition") or {}).get("riskLevel")
        return f"""# Strategic Rotation System Analysis

## Market Environment
- VIX Level: {vix_level:.2f}
- Market Trend: {market_metrics['marketTrend'].upper()}
- Treasury Spread: {market_metrics['treasurySpread']:.2f}%
- Risk Level: {risk_level}

## VIX Threshold Analysis
🔍 Current Status:
{vix_threshold_analysis(vix_level)}

## Recommended Allocations

### Income Factory ({percent(pie['total'], 0)}% Total)
- FEPI: {percent(weights['FEPI'])}%
- SDTY: {percent(weights['SDTY'])}%
- QQQY: {percent(weights['QQQY'])}%

### Treasury Allocations
- SHY: {percent(weights['SHY'])}%
- EDV: {percent(weights['EDV'])}%{limit_notes}

## Implementation Strategy
{self._implementation_strategy(vix_level, portfolio_state)}

## Monitoring Checklist
{MONITORING_CHECKLIST}"""

    def _implementation_strategy(self, vix_level: float, portfolio_state: Dict[str, Any]) -> str:
        elevated = vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]
        if elevated:
            priority = "🚨 HIGH PRIORITY - Execute adjustments within 1-2 trading days"
        elif vix_level > VIX_THRESHOLDS["MONITOR"]:
            priority = "⚠️ MEDIUM PRIORITY - Execute adjustments within 3-5 trading days"
        else:
            priority = "✅ NORMAL PRIORITY - Regular rebalancing schedule"

        signals_first = ("- Prioritize implementation of current rotation signals\n"
                         if portfolio_state.get("rotationSignals") else "")
        if vix_level > VIX_THRESHOLDS["SECOND_REDUCTION"]:
            sizing = "Minimum"
        elif elevated:
            sizing = "Reduced"
        else:
            sizing = "Standard"

        return f"""### Implementation Priority
{priority}

### Execution Strategy
{signals_first}1. {'Reduce option ETF exposure first' if elevated else 'Monitor option ETF performance'}
2. {'Increase Treasury positions second' if elevated else 'Maintain Treasury allocations'}
3. {'Review and adjust stop levels' if elevated else 'Regular stop level monitoring'}

### Position Sizing
- Option ETFs: {sizing} position sizes
- Treasuries: {'Increased' if elevated else 'Standard'} allocation"""

    def _recommendations(self, portfolio_state: Dict[str, Any]) -> List[Recommendation]:
        signals = portfolio_state.get("rotationSignals") or []
        if signals:
            return [signal_to_recommendation(s) for s in signals]

        vix_level = float((portfolio_state.get("marketCondition") or {}).get("vix") or 0.0)
        sharpe = float((portfolio_state.get("metrics") or {}).get("sharpeRatio") or 0.0)
        if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
            action, symbol, timeframe, conviction = "SELL", "OPTION_ETFS", "short-term", 7
            rationale = f"VIX above {vix_level:.2f} suggests elevated market risk"
        elif sharpe < -1:
            action, symbol, timeframe, conviction = "SELL", "OPTION_ETFS", "medium-term", 6
            rationale = f"Negative Sharpe ratio ({sharpe:.2f}) indicates poor risk-adjusted returns"
        else:
            action, symbol, timeframe, conviction = "HOLD", "PORTFOLIO", "medium-term", 5
            rationale = "Current market conditions remain stable"
        return [{
            "action": action,
            "symbol": symbol,
            "timeframe": timeframe,
            "conviction": conviction,
            "rationale": rationale,
            "targetPrice": None,
            "stopLoss": None,
        }]

    def _confidence(self, vix_level: float, sharpe: float, market_metrics: Dict[str, Any]) -> float:
        confidence = 0.7
        if vix_level > VIX_THRESHOLDS["SECOND_REDUCTION"]:
            confidence -= 0.2
        elif vix_level < 15:
            confidence += 0.1

        if sharpe < -1:
            confidence -= 0.2
        elif sharpe > 1:
            confidence += 0.1

        # Trend is derived from Sharpe, so only a zero Sharpe counts as disagreement.
        trend = market_metrics["marketTrend"]
        if (trend == "positive" and sharpe > 0) or (trend == "negative" and sharpe < 0):
            confidence += 0.1
        else:
            confidence -= 0.1
        return round(_clamp(confidence, 0.0, 1.0), 4)
