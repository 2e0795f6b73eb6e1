import pytest

from rotation_advisor.model_impl.summary_agent import (
    NaturalLanguageSummaryAgent,
    vix_status_summary,
    vix_threshold_analysis,
)

def _analyze(state, **extra):
    return NaturalLanguageSummaryAgent().analyze({"portfolioState": state, **extra})

def test_calm_market_keeps_current_allocation(portfolio_state):
    out = _analyze(portfolio_state)
    plan = out["metrics"]["recommendedAllocations"]
    assert plan["incomePie"]["total"] == pytest.approx(0.12)
    assert "note" not in plan
    assert out["summary"] == (
        "M1 Portfolio Strategy Analysis\n\n"
        "Current market conditions indicate a positive trend with VIX at 18.50. "
        "Based on our strategic rotation system:\n\n"
        "✅ NORMAL: VIX below 20 - Maintain standard allocations\n\n"
        "Recommended Portfolio Allocation:\n"
        "- Income Factory: 12%\n"
        "- Short-Term Treasury: 40%\n"
        "- Treasury ETF: 48%"
    )
    assert out["confidence"] == pytest.approx(0.8)
    assert out["risks"] == ["Weak trend strength may lead to false signals"]
    assert out["recommendations"] == [{
        "action": "HOLD", "symbol": "PORTFOLIO", "timeframe": "medium-term", "conviction": 5,
        "rationale": "Current market conditions remain stable", "targetPrice": None, "stopLoss": None,
    }]

def test_detailed_analysis_sections(portfolio_state):
    analysis = _analyze(portfolio_state)["analysis"]
    assert analysis.startswith("# Strategic Rotation System Analysis")
    for heading in ("## Market Environment", "## VIX Threshold Analysis", "## Recommended Allocations",
                    "## Implementation Strategy", "## Monitoring Checklist"):
        assert heading in analysis
    assert "- Treasury Spread: 0.30%" in analysis
    assert "- Market Trend: POSITIVE" in analysis
    assert "### Income Factory (12% Total)" in analysis
    assert "- FEPI: 4.2%" in analysis
    assert "- EDV: 48.0%" in analysis
    assert "✅ NORMAL PRIORITY - Regular rebalancing schedule" in analysis
    assert "## Position Limit Notes" not in analysis

def test_high_vix_is_defensive_and_capped(portfolio_state):
    portfolio_state["marketCondition"]["vix"] = 35.0
    out = _analyze(portfolio_state, actualAllocations={"limitExceeded": {"individualPositions": True}})
    plan = out["metrics"]["recommendedAllocations"]
    assert plan["incomePie"]["total"] == pytest.approx(0.15)
    assert "⚠️ HIGH RISK ALERT" in out["summary"]
    assert "⚠️ POSITION LIMIT ALERT" in out["summary"]
    assert "## Position Limit Notes\nAdjusted to respect position limits" in out["analysis"]
    assert "- FEPI: 5.0%" in out["analysis"]
    assert "🚨 HIGH PRIORITY" in out["analysis"]
    assert "- Option ETFs: Minimum position sizes" in out["analysis"]
    assert "- Treasuries: Increased allocation" in out["analysis"]
    assert out["recommendations"][0]["action"] == "SELL"
    assert out["recommendations"][0]["rationale"] == "VIX above 35.00 suggests elevated market risk"
    assert "Position sizes exceed recommended limits, increasing concentration risk" in out["risks"]
    assert out["metrics"]["exceedsPositionLimits"] is True
    assert out["metrics"]["exceedsCombinedLimits"] is False

def test_summary_percentages_sum_to_100(portfolio_state):
    for vix in (10.0, 22.0, 27.0, 33.0):
        portfolio_state["marketCondition"]["vix"] = vix
        summary = _analyze(portfolio_state)["summary"]
        figures = [int(line.rsplit(" ", 1)[1].rstrip("%")) for line in summary.splitlines()[-3:]]
        assert sum(figures) == 100

def test_rotation_signals_become_recommendations(portfolio_state):
    portfolio_state["rotationSignals"] = [
        {"type": "INCREASE", "symbol": "EDV", "urgency": "HIGH", "reason": "Yields falling"},
        {"type": "REDUCE", "symbol": "QQQY", "urgency": "MEDIUM", "reason": "NAV erosion"},
    ]
    out = _analyze(portfolio_state)
    assert [(r["action"], r["symbol"], r["conviction"]) for r in out["recommendations"]] == [
        ("BUY", "EDV", 8), ("SELL", "QQQY", 6)]
    assert "- Prioritize implementation of current rotation signals\n1." in out["analysis"]
    assert out["metrics"]["rotationSignals"] == portfolio_state["rotationSignals"]

def test_negative_sharpe_default_recommendation(portfolio_state):
    portfolio_state["metrics"]["sharpeRatio"] = -1.5
    rec = _analyze(portfolio_state)["recommendations"][0]
    assert (rec["action"], rec["timeframe"], rec["conviction"]) == ("SELL", "medium-term", 6)
    assert rec["rationale"] == "Negative Sharpe ratio (-1.50) indicates poor risk-adjusted returns"

@pytest.mark.parametrize("vix,sharpe,expected", [
    (35.0, 0.5, 0.6),
    (12.0, 1.5, 1.0),
    (22.0, 0.0, 0.6),
    (35.0, -2.0, 0.4),
    (18.0, -0.5, 0.8),
])
def test_confidence_scoring(portfolio_state, vix, sharpe, expected):
    portfolio_state["marketCondition"]["vix"] = vix
    portfolio_state["metrics"]["sharpeRatio"] = sharpe
    confidence = _analyze(portfolio_state)["confidence"]
    assert confidence == pytest.approx(expected)
    assert 0.0 <= confidence <= 1.0

def test_missing_inputs_fall_back_to_defaults():
    out = NaturalLanguageSummaryAgent().analyze({"portfolioState": {"marketCondition": {"vix": 21.0}}})
    plan = out["metrics"]["recommendedAllocations"]
    total = sum(plan[b]["total"] for b in ("incomePie", "shortTermTreasury", "treasuryETF"))
    assert total == pytest.approx(1.0, abs=0.001)
    assert out["metrics"]["vixTrend"] == "NEUTRAL"
    assert "📊 MONITOR: VIX above 20" in out["summary"]
    assert "⚠️ MEDIUM PRIORITY" in out["analysis"]

def test_vix_texts_by_tier():
    assert vix_status_summary(25.0).startswith("📊 MONITOR")
    assert vix_status_summary(25.5).startswith("⚠️ ELEVATED RISK")
    assert vix_threshold_analysis(31.0).startswith("🚨 CRITICAL: VIX (31.00) exceeds 30")
    assert vix_threshold_analysis(26.0).startswith("⚠️ WARNING: VIX (26.00) exceeds 25")
    assert vix_threshold_analysis(20.0).startswith("✅ NORMAL: VIX (20.00) below 20")

def test_snapshot_without_yield_falls_back_to_trend_risk(portfolio_state):
    portfolio_state["marketCondition"]["vix"] = 15.0
    portfolio_state["metrics"] = {"sharpeRatio": 1.5}
    assert _analyze(portfolio_state)["risks"] == ["Weak trend strength may lead to false signals"]

def test_metrics_carry_resolved_position_limits(portfolio_state):
    out = _analyze(portfolio_state, positionLimits={"maxSingleOptionETF": 0.08})
    assert out["metrics"]["positionLimits"] == {
        "maxSingleOptionETF": 0.08, "maxCombinedOptionETFs": 0.25, "idealIncomePieAllocation": 0.60}
