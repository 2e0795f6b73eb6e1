from rotation_advisor.tools.risk_alerts import FALLBACK_RISK, risks_from_portfolio
from rotation_advisor.tools.rotation_signals import (
    position_status,
    signal_action_text,
    signal_actions,
    signal_to_recommendation,
)

def test_risks_cover_every_trigger():
    state = {
        "marketCondition": {"vix": 28.0},
        "metrics": {"sharpeRatio": -0.5, "totalYield": 0.05},
        "holdings": [
            {"symbol": "FEPI", "weeklyPerformance": -4.0, "navErosion": -6.0},
            {"symbol": "SHY", "weeklyPerformance": -9.0, "navErosion": -9.0},
        ],
    }
    risks = risks_from_portfolio(state, exceeds_position_limits=True)
    assert risks == [
        "Elevated market volatility increases downside risk",
        "Negative risk-adjusted returns (Sharpe ratio)",
        "Position sizes exceed recommended limits, increasing concentration risk",
        "Weak option ETF performance may indicate continued pressure",
        "Significant NAV erosion detected in option ETFs",
        "Portfolio yield below target threshold",
    ]

def test_risks_ignore_non_option_etf_holdings():
    state = {
        "marketCondition": {"vix": 15.0},
        "metrics": {"sharpeRatio": 1.0, "totalYield": 0.12},
        "holdings": [{"symbol": "EDV", "weeklyPerformance": -10.0, "navErosion": -10.0}],
    }
    assert risks_from_portfolio(state) == [FALLBACK_RISK]

def test_missing_yield_is_not_a_yield_risk():
    risks = risks_from_portfolio({"marketCondition": {"vix": 10}, "metrics": {"sharpeRatio": 2}})
    assert risks == [FALLBACK_RISK]
    low = risks_from_portfolio({"marketCondition": {"vix": 10}, "metrics": {"sharpeRatio": 2, "totalYield": 0.0}})
    assert low == ["Portfolio yield below target threshold"]

def test_signal_to_recommendation_mapping():
    buy = signal_to_recommendation({"type": "INCREASE", "symbol": "EDV", "urgency": "HIGH", "reason": "Yields falling"})
    assert buy == {"action": "BUY", "symbol": "EDV", "timeframe": "short-term", "conviction": 8,
                   "rationale": "Yields falling", "targetPrice": None, "stopLoss": None}
    sell = signal_to_recommendation({"type": "REDUCE", "symbol": "QQQY", "urgency": "MEDIUM", "reason": "x"})
    assert (sell["action"], sell["timeframe"], sell["conviction"]) == ("SELL", "medium-term", 6)
    hold = signal_to_recommendation({"type": "ROTATE", "symbol": "SHY", "fromSymbol": "FEPI", "urgency": "LOW"})
    assert (hold["action"], hold["timeframe"], hold["conviction"]) == ("HOLD", "medium-term", 4)

def test_signal_action_texts():
    assert signal_action_text({"type": "INCREASE", "symbol": "EDV", "reason": "Yields Falling"}) == \
        "Increase EDV allocation because yields falling"
    assert signal_action_text({"type": "ROTATE", "symbol": "SHY", "fromSymbol": "FEPI", "reason": "Risk"}) == \
        "Rotate from FEPI to SHY because risk"
    assert signal_action_text({"type": "HOLD", "symbol": "SHY"}) is None

def test_signal_actions_skips_malformed_entries():
    raw = [None, "oops", {"type": "HOLD"}, {"type": "REDUCE", "symbol": "QQQY", "reason": "NAV Erosion"}]
    assert signal_actions(raw) == ["Reduce QQQY allocation because nav erosion"]
    assert signal_actions({"not": "a list"}) == []

def test_position_status_from_signals():
    signals = [{"type": "ROTATE", "symbol": "SHY", "fromSymbol": "FEPI"},
               {"type": "INCREASE", "symbol": "QQQY"}]
    assert position_status("FEPI", 10.0, signals) == "REDUCE"
    assert position_status("SHY", 10.0, signals) == "INCREASE"
    assert position_status("QQQY", 35.0, signals) == "INCREASE"

def test_position_status_falls_back_to_vix_tiers():
    assert position_status("SDTY", 35.0, []) == "REDUCE"
    assert position_status("SDTY", 27.0, []) == "CAUTION"
    assert position_status("SDTY", 15.0, []) == "MAINTAIN"
    assert position_status("EDV", 27.0, []) == "INCREASE"
    assert position_status("SHY", 27.0, []) == "MAINTAIN"
    assert position_status("SHY", 31.0, []) == "INCREASE"
    # a HOLD signal does not decide the status
    assert position_status("FEPI", 35.0, [{"type": "HOLD", "symbol": "FEPI"}]) == "REDUCE"
