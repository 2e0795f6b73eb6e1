import pytest


@pytest.fixture
def portfolio_state():
    """Calm-market snapshot; tests override fields as needed."""
    return {
        "marketCondition": {
            "vix": 18.5,
            "vixTrend": "FALLING",
            "riskLevel": "LOW",
            "tenYearYield": 4.3,
            "twoYearYield": 4.0,
        },
        "metrics": {"sharpeRatio": 0.8, "totalYield": 0.14},
        "holdings": [
            {"symbol": "FEPI", "allocation": 0.04, "weeklyPerformance": 0.5, "navErosion": -1.0},
            {"symbol": "SDTY", "allocation": 0.04, "weeklyPerformance": 0.2, "navErosion": -0.5},
            {"symbol": "QQQY", "allocation": 0.04, "weeklyPerformance": -0.3, "navErosion": -2.0},
            {"symbol": "SHY", "allocation": 0.40},
            {"symbol": "EDV", "allocation": 0.48},
        ],
        "rotationSignals": [],
    }


@pytest.fixture
def make_output():
    """Factory for upstream AgentOutput dicts."""
    def _make(summary="Summary text.", analysis="", confidence=0.5, recommendations=None,
              risks=None, metrics=None):
        return {
            "summary": summary,
            "analysis": analysis,
            "confidence": confidence,
            "recommendations": recommendations or [],
            "risks": risks or [],
            "metrics": metrics or {},
        }
    return _make


@pytest.fixture
def make_rec():
    def _make(action, conviction, timeframe="short-term", symbol="FEPI", **extra):
        rec = {
            "action": action,
            "symbol": symbol,
            "timeframe": timeframe,
            "conviction": conviction,
            "rationale": "",
            "targetPrice": None,
            "stopLoss": None,
        }
        rec.update(extra)
        return rec
    return _make
