from rotation_advisor.constants.thresholds import OPTION_ETF_SYMBOLS, VIX_THRESHOLDS

FALLBACK_RISK = "Weak trend strength may lead to false signals"

def risks_from_portfolio(portfolio_state: dict, exceeds_position_limits: bool = False):
    risks = []
    market = portfolio_state.get("marketCondition") or {}
    metrics = portfolio_state.get("metrics") or {}
    holdings = portfolio_state.get("holdings") or []

    if float(market.get("vix") or 0) > VIX_THRESHOLDS["FIRST_REDUCTION"]:
        risks.append("Elevated market volatility increases downside risk")
    if float(metrics.get("sharpeRatio") or 0) < 0:
        risks.append("Negative risk-adjusted returns (Sharpe ratio)")
    if exceeds_position_limits:
        risks.append("Position sizes exceed recommended limits, increasing concentration risk")

    option_etfs = [h for h in holdings if h.get("symbol") in OPTION_ETF_SYMBOLS]
    if any(float(h.get("weeklyPerformance") or 0) < -3 for h in option_etfs):
        risks.append("Weak option ETF performance may indicate continued pressure")
    if any(float(h.get("navErosion") or 0) < -5 for h in option_etfs):
        risks.append("Significant NAV erosion detected in option ETFs")

    # No reported yield, no yield risk.
    if metrics.get("totalYield") is not None and float(metrics["totalYield"]) < 0.1:
        risks.append("Portfolio yield below target threshold")

    if not risks:
        risks.append(FALLBACK_RISK)
    return risks
