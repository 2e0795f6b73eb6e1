# PURPOSE: Translate rotation signals into recommendations, action sentences and per-symbol statuses.
# CONTEXT: Shared by the summary agent (recommendations) and the report composer (action plan, status map).

from __future__ import annotations
from typing import Any, Dict, List, Optional

from rotation_advisor.constants.thresholds import OPTION_ETF_SYMBOLS, VIX_THRESHOLDS
from rotation_advisor.model_interface.types import Recommendation, RotationSignal

SIGNAL_ACTIONS = {"INCREASE": "BUY", "REDUCE": "SELL"}
URGENCY_CONVICTION = {"HIGH": 8, "MEDIUM": 6}
DEFAULT_CONVICTION = 4


def signal_to_recommendation(signal: RotationSignal) -> Recommendation:
    """
    Map one rotation signal onto a recommendation.

    rules:
    - INCREASE → BUY, REDUCE → SELL, anything else → HOLD.
    - HIGH urgency is short-term with conviction 8; MEDIUM is 6, LOW/unknown 4 (both medium-term).
    """
    urgency = signal.get("urgency")
    return {
        "action": SIGNAL_ACTIONS.get(signal.get("type"), "HOLD"),
        "symbol": signal.get("symbol", ""),
        "timeframe": "short-term" if urgency == "HIGH" else "medium-term",
        "conviction": URGENCY_CONVICTION.get(urgency, DEFAULT_CONVICTION),
        "rationale": signal.get("reason", ""),
        "targetPrice": None,
        "stopLoss": None,
    }


def as_signal_list(raw: Any) -> List[Dict[str, Any]]:
    """Keep only dict-shaped signals; anything that is not a list yields []."""
    if not isinstance(raw, list):
        return []
    return [s for s in raw if isinstance(s, dict)]


def _because(reason: Any) -> str:
    return reason.lower() if isinstance(reason, str) else str(reason)


def signal_action_text(signal: Dict[str, Any]) -> Optional[str]:
    """Render a signal as an instruction, or None for signal types without one."""
    kind = signal.get("type")
    reason = _because(signal.get("reason", ""))
    if kind == "INCREASE":
        return f"Increase {signal.get('symbol')} allocation because {reason}"
    if kind == "REDUCE":
        return f"Reduce {signal.get('symbol')} allocation because {reason}"
    if kind == "ROTATE":
        return f"Rotate from {signal.get('fromSymbol')} to {signal.get('symbol')} because {reason}"
    return None


def signal_actions(raw_signals: Any) -> List[str]:
    texts = (signal_action_text(s) for s in as_signal_list(raw_signals))
    return [t for t in texts if t]


def position_status(symbol: str, vix_level: float, raw_signals: Any) -> str:
    """
    Status label for a tracked symbol: INCREASE, REDUCE, CAUTION or MAINTAIN.

    flow:
    1) The first signal naming the symbol (as target or ROTATE source) decides, when it applies.
    2) Otherwise fall back to the VIX tier for the symbol's bucket.
    """
    match = next(
        (s for s in as_signal_list(raw_signals) if symbol in (s.get("symbol"), s.get("fromSymbol"))),
        None,
    )
    if match is not None:
        kind = match.get("type")
        if kind in ("INCREASE", "REDUCE") and match.get("symbol") == symbol:
            return kind
        if kind == "ROTATE":
            if match.get("symbol") == symbol:
                return "INCREASE"
            if match.get("fromSymbol") == symbol:
                return "REDUCE"

    if symbol in OPTION_ETF_SYMBOLS:
        if vix_level > VIX_THRESHOLDS["SECOND_REDUCTION"]:
            return "REDUCE"
        if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
            return "CAUTION"
        return "MAINTAIN"
    if symbol == "EDV" and vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
        return "INCREASE"
    if symbol == "SHY" and vix_level > VIX_THRESHOLDS["SECOND_REDUCTION"]:
        return "INCREASE"
    return "MAINTAIN"
