# PURPOSE: VIX-driven target allocation across the income pie and the two treasury buckets.
# CONTEXT: Picks one of four presets, renormalises bucket totals to 1.0, then applies
#          per-symbol and combined option-ETF position limits as a second pass.

from __future__ import annotations
import copy
from typing import Dict, Optional

import numpy as np

from rotation_advisor.constants.thresholds import (
    DEFAULT_POSITION_LIMITS,
    DEFAULT_SHORT_TERM_TOTAL,
    DEFAULT_TREASURY_TOTAL,
    DEFENSIVE_PIE_WEIGHTS,
    ELEVATED_PIE_BUFFER,
    NORMALIZATION_TOLERANCE,
    OPTION_ETF_SYMBOLS,
    SHORT_TERM_SYMBOLS,
    STANDARD_PIE_WEIGHTS,
    TREASURY_SYMBOLS,
    VIX_THRESHOLDS,
)
from rotation_advisor.model_interface.types import ActualAllocations, AllocationPlan, PositionLimits

BUCKETS = ("incomePie", "shortTermTreasury", "treasuryETF")


def resolve_position_limits(position_limits: Optional[PositionLimits]) -> Dict[str, float]:
    """
    Fill in missing or zero position limits with the configured defaults.

    returns:
    - dict – {maxSingleOptionETF, maxCombinedOptionETFs, idealIncomePieAllocation}
    """
    limits = position_limits or {}
    return {k: float(limits.get(k) or default) for k, default in DEFAULT_POSITION_LIMITS.items()}


def current_bucket_totals(actual_allocations: Optional[ActualAllocations]) -> Dict[str, float]:
    """Sum current holding fractions into the three buckets; unknown symbols are ignored."""
    totals = {b: 0.0 for b in BUCKETS}
    for holding in (actual_allocations or {}).get("holdings") or []:
        symbol = holding.get("symbol")
        allocation = float(holding.get("allocation") or 0.0)
        if symbol in OPTION_ETF_SYMBOLS:
            totals["incomePie"] += allocation
        elif symbol in SHORT_TERM_SYMBOLS:
            totals["shortTermTreasury"] += allocation
        elif symbol in TREASURY_SYMBOLS:
            totals["treasuryETF"] += allocation
    return totals


def normalize_allocations(plan: AllocationPlan) -> AllocationPlan:
    """
    Scale bucket totals proportionally so they sum to 1.0.

    parameters:
    - plan: AllocationPlan – modified in place.

    returns:
    - AllocationPlan – the same plan, for chaining.

    notes:
    - Only rescales when the sum is off by more than NORMALIZATION_TOLERANCE.
    - An all-zero plan is left as is.
    """
    totals = np.array([plan[b]["total"] for b in BUCKETS], dtype=float)
    total = float(totals.sum())
    if total > 0 and abs(total - 1.0) > NORMALIZATION_TOLERANCE:
        totals = totals / total
        for bucket, value in zip(BUCKETS, totals):
            plan[bucket]["total"] = float(value)
    return plan


def _build_plan(pie_total: float, pie_weights: Dict[str, float],
                short_total: float, treasury_total: float) -> AllocationPlan:
    return {
        "incomePie": {"total": pie_total, **pie_weights},
        "shortTermTreasury": {"total": short_total, "SHY": 1.0},
        "treasuryETF": {"total": treasury_total, "EDV": 1.0},
    }


def _split_remainder(pie_total: float, pie_weights: Dict[str, float]) -> AllocationPlan:
    """Income pie at pie_total, the rest shared equally between SHY and EDV."""
    rest = (1.0 - pie_total) * 0.5
    return normalize_allocations(_build_plan(pie_total, pie_weights, rest, rest))


def calculate_allocations(vix_level: float,
                          actual_allocations: Optional[ActualAllocations] = None,
                          position_limits: Optional[PositionLimits] = None) -> AllocationPlan:
    """
    Select and normalise a target allocation preset.

    presets (first match wins):
    1) VIX > 30 – income pie at the combined option-ETF limit, defensive sub-weights.
    2) VIX > 25 – income pie at the combined limit plus a 5% buffer, defensive sub-weights.
    3) Combined limit already exceeded – income pie cut back to the combined limit.
    4) Otherwise – current bucket totals, falling back to defaults for empty buckets.

    returns:
    - AllocationPlan – bucket totals summing to 1.0 (± tolerance).
    """
    limits = resolve_position_limits(position_limits)
    max_combined = limits["maxCombinedOptionETFs"]

    if vix_level > VIX_THRESHOLDS["SECOND_REDUCTION"]:
        return _split_remainder(max_combined, DEFENSIVE_PIE_WEIGHTS)
    if vix_level > VIX_THRESHOLDS["FIRST_REDUCTION"]:
        return _split_remainder(max_combined + ELEVATED_PIE_BUFFER, DEFENSIVE_PIE_WEIGHTS)

    if ((actual_allocations or {}).get("limitExceeded") or {}).get("combinedOptionETFs"):
        return _split_remainder(max_combined, STANDARD_PIE_WEIGHTS)

    current = current_bucket_totals(actual_allocations)
    base = _build_plan(
        current["incomePie"] or min(limits["idealIncomePieAllocation"], max_combined),
        STANDARD_PIE_WEIGHTS,
        current["shortTermTreasury"] or DEFAULT_SHORT_TERM_TOTAL,
        current["treasuryETF"] or DEFAULT_TREASURY_TOTAL,
    )
    return normalize_allocations(base)


def symbol_weights(plan: AllocationPlan) -> Dict[str, float]:
    """Portfolio-level fraction for each symbol in the plan."""
    pie = plan["incomePie"]
    weights = {s: pie["total"] * pie[s] for s in OPTION_ETF_SYMBOLS}
    weights["SHY"] = plan["shortTermTreasury"]["total"] * plan["shortTermTreasury"]["SHY"]
    weights["EDV"] = plan["treasuryETF"]["total"] * plan["treasuryETF"]["EDV"]
    return weights


def adjust_for_position_limits(plan: AllocationPlan,
                               position_limits: Optional[PositionLimits] = None) -> AllocationPlan:
    """
    Enforce the per-symbol and combined option-ETF caps.

    behaviour:
    - Returns the plan unchanged when every option ETF is within maxSingleOptionETF and
      the income pie is within maxCombinedOptionETFs.
    - Otherwise the pie is cut to min(total, maxCombined, 3 × maxSingle) and spread evenly
      over the three option ETFs; the freed share goes to the treasury buckets pro rata.
    - The input plan is not modified.
    """
    limits = resolve_position_limits(position_limits)
    max_single = limits["maxSingleOptionETF"]
    max_combined = limits["maxCombinedOptionETFs"]

    plan = normalize_allocations(copy.deepcopy(plan))
    pie_total = plan["incomePie"]["total"]
    per_symbol = [pie_total * plan["incomePie"][s] for s in OPTION_ETF_SYMBOLS]
    if all(w <= max_single for w in per_symbol) and pie_total <= max_combined:
        return plan

    capped = min(pie_total, max_combined, max_single * len(OPTION_ETF_SYMBOLS))
    freed = pie_total - capped
    short = plan["shortTermTreasury"]["total"]
    treasury = plan["treasuryETF"]["total"]
    if short + treasury > 0:
        short, treasury = short + freed * short / (short + treasury), treasury + freed * treasury / (short + treasury)
    else:
        short, treasury = freed / 2, freed / 2

    even = 1.0 / len(OPTION_ETF_SYMBOLS)
    adjusted = _build_plan(capped, {s: even for s in OPTION_ETF_SYMBOLS}, short, treasury)
    adjusted["note"] = (
        f"Adjusted to respect position limits: {max_single:.0%} max per option ETF, "
        f"{max_combined:.0%} max combined"
    )
    return normalize_allocations(adjusted)
