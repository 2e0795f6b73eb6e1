# PURPOSE: Round bucket fractions to whole percentages for display.
# CONTEXT: The treasury ETF share is taken as the residual so the three figures always add up to 100.

from decimal import Decimal, ROUND_HALF_UP, getcontext

getcontext().prec = 10

def _half_up(x: float, places: int = 0) -> Decimal:
    return Decimal(repr(x)).quantize(Decimal(1).scaleb(-places), ROUND_HALF_UP)

def round_percentages(plan):
    """
    Convert an allocation plan's bucket totals into whole percentages.

    parameters:
    - plan: dict – allocation plan with incomePie / shortTermTreasury / treasuryETF totals.

    returns:
    - dict – {"incomePie": int, "shortTermTreasury": int, "treasuryETF": int} summing to 100.

    notes:
    - ROUND_HALF_UP matches the usual "0.5 rounds up" behaviour (e.g. 37.5 → 38).
    """
    pie = int(_half_up(plan["incomePie"]["total"] * 100))
    short = int(_half_up(plan["shortTermTreasury"]["total"] * 100))
    return {"incomePie": pie, "shortTermTreasury": short, "treasuryETF": 100 - pie - short}

def percent(fraction: float, places: int = 1) -> str:
    """Format a fraction as a percentage string with a fixed number of decimals, e.g. 0.0875 → '8.8'."""
    return f"{_half_up(fraction * 100, places):.{places}f}"
