# PURPOSE: Shared thresholds, symbol groups and allocation presets for the rotation strategy.
# CONTEXT: Position-limit defaults can be overridden per deployment through environment variables.

import os

VIX_THRESHOLDS = {
    "MONITOR": 20,
    "FIRST_REDUCTION": 25,
    "SECOND_REDUCTION": 30,
}

OPTION_ETF_SYMBOLS = ("FEPI", "SDTY", "QQQY")
SHORT_TERM_SYMBOLS = ("SHY",)
TREASURY_SYMBOLS = ("EDV",)
TRACKED_SYMBOLS = OPTION_ETF_SYMBOLS + SHORT_TERM_SYMBOLS + TREASURY_SYMBOLS

DEFAULT_POSITION_LIMITS = {
    "maxSingleOptionETF": float(os.getenv("MAX_SINGLE_OPTION_ETF", "0.05")),
    "maxCombinedOptionETFs": float(os.getenv("MAX_COMBINED_OPTION_ETFS", "0.25")),
    "idealIncomePieAllocation": float(os.getenv("IDEAL_INCOME_PIE_ALLOCATION", "0.60")),
}

# Option-ETF sub-weights inside the income pie, per preset.
STANDARD_PIE_WEIGHTS = {"FEPI": 0.35, "SDTY": 0.35, "QQQY": 0.30}
DEFENSIVE_PIE_WEIGHTS = {"FEPI": 0.40, "SDTY": 0.35, "QQQY": 0.25}

DEFAULT_SHORT_TERM_TOTAL = 0.20
DEFAULT_TREASURY_TOTAL = 0.20
ELEVATED_PIE_BUFFER = 0.05

NORMALIZATION_TOLERANCE = 0.001

# Upstream agent weights for the combined report confidence.
REPORT_WEIGHTS = {
    "fundamental": 0.3,
    "technical": 0.3,
    "sentiment": 0.2,
    "macro": 0.2,
}

# Used by the report composer when the macro output carries no plan.
FALLBACK_ALLOCATIONS = {
    "incomePie": {"total": 0.25, "FEPI": 0.33, "SDTY": 0.33, "QQQY": 0.34},
    "shortTermTreasury": {"total": 0.375, "SHY": 1.0},
    "treasuryETF": {"total": 0.375, "EDV": 1.0},
}
