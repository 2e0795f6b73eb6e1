from rotation_advisor.utils.rounding import percent, round_percentages

def _plan(pie, short, treasury):
    return {
        "incomePie": {"total": pie, "FEPI": 0.35, "SDTY": 0.35, "QQQY": 0.30},
        "shortTermTreasury": {"total": short, "SHY": 1.0},
        "treasuryETF": {"total": treasury, "EDV": 1.0},
    }

def test_round_percentages_half_up_with_treasury_residual():
    out = round_percentages(_plan(0.25, 0.375, 0.375))
    assert out == {"incomePie": 25, "shortTermTreasury": 38, "treasuryETF": 37}

def test_round_percentages_always_sum_to_100():
    for pie, short in [(0.333, 0.333), (0.1549, 0.4251), (0.6, 0.2), (0.0, 0.5)]:
        out = round_percentages(_plan(pie, short, 1 - pie - short))
        assert sum(out.values()) == 100

def test_percent_formatting():
    assert percent(0.5) == "50.0"
    assert percent(0.25, 0) == "25"
    assert percent(0.125, 2) == "12.50"
