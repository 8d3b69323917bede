"""
Rule Reference Catalog.

Every decision the engine takes is traced back to a protocol rule.
Line numbers point into the sympto-thermal handbook the rules are taken from.
"""

from models import RuleReference


def _ref(rule_id: str, rule_name: str, start: int, end: int) -> RuleReference:
    return RuleReference(rule_id=rule_id, rule_name=rule_name, source_line_start=start, source_line_end=end)


TEMPERATURE_RULES = {
    "MAIN_RULE": _ref("TEMP_MAIN", "Main temperature rule", 2736, 2742),
    "EXCEPTION_1": _ref("TEMP_EX1", "Exception 1 - 4th higher reading required", 2782, 2785),
    "EXCEPTION_2": _ref("TEMP_EX2", "Exception 2 - one reading may fall on/below the coverline", 2786, 2790),
    "NO_COMBINED_EXCEPTIONS": _ref("TEMP_NO_COMBINE", "The two exceptions may not be combined", 2791, 2793),
}

MUCUS_RULES = {
    "PEAK_DAY": _ref("MUCUS_PEAK", "Peak day = last day of best quality before decline", 1706, 1717),
    "POST_PEAK_COUNT": _ref("MUCUS_P123", "P+1+2+3 evaluation", 2800, 2801),
    "PEAK_RETURN_RESTART": _ref("MUCUS_RESTART", "Return to peak quality restarts the count", 2804, 2806),
    "PEAK_BEFORE_TEMP_COMPLETE": _ref("MUCUS_BEFORE_TEMP", "Peak quality returned before temperature shift complete", 2833, 2835),
}

CERVIX_RULES = {
    "CERVIX_SHIFT": _ref("CERVIX_SHIFT", "Cervix closed and hard on 3 days after the highest point", 3159, 3165),
}

CYCLE_START_RULES = {
    "FIVE_DAY": _ref("START_5DAY", "5-Day rule (beginners)", 3015, 3017),
    "FIVE_DAY_TRANSITION": _ref("START_5DAY_TRANS", "5-Day to Minus-8 once a first higher reading is on/before day 12", 3018, 3021),
    "MINUS_8": _ref("START_MINUS8", "Minus-8 rule", 2919, 2923),
    "MINUS_8_REQUIREMENT": _ref("START_MINUS8_REQ", "Minus-8 requires 12 cycles", 2916, 2918),
    "MINUS_20": _ref("START_MINUS20", "Minus-20 rule (menstrual calendar)", 3143, 3144),
    "MUCUS_OVERRIDES": _ref("START_MUCUS", "Mucus takes precedence (double-check)", 2921, 2923),
}

FERTILITY_STATUS_RULES = {
    "DOUBLE_CHECK": _ref("FERT_DOUBLE_CHECK", "Double-check: whichever comes last", 2843, 2846),
    "INFERTILE_EVENING": _ref("FERT_EVENING", "Infertility starts in the evening", 2843, 2846),
    "IGNORE_MUCUS_AFTER": _ref("FERT_IGNORE_MUCUS", "Mucus ignored after a complete double-check", 2875, 2876),
}
