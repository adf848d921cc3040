"""
Condition evaluator for the ::if directive

A tiny expression language evaluated against page data
(frontmatter). Forms are tried in a fixed order and the first one that
applies wins:

    1. empty / whitespace          -> False
    2. !key                         -> not truthy(pageData[key])
    3. key == value                 -> str(pageData[key]) == value
    4. key != value                 -> str(pageData[key]) != value
    5. key > number                 -> number(pageData[key]) > number
    6. key < number                 -> number(pageData[key]) < number
    7. key                          -> truthy(pageData[key])

Because of that order a key that itself contains ``>`` or ``<`` cannot be
tested; such keys are split at the operator.

Values are compared in the form frontmatter authors write them: booleans
read as ``true``/``false``, whole floats drop their ``.0``, a missing key
reads as ``undefined`` and a null one as ``null``. Numeric comparisons
coerce with the same rules; anything non-numeric compares false.
"""

import math
from typing import Any, Mapping, Optional

# Distinguishes "key absent" from "key present with None"
_MISSING = object()


def _lookup(pageData: Optional[Mapping[str, Any]], key: str) -> Any:
    if not pageData:
        return _MISSING
    return pageData.get(key, _MISSING)


def value_stringify(value: Any) -> str:
    """Render a page-data value as text for == / != comparisons"""
    if value is _MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else value_stringify(item) for item in value)
    return str(value)


def value_toNumber(value: Any) -> float:
    """Coerce a page-data value (or literal) to a number, NaN when impossible"""
    if value is _MISSING:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def value_isTruthy(value: Any) -> bool:
    """Truthiness of a page-data value; a missing key is false"""
    if value is _MISSING or value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _quotes_strip(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def condition_evaluate(conditionText: str, pageData: Optional[Mapping[str, Any]]) -> bool:
    """
    Evaluate a condition against page data

    Args:
        conditionText: Expression such as "featured", "!draft",
                       'status == "published"' or "count > 3"
        pageData: Page context, usually frontmatter fields

    Returns:
        Result of the first matching form (see module docstring)

    Example:
        >>> condition_evaluate("count>3", {"count": 5})
        True
        >>> condition_evaluate("!featured", {"featured": True})
        False
    """
    condition = str(conditionText or "").strip()
    if not condition:
        return False

    if condition.startswith("!"):
        key = condition[1:].strip()
        return not value_isTruthy(_lookup(pageData, key))

    for operator in ("==", "!="):
        if operator in condition:
            left, right = condition.split(operator, 1)
            actual = value_stringify(_lookup(pageData, left.strip()))
            expected = _quotes_strip(right)
            if operator == "==":
                return actual == expected
            return actual != expected

    for operator in (">", "<"):
        if operator in condition:
            left, right = condition.split(operator, 1)
            actual = value_toNumber(_lookup(pageData, left.strip()))
            limit = value_toNumber(right.strip())
            if operator == ">":
                return actual > limit
            return actual < limit

    return value_isTruthy(_lookup(pageData, condition))
