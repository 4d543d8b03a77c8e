"""Printf-style formats that preserve the precision of a literal.

When a configuration value is rewritten, it should keep at least as
many decimals as the operator typed.  :func:`infer_precision` counts
the digits after the decimal point of the original literal (never fewer
than ``MIN_FLOAT_PRECISION``) and the ``format_*`` helpers build the
matching ``"<var> = %.<p>f\\n"`` line format.

Usage::

    fmt = format_float("FERROR", "1.2700")   # "FERROR = %.4f\\n"
    line = fmt % 1.5                          # "FERROR = 1.5000\\n"
"""

from __future__ import annotations

MIN_FLOAT_PRECISION = 3


def infer_precision(literal: str) -> int:
    """Digits after the first ``.`` in *literal*, floored at the minimum.

    Counting stops at the first non-digit.  A literal without a decimal
    point (including the empty string) yields ``MIN_FLOAT_PRECISION``.

    Examples
    --------
    >>> infer_precision("1.2345")
    4
    >>> infer_precision("0.12")
    3
    """
    point = literal.find(".")
    if point < 0:
        return MIN_FLOAT_PRECISION

    digits = 0
    for ch in literal[point + 1:]:
        if ch not in "0123456789":
            break
        digits += 1
    return max(digits, MIN_FLOAT_PRECISION)


def format_float(var: str, literal: str) -> str:
    """Format for one value: ``"<var> = %.<p>f\\n"``."""
    prec = infer_precision(literal)
    return f"{var} = %.{prec}f\n"


def format_float_pair(var: str, literal: str) -> str:
    """Format for two values sharing one precision.

    Only the first number of *literal* is measured; the second field
    reuses its precision.
    """
    # TODO: measure each number of the pair separately
    prec = infer_precision(literal)
    return f"{var} = %.{prec}f %.{prec}f\n"


def format_value(var: str, literal: str, value: float) -> str:
    """Render *value* with the precision of *literal*."""
    return format_float(var, literal) % value


def format_value_pair(
    var: str, literal: str, first: float, second: float,
) -> str:
    """Render a pair of values with the precision of *literal*."""
    return format_float_pair(var, literal) % (first, second)
