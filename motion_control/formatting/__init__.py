"""Precision-preserving printf formats for configuration values."""

from motion_control.formatting.precision import (
    MIN_FLOAT_PRECISION,
    format_float,
    format_float_pair,
    format_value,
    format_value_pair,
    infer_precision,
)

__all__ = [
    "MIN_FLOAT_PRECISION",
    "format_float",
    "format_float_pair",
    "format_value",
    "format_value_pair",
    "infer_precision",
]
