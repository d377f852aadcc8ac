"""Core SQL utilities package."""

from .identifier import qualify_table, quote_identifier
from .parameters import ParameterBinder, build_bound_params, param_name

__all__ = [
    "quote_identifier",
    "qualify_table",
    "ParameterBinder",
    "build_bound_params",
    "param_name",
]
