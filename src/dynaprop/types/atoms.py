"""Exact-width parameter type descriptors."""

from __future__ import annotations

from .base import ParamType, register_type

# ── Register all width types ──────────────────────────────────────

p_char = register_type(ParamType(name="char", python_type=str, length=1))

p_byte = register_type(ParamType(name="int8", python_type=int, bits=8))

p_short = register_type(ParamType(name="int16", python_type=int, bits=16))

p_int = register_type(ParamType(name="int32", python_type=int, bits=32))

p_long = register_type(ParamType(name="int64", python_type=int, bits=64))
