from .automata import (
    EPSILON,
    NFA,
    AutomatonError,
    AutomatonValidationError,
    IdAllocator,
    State,
    Transition,
    build_literal,
    build_symbol,
    closure,
    concat,
    union,
)
from .cli import build_session_from_payload, run
from .tokens import TOKEN_BUILDERS, TokenClass, build_token_nfa

__all__ = [
    "EPSILON",
    "NFA",
    "AutomatonError",
    "AutomatonValidationError",
    "IdAllocator",
    "State",
    "Transition",
    "build_literal",
    "build_symbol",
    "closure",
    "concat",
    "union",
    "TOKEN_BUILDERS",
    "TokenClass",
    "build_token_nfa",
    "run",
    "build_session_from_payload",
]
