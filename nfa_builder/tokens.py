from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Sequence, Union

from .automata import NFA, build_literal, build_symbol, closure, concat, union, union_all

KEYWORDS = ("if", "elif", "else", "for", "while", "def", "return")
DEFAULT_LITERAL = "Print"


class TokenClass(str, Enum):
    IDENTIFIER = "Identifier"
    NUMBER = "Number"
    STRING = "String"
    KEYWORD = "Keyword"
    DEFAULT = "Default"

    @classmethod
    def from_name(cls, name: str) -> "TokenClass":
        """Resolve a display name or member name; anything unknown is DEFAULT."""
        key = (name or "").strip().lower()
        for member in cls:
            if key in {member.value.lower(), member.name.lower()}:
                return member
        return cls.DEFAULT


def build_identifier() -> NFA:
    # Only repetitions of 'a'; the general identifier character class is not modelled.
    return closure(build_symbol("a"))


def build_number() -> NFA:
    return union(build_symbol("0"), concat(build_symbol("."), build_symbol("0")))


def build_string_literal(literal: str = DEFAULT_LITERAL) -> NFA:
    return build_literal(literal)


def build_keyword(keywords: Sequence[str] = KEYWORDS) -> NFA:
    return union_all([build_literal(word) for word in keywords])


def build_default() -> NFA:
    return build_symbol("a")


TOKEN_BUILDERS: Dict[TokenClass, Callable[[], NFA]] = {
    TokenClass.IDENTIFIER: build_identifier,
    TokenClass.NUMBER: build_number,
    TokenClass.STRING: build_string_literal,
    TokenClass.KEYWORD: build_keyword,
    TokenClass.DEFAULT: build_default,
}


def build_token_nfa(kind: Union[TokenClass, str]) -> NFA:
    if not isinstance(kind, TokenClass):
        kind = TokenClass.from_name(kind)
    return TOKEN_BUILDERS[kind]()
