from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .tokens import KEYWORDS

NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]+)?")
DELIMITER_RE = re.compile(r"[{}()\[\]:\"']")
OPERATOR_RE = re.compile(r"==|!=|<=|>=|\*\*|//|\+=|-=|\*=|/=|\+|-|\*|/|%|=|<|>")
IDENTIFIER_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

# Tried in order at every position; the first rule that matches wins.
RULES: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("Number", NUMBER_RE),
    ("Delimiter", DELIMITER_RE),
    ("Operator", OPERATOR_RE),
    ("Identifier", IDENTIFIER_RE),
)


@dataclass(frozen=True)
class Token:
    text: str
    kind: str
    line: int
    column: int


def scan_line(line: str, line_number: int, keywords: Sequence[str] = KEYWORDS) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(line):
        if line[pos].isspace():
            pos += 1
            continue
        for kind, pattern in RULES:
            match = pattern.match(line, pos)
            if match:
                text = match.group()
                if kind == "Identifier" and text in keywords:
                    kind = "Keyword"
                break
        else:
            text = line[pos]
            kind = "Unknown"
        tokens.append(Token(text=text, kind=kind, line=line_number, column=pos + 1))
        pos += len(text)
    return tokens


def scan(source: str, keywords: Sequence[str] = KEYWORDS) -> List[Token]:
    """Split ``source`` into labelled tokens with 1-based line and column."""
    tokens: List[Token] = []
    for index, line in enumerate(source.split("\n"), start=1):
        tokens.extend(scan_line(line, index, keywords))
    return tokens
