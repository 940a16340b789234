from typing import Callable, Iterable, Set

import pytest

from nfa_builder.automata import EPSILON


def _closure(nfa, states: Iterable[int]) -> Set[int]:
    seen = set(states)
    stack = list(seen)
    while stack:
        here = stack.pop()
        for transition in nfa.transitions:
            if transition.source == here and transition.symbol == EPSILON and transition.target not in seen:
                seen.add(transition.target)
                stack.append(transition.target)
    return seen


def simulate(nfa, text: str) -> bool:
    """Plain set-based simulation, independent of the bitset engine."""
    current = _closure(nfa, [nfa.start])
    for char in text:
        moved = {
            t.target for t in nfa.transitions if t.source in current and t.symbol == char
        }
        current = _closure(nfa, moved)
    return nfa.accept in current


@pytest.fixture
def oracle() -> Callable[[object, str], bool]:
    return simulate
