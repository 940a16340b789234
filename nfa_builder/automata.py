from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

# Never a single character, so no input symbol equals it.
EPSILON = "epsilon"


class AutomatonError(Exception):
    """Base error for automaton construction and simulation."""


class AutomatonValidationError(AutomatonError):
    """A fragment or primitive argument breaks the structural invariants."""


def _iter_bits(mask: int) -> Iterable[int]:
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


@dataclass(frozen=True)
class State:
    id: int
    is_accept: bool = False


@dataclass(frozen=True)
class Transition:
    source: int
    symbol: str
    target: int

    @property
    def is_epsilon(self) -> bool:
        return self.symbol == EPSILON


class IdAllocator:
    """Hands out state ids for one automaton under construction."""

    __slots__ = ("_next",)

    def __init__(self) -> None:
        self._next = 0

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value

    @property
    def allocated(self) -> int:
        return self._next


class NFA:
    """Immutable Thompson fragment with one start and one accept state.

    The constructor checks that state ids form ``[0, N)``, that every
    transition points at a declared state and that the declared ``accept`` is
    the only state flagged as accepting. Anything built through the
    primitives below satisfies these rules, so a malformed fragment cannot
    exist.
    """

    __slots__ = (
        "_states",
        "_transitions",
        "_start",
        "_accept",
        "_alphabet",
        "_symbol_masks",
        "_epsilon_masks",
        "_epsilon_closure_masks",
    )

    def __init__(
        self,
        states: Iterable[State],
        transitions: Iterable[Transition],
        start: int,
        accept: int,
    ) -> None:
        ordered = sorted(states, key=lambda state: state.id)
        if not ordered:
            raise AutomatonValidationError("A fragment needs at least one state.")
        for expected, state in enumerate(ordered):
            if state.id != expected:
                raise AutomatonValidationError(
                    f"State ids must form the range [0, {len(ordered)}); found {state.id} at position {expected}."
                )
        self._states: Tuple[State, ...] = tuple(ordered)
        self._transitions: Tuple[Transition, ...] = tuple(transitions)

        count = len(self._states)
        for transition in self._transitions:
            if not (0 <= transition.source < count and 0 <= transition.target < count):
                raise AutomatonValidationError(
                    f"Transition {transition.source} -{transition.symbol}-> {transition.target} "
                    "references an undeclared state."
                )
            if not isinstance(transition.symbol, str) or not transition.symbol:
                raise AutomatonValidationError("Transition symbols must be non-empty strings.")

        if not 0 <= start < count:
            raise AutomatonValidationError(f"Start state {start} is not declared.")
        if not 0 <= accept < count:
            raise AutomatonValidationError(f"Accept state {accept} is not declared.")
        flagged = [state.id for state in self._states if state.is_accept]
        if flagged != [accept]:
            raise AutomatonValidationError(
                f"Exactly state {accept} must be accepting; flagged: {flagged or 'none'}."
            )
        self._start = start
        self._accept = accept

        self._alphabet, self._symbol_masks, self._epsilon_masks = self._build_masks()
        self._epsilon_closure_masks = self._build_epsilon_closures()

    # ---------------------------------------------------------------
    def _build_masks(self) -> Tuple[Tuple[str, ...], Dict[str, Tuple[int, ...]], Tuple[int, ...]]:
        count = len(self._states)
        symbols: Dict[str, List[int]] = {}
        epsilon = [0] * count
        for transition in self._transitions:
            if transition.is_epsilon:
                epsilon[transition.source] |= 1 << transition.target
                continue
            row = symbols.setdefault(transition.symbol, [0] * count)
            row[transition.source] |= 1 << transition.target
        alphabet = tuple(sorted(symbols))
        masks = {symbol: tuple(row) for symbol, row in symbols.items()}
        return alphabet, masks, tuple(epsilon)

    def _build_epsilon_closures(self) -> Tuple[int, ...]:
        closures: List[int] = []
        for state_idx in range(len(self._states)):
            stack = [state_idx]
            visited = 1 << state_idx
            while stack:
                here = stack.pop()
                for nxt in _iter_bits(self._epsilon_masks[here] & ~visited):
                    visited |= 1 << nxt
                    stack.append(nxt)
            closures.append(visited)
        return tuple(closures)

    # ---------------------------------------------------------------
    @property
    def states(self) -> Tuple[State, ...]:
        return self._states

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        return self._transitions

    @property
    def start(self) -> int:
        return self._start

    @property
    def accept(self) -> int:
        return self._accept

    @property
    def alphabet(self) -> Tuple[str, ...]:
        return self._alphabet

    def __len__(self) -> int:
        return len(self._states)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NFA):
            return NotImplemented
        return (
            self._states == other._states
            and self._transitions == other._transitions
            and self._start == other._start
            and self._accept == other._accept
        )

    def __hash__(self) -> int:
        return hash((self._states, self._transitions, self._start, self._accept))

    def __repr__(self) -> str:
        return (
            f"NFA(states={len(self._states)}, transitions={len(self._transitions)}, "
            f"start={self._start}, accept={self._accept})"
        )

    def transitions_from(self, state_id: int) -> Tuple[Transition, ...]:
        return tuple(t for t in self._transitions if t.source == state_id)

    # ---------------------------------------------------------------
    def epsilon_closure(self, state_ids: Iterable[int]) -> FrozenSet[int]:
        mask = 0
        for state_id in state_ids:
            if 0 <= state_id < len(self._states):
                mask |= self._epsilon_closure_masks[state_id]
        return frozenset(_iter_bits(mask))

    def _normalize_input(self, input_symbols: Iterable[str]) -> List[str]:
        if isinstance(input_symbols, str):
            return list(input_symbols)
        tokens = list(input_symbols)
        if not all(isinstance(token, str) for token in tokens):
            raise AutomatonError("Input symbols must be strings.")
        return tokens

    def _step(self, subset_mask: int, symbol: str) -> int:
        row = self._symbol_masks.get(symbol)
        if row is None:
            return 0
        moved = 0
        for state_idx in _iter_bits(subset_mask):
            moved |= row[state_idx]
        closed = 0
        for state_idx in _iter_bits(moved):
            closed |= self._epsilon_closure_masks[state_idx]
        return closed

    def accepts(self, input_symbols: Iterable[str]) -> bool:
        current = self._epsilon_closure_masks[self._start]
        for symbol in self._normalize_input(input_symbols):
            current = self._step(current, symbol)
            if not current:
                return False
        return bool(current & (1 << self._accept))

    def accepting_path(self, input_symbols: Iterable[str]) -> Optional[List[Transition]]:
        """Return the transitions of one accepting run, or ``None``.

        Breadth-first search over ``(state, consumed)`` configurations, so the
        returned run uses the fewest edges. Epsilon edges appear in the path
        the way the renderer shows them.
        """
        tokens = self._normalize_input(input_symbols)
        origin = (self._start, 0)
        parents: Dict[Tuple[int, int], Optional[Tuple[Tuple[int, int], Transition]]] = {origin: None}
        queue: deque[Tuple[int, int]] = deque([origin])
        goal = (self._accept, len(tokens))
        while queue:
            config = queue.popleft()
            if config == goal:
                break
            state_id, consumed = config
            for transition in self.transitions_from(state_id):
                if transition.is_epsilon:
                    nxt = (transition.target, consumed)
                elif consumed < len(tokens) and tokens[consumed] == transition.symbol:
                    nxt = (transition.target, consumed + 1)
                else:
                    continue
                if nxt not in parents:
                    parents[nxt] = (config, transition)
                    queue.append(nxt)
        if goal not in parents:
            return None
        path: List[Transition] = []
        link = parents[goal]
        while link is not None:
            previous, transition = link
            path.append(transition)
            link = parents[previous]
        path.reverse()
        return path


# ---------------------------------------------------------------
# Thompson construction
# ---------------------------------------------------------------


def _import_states(
    allocator: IdAllocator,
    fragment: NFA,
    states: List[State],
) -> Dict[int, int]:
    """Give every state of ``fragment`` a fresh id, demoting accept flags."""
    id_map: Dict[int, int] = {}
    for state in fragment.states:
        id_map[state.id] = allocator.next_id()
        states.append(State(id_map[state.id], False))
    return id_map


def _copy_transitions(
    fragment: NFA,
    id_map: Dict[int, int],
    transitions: List[Transition],
) -> None:
    for transition in fragment.transitions:
        transitions.append(
            Transition(id_map[transition.source], transition.symbol, id_map[transition.target])
        )


def _accepting_ids(fragment: NFA) -> List[int]:
    return [state.id for state in fragment.states if state.is_accept]


def build_symbol(symbol: str) -> NFA:
    if not isinstance(symbol, str) or len(symbol) != 1:
        raise AutomatonValidationError("A symbol automaton needs exactly one character.")
    allocator = IdAllocator()
    start = allocator.next_id()
    accept = allocator.next_id()
    return NFA(
        [State(start, False), State(accept, True)],
        [Transition(start, symbol, accept)],
        start,
        accept,
    )


def concat(first: NFA, second: NFA) -> NFA:
    """Sequence ``first`` then ``second``.

    ``first`` keeps the low ids and ``second`` follows it, so the result has
    ``len(first) + len(second)`` states. The old accept of ``first`` is
    demoted and wired to the start of ``second`` with one epsilon edge.
    """
    allocator = IdAllocator()
    states: List[State] = []
    transitions: List[Transition] = []
    first_map = _import_states(allocator, first, states)
    second_map = _import_states(allocator, second, states)

    _copy_transitions(first, first_map, transitions)
    transitions.append(Transition(first_map[first.accept], EPSILON, second_map[second.start]))
    _copy_transitions(second, second_map, transitions)

    accept = second_map[second.accept]
    states[accept] = State(accept, True)
    return NFA(states, transitions, first_map[first.start], accept)


def union(first: NFA, second: NFA) -> NFA:
    """Alternate between ``first`` and ``second``.

    A fresh start (id 0) branches into both operands by epsilon edges, and
    each operand's accepting states reach the fresh accept (id 1) by one
    epsilon edge. The operands' old accept flags are cleared.
    """
    allocator = IdAllocator()
    start = allocator.next_id()
    accept = allocator.next_id()
    states: List[State] = [State(start, False), State(accept, True)]
    transitions: List[Transition] = []
    first_map = _import_states(allocator, first, states)
    second_map = _import_states(allocator, second, states)

    transitions.append(Transition(start, EPSILON, first_map[first.start]))
    transitions.append(Transition(start, EPSILON, second_map[second.start]))
    for fragment, id_map in ((first, first_map), (second, second_map)):
        for state_id in _accepting_ids(fragment):
            transitions.append(Transition(id_map[state_id], EPSILON, accept))
    _copy_transitions(first, first_map, transitions)
    _copy_transitions(second, second_map, transitions)
    return NFA(states, transitions, start, accept)


def closure(fragment: NFA) -> NFA:
    """Kleene star: zero or more repetitions of ``fragment``."""
    allocator = IdAllocator()
    start = allocator.next_id()
    accept = allocator.next_id()
    states: List[State] = [State(start, False), State(accept, True)]
    transitions: List[Transition] = []
    id_map = _import_states(allocator, fragment, states)
    inner_start = id_map[fragment.start]

    transitions.append(Transition(start, EPSILON, inner_start))
    transitions.append(Transition(start, EPSILON, accept))
    for state_id in _accepting_ids(fragment):
        transitions.append(Transition(id_map[state_id], EPSILON, inner_start))
        transitions.append(Transition(id_map[state_id], EPSILON, accept))
    _copy_transitions(fragment, id_map, transitions)
    return NFA(states, transitions, start, accept)


def build_literal(text: str) -> NFA:
    """Chain one symbol edge per character of ``text``, then epsilon into accept."""
    if not isinstance(text, str):
        raise AutomatonValidationError("A literal automaton needs a string.")
    allocator = IdAllocator()
    start = allocator.next_id()
    states: List[State] = [State(start, False)]
    transitions: List[Transition] = []
    last = start
    for char in text:
        current = allocator.next_id()
        states.append(State(current, False))
        transitions.append(Transition(last, char, current))
        last = current
    accept = allocator.next_id()
    states.append(State(accept, True))
    transitions.append(Transition(last, EPSILON, accept))
    return NFA(states, transitions, start, accept)


def union_all(fragments: Sequence[NFA]) -> NFA:
    """Fold ``union`` left to right over at least one fragment."""
    if not fragments:
        raise AutomatonValidationError("union_all needs at least one fragment.")
    result = fragments[0]
    for fragment in fragments[1:]:
        result = union(result, fragment)
    return result

