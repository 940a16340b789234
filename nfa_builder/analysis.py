from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from .automata import NFA


@dataclass(frozen=True)
class TestCase:
    tokens: Tuple[str, ...]
    expected: bool
    label: str = ""

    # Keeps pytest from collecting this dataclass as a test class.
    __test__ = False

    @staticmethod
    def from_raw(raw_tokens: Iterable[str] | str, expected: bool, label: str = "") -> "TestCase":
        return TestCase(tokens=tuple(raw_tokens), expected=expected, label=label)


@dataclass(frozen=True)
class TestResult:
    case: TestCase
    actual: bool

    __test__ = False

    @property
    def passed(self) -> bool:
        return self.actual == self.case.expected


def run_test_cases(automaton: NFA, test_cases: Sequence[TestCase]) -> List[TestResult]:
    results: List[TestResult] = []
    for case in test_cases:
        actual = automaton.accepts(case.tokens)
        results.append(TestResult(case=case, actual=actual))
    return results


def summarize_results(results: Sequence[TestResult]) -> dict[str, int]:
    summary = {"total": len(results), "passed": 0, "failed": 0}
    for result in results:
        if result.passed:
            summary["passed"] += 1
        else:
            summary["failed"] += 1
    return summary


def analyze_graph(automaton: NFA) -> Dict[str, object]:
    state_ids = [state.id for state in automaton.states]
    state_set = set(state_ids)

    forward: Dict[int, Set[int]] = {state_id: set() for state_id in state_ids}
    reverse: Dict[int, Set[int]] = {state_id: set() for state_id in state_ids}
    epsilon_count = 0
    for transition in automaton.transitions:
        forward[transition.source].add(transition.target)
        reverse[transition.target].add(transition.source)
        if transition.is_epsilon:
            epsilon_count += 1

    reachable = _walk(automaton.start, forward)
    alive = _walk(automaton.accept, reverse)

    report: Dict[str, object] = {
        "state_count": len(state_ids),
        "reachable_count": len(reachable),
        "unreachable": sorted(state_set - reachable),
        "dead_states": sorted(state_set - alive),
        "transition_count": len(automaton.transitions),
        "epsilon_count": epsilon_count,
        "alphabet": list(automaton.alphabet),
        "accept_flag_count": sum(1 for state in automaton.states if state.is_accept),
    }
    return report


def _walk(origin: int, edges: Dict[int, Set[int]]) -> Set[int]:
    seen: Set[int] = set()
    queue: deque[int] = deque([origin])
    while queue:
        state_id = queue.popleft()
        if state_id in seen:
            continue
        seen.add(state_id)
        for nxt in edges.get(state_id, set()):
            if nxt not in seen:
                queue.append(nxt)
    return seen
