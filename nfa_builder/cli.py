from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .analysis import TestCase, TestResult, analyze_graph, run_test_cases, summarize_results
from .automata import NFA, AutomatonError, Transition
from .graphviz import format_path, symbol_label, write_dot
from .scanner import Token, scan
from .tokens import (
    DEFAULT_LITERAL,
    KEYWORDS,
    TOKEN_BUILDERS,
    TokenClass,
    build_keyword,
    build_string_literal,
    build_token_nfa,
)

EMPTY_INPUT_LABEL = "<empty>"


@dataclass
class Session:
    token_class: TokenClass
    literal: str = DEFAULT_LITERAL
    keywords: Tuple[str, ...] = KEYWORDS
    test_cases: List[TestCase] = field(default_factory=list)
    _cached_nfa: Optional[NFA] = field(default=None, init=False, repr=False)

    def nfa(self) -> NFA:
        if self._cached_nfa is None:
            self._cached_nfa = build_session_nfa(self.token_class, self.literal, self.keywords)
        return self._cached_nfa


def build_session_nfa(token_class: TokenClass, literal: str, keywords: Sequence[str]) -> NFA:
    if token_class is TokenClass.STRING:
        return build_string_literal(literal)
    if token_class is TokenClass.KEYWORD:
        return build_keyword(keywords)
    return build_token_nfa(token_class)


def build_session_from_payload(payload: Mapping[str, Any]) -> Session:
    if not isinstance(payload, Mapping):
        raise ValueError("Config payload must be a mapping.")
    data = dict(payload)

    raw_class = data.get("token_class", TokenClass.DEFAULT.value)
    if not isinstance(raw_class, str):
        raise ValueError("Config field 'token_class' must be a string.")
    token_class = TokenClass.from_name(raw_class)

    literal = data.get("literal", DEFAULT_LITERAL)
    if not isinstance(literal, str):
        raise ValueError("Config field 'literal' must be a string.")

    keywords = data.get("keywords", list(KEYWORDS))
    if (
        not isinstance(keywords, list)
        or not keywords
        or not all(isinstance(word, str) for word in keywords)
    ):
        raise ValueError("Config field 'keywords' must be a non-empty list of strings.")

    return Session(
        token_class=token_class,
        literal=literal,
        keywords=tuple(keywords),
        test_cases=_load_test_cases_from_payload(data.get("test_cases")),
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build Thompson NFAs for lexical token classes and export them as DOT graphs."
    )
    parser.add_argument("--config", help="Path to a JSON file that selects the token class and test cases.")
    parser.add_argument(
        "--token-class",
        help="Token class to build (Identifier, Number, String, Keyword; anything else uses the default).",
    )
    parser.add_argument("--literal", help="Literal recognised by the String token class.")
    parser.add_argument(
        "--tests",
        help="Optional JSON file containing additional test cases to execute.",
    )
    parser.add_argument(
        "--input",
        action="append",
        default=[],
        metavar="TEXT",
        help="Input expected to be accepted (repeatable).",
    )
    parser.add_argument(
        "--reject",
        action="append",
        default=[],
        metavar="TEXT",
        help="Input expected to be rejected (repeatable).",
    )
    parser.add_argument("--source", help="Source file to scan into a token table.")
    parser.add_argument(
        "--output-dir",
        default="artifacts",
        help="Directory where DOT graph files will be written.",
    )
    parser.add_argument(
        "--base-name",
        help="Base filename used for the generated DOT file (defaults to the token class).",
    )
    parser.add_argument("--no-graph", action="store_true", help="Do not write a DOT file.")
    parser.add_argument("--report", action="store_true", help="Print the structural graph report.")
    parser.add_argument("--list", action="store_true", help="List the available token classes and exit.")
    return parser.parse_args(argv)


def run(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.list:
        _display_token_classes()
        return 0
    try:
        session = _build_session(args)
        nfa = session.nfa()
        tokens = _scan_source(Path(args.source)) if args.source else []
    except KeyboardInterrupt:
        print("\nAborted by user.", file=sys.stderr)
        return 130
    except (
        AutomatonError,
        ValueError,
        FileNotFoundError,
        json.JSONDecodeError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _display_summary(session, nfa)
    if args.report:
        _display_report(nfa)
    results = _run_tests(session)
    highlight_path = determine_highlight_path(nfa, results)
    if highlight_path:
        print(f"\nAccepting path: {format_path(highlight_path)}")
    if tokens:
        _display_token_table(tokens)
    if not args.no_graph:
        base_name = args.base_name or session.token_class.value.lower()
        path = write_graph_for_session(session, args.output_dir, base_name, highlight_path)
        print("\nDOT file written:")
        print(f"  {path}")
    return 0


def _build_session(args: argparse.Namespace) -> Session:
    if args.config:
        session = _build_from_config(Path(args.config))
    else:
        session = Session(token_class=TokenClass.from_name(args.token_class or ""))
    if args.token_class:
        session.token_class = TokenClass.from_name(args.token_class)
    if args.literal is not None:
        session.literal = args.literal

    if args.tests:
        session.test_cases.extend(_load_test_cases_from_file(Path(args.tests)))
    for text in args.input:
        session.test_cases.append(TestCase.from_raw(text, True, label=f"accept {text!r}"))
    for text in args.reject:
        session.test_cases.append(TestCase.from_raw(text, False, label=f"reject {text!r}"))
    return session


def _build_from_config(path: Path) -> Session:
    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError("Config file must define a JSON object.")
    return build_session_from_payload(payload)


def _scan_source(path: Path) -> List[Token]:
    with open(path, "r", encoding="utf-8") as handle:
        return scan(handle.read())


def _display_token_classes() -> None:
    print("Token classes:")
    for token_class in TOKEN_BUILDERS:
        nfa = build_token_nfa(token_class)
        print(f"  {token_class.value}: {len(nfa.states)} states, {len(nfa.transitions)} transitions")


def _display_summary(session: Session, nfa: NFA) -> None:
    print("\nAutomaton Summary")
    print(f"  Token class: {session.token_class.value}")
    if session.token_class is TokenClass.STRING:
        print(f"  Literal: {session.literal!r}")
    print(f"  States: {', '.join(str(state.id) for state in nfa.states)}")
    alphabet_text = ", ".join(nfa.alphabet) if nfa.alphabet else EMPTY_INPUT_LABEL
    print(f"  Alphabet: {alphabet_text}")
    print(f"  Start state: {nfa.start}")
    print(f"  Accept state: {nfa.accept}")
    print("  Transitions:")
    for state in nfa.states:
        outgoing = nfa.transitions_from(state.id)
        if outgoing:
            parts = [f"{symbol_label(t.symbol)}->{t.target}" for t in outgoing]
            transition_text = ", ".join(parts)
        else:
            transition_text = "<none>"
        print(f"    {state.id}: {transition_text}")


def _display_report(nfa: NFA) -> None:
    report = analyze_graph(nfa)
    print("\nGraph report")
    for key, value in report.items():
        print(f"  {key}: {value}")


def _run_tests(session: Session) -> List[TestResult]:
    if not session.test_cases:
        print("\nNo test cases were provided.")
        return []
    print("\nRunning test cases...")
    results = run_test_cases(session.nfa(), session.test_cases)
    summary = summarize_results(results)
    print(f"  Passed {summary['passed']} of {summary['total']} test cases.")
    for result in results:
        tokens_text = "".join(result.case.tokens) if result.case.tokens else EMPTY_INPUT_LABEL
        expected_text = "accept" if result.case.expected else "reject"
        actual_text = "accept" if result.actual else "reject"
        status = "PASS" if result.passed else "FAIL"
        label_prefix = f"{result.case.label}: " if result.case.label else ""
        print(
            f"    [{status}] {label_prefix}{tokens_text} -> expected {expected_text}, got {actual_text}"
        )
    return results


def _display_token_table(tokens: Sequence[Token]) -> None:
    print("\nToken table")
    print(f"  {'token':<16} {'class':<12} {'line':>4} {'col':>4}  nfa")
    for token in tokens:
        verdict = "accept" if build_token_nfa(token.kind).accepts(token.text) else "reject"
        print(f"  {token.text:<16} {token.kind:<12} {token.line:>4} {token.column:>4}  {verdict}")


def determine_highlight_path(nfa: NFA, results: Sequence[TestResult]) -> List[Transition]:
    for result in results:
        if result.actual:
            return nfa.accepting_path(result.case.tokens) or []
    return []


def write_graph_for_session(
    session: Session,
    output_dir: Path | str,
    base_name: Optional[str],
    highlight_path: Sequence[Transition],
) -> Path:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    name = (base_name or "automaton").strip() or "automaton"
    nfa_path = out_dir / f"{name}_nfa.dot"
    write_dot(
        session.nfa(),
        str(nfa_path),
        graph_name=f"NFA for {session.token_class.value}",
        highlight_path=highlight_path,
    )
    return nfa_path.resolve()


def _load_test_cases_from_file(path: Path) -> List[TestCase]:
    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return _load_test_cases_from_payload(payload)


def _load_test_cases_from_payload(data: Any) -> List[TestCase]:
    if data is None:
        return []
    if isinstance(data, dict):
        entries = data.get("cases", [])
    else:
        entries = data
    if not isinstance(entries, list):
        raise ValueError("Test cases must be provided as a list.")
    cases: List[TestCase] = []
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise ValueError("Each test case must be an object with 'input' and 'expected'.")
        raw_tokens = entry.get("input", "")
        expected = bool(entry.get("expected", False))
        label = entry.get("label") or f"case {index}"
        tokens = _normalize_test_case_tokens(raw_tokens)
        cases.append(TestCase(tokens=tokens, expected=expected, label=label))
    return cases


def _normalize_test_case_tokens(raw_tokens: Any) -> Tuple[str, ...]:
    if isinstance(raw_tokens, str):
        return tuple(raw_tokens)
    if isinstance(raw_tokens, list):
        if not all(isinstance(token, str) for token in raw_tokens):
            raise ValueError("Test case symbols must be strings.")
        return tuple(raw_tokens)
    raise ValueError("Test case 'input' must be a string or a list of strings.")
