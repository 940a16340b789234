"""Tests for the command line front end."""

import json

import pytest

from nfa_builder.cli import (
    Session,
    build_session_from_payload,
    determine_highlight_path,
    run,
    write_graph_for_session,
)
from nfa_builder.analysis import run_test_cases
from nfa_builder.automata import EPSILON, Transition
from nfa_builder.tokens import TokenClass, build_string_literal


def test_build_session_from_payload():
    session = build_session_from_payload(
        {
            "token_class": "string",
            "literal": "abc",
            "test_cases": [
                {"input": "abc", "expected": True},
                {"input": ["a", "b"], "expected": False, "label": "prefix"},
            ],
        }
    )
    assert session.token_class is TokenClass.STRING
    assert session.nfa() == build_string_literal("abc")
    assert session.nfa() is session.nfa()
    assert [case.tokens for case in session.test_cases] == [("a", "b", "c"), ("a", "b")]
    assert session.test_cases[1].label == "prefix"
    assert session.test_cases[0].label == "case 1"


def test_unknown_token_class_falls_back_to_default():
    session = build_session_from_payload({"token_class": "Operator"})
    assert session.token_class is TokenClass.DEFAULT
    assert session.nfa().accepts("a")


def test_payload_keywords():
    session = build_session_from_payload({"token_class": "Keyword", "keywords": ["let", "in"]})
    assert session.nfa().accepts("let")
    assert not session.nfa().accepts("if")


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"token_class": 3},
        {"literal": ["x"]},
        {"keywords": []},
        {"keywords": "if"},
        {"test_cases": "abc"},
        {"test_cases": ["abc"]},
        {"test_cases": [{"input": 7}]},
    ],
)
def test_bad_payloads(payload):
    with pytest.raises(ValueError):
        build_session_from_payload(payload)


def test_determine_highlight_path_uses_first_accepted_case():
    session = build_session_from_payload(
        {"token_class": "Number", "test_cases": [{"input": "a"}, {"input": "0", "expected": True}]}
    )
    results = run_test_cases(session.nfa(), session.test_cases)
    assert determine_highlight_path(session.nfa(), results) == [
        Transition(0, EPSILON, 2),
        Transition(2, "0", 3),
        Transition(3, EPSILON, 1),
    ]
    assert determine_highlight_path(session.nfa(), []) == []


def test_write_graph_for_session(tmp_path):
    session = Session(token_class=TokenClass.IDENTIFIER)
    path = write_graph_for_session(session, tmp_path / "out", "ident", [])
    assert path.name == "ident_nfa.dot"
    assert 'digraph "NFA for Identifier"' in path.read_text(encoding="utf-8")


def test_run_with_flags(tmp_path, capsys):
    code = run(
        [
            "--token-class", "Number",
            "--input", "0",
            "--input", ".0",
            "--reject", "a",
            "--output-dir", str(tmp_path),
        ]
    )
    assert code == 0
    out = capsys.readouterr().out
    assert "Token class: Number" in out
    assert "Passed 3 of 3 test cases." in out
    assert "Accepting path: 0 -ε-> 2 -0-> 3 -ε-> 1" in out
    assert (tmp_path / "number_nfa.dot").exists()


def test_run_with_config_and_tests_file(tmp_path, capsys):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"token_class": "String", "literal": "Print"}), encoding="utf-8")
    tests = tmp_path / "cases.json"
    tests.write_text(
        json.dumps({"cases": [{"input": "Print", "expected": True}, {"input": "Prin", "expected": False}]}),
        encoding="utf-8",
    )
    code = run(["--config", str(config), "--tests", str(tests), "--no-graph", "--report"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Literal: 'Print'" in out
    assert "Passed 2 of 2 test cases." in out
    assert "accept_flag_count: 1" in out
    assert "DOT file written" not in out


def test_run_reports_failures_in_output(capsys):
    assert run(["--token-class", "Identifier", "--input", "b", "--no-graph"]) == 0
    assert "[FAIL]" in capsys.readouterr().out


def test_run_scans_source(tmp_path, capsys):
    source = tmp_path / "prog.txt"
    source.write_text("if 0\n", encoding="utf-8")
    assert run(["--source", str(source), "--no-graph"]) == 0
    out = capsys.readouterr().out
    assert "Token table" in out
    assert "Keyword" in out
    assert "accept" in out


def test_run_list(capsys):
    assert run(["--list"]) == 0
    out = capsys.readouterr().out
    for token_class in TokenClass:
        assert token_class.value in out


def test_run_missing_config(tmp_path, capsys):
    assert run(["--config", str(tmp_path / "missing.json")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_run_bad_json(tmp_path, capsys):
    config = tmp_path / "broken.json"
    config.write_text("{not json", encoding="utf-8")
    assert run(["--config", str(config)]) == 1
    assert "Error:" in capsys.readouterr().err
