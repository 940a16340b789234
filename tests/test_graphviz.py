"""Tests for DOT rendering."""

from types import SimpleNamespace

from nfa_builder.automata import EPSILON, State, Transition, build_symbol, closure
from nfa_builder.graphviz import automaton_to_dot, format_path, symbol_label, write_dot
from nfa_builder.tokens import build_number


def test_symbol_dot():
    dot = automaton_to_dot(build_symbol("a"), graph_name="single")
    assert dot.startswith('digraph "single" {')
    assert "__start__ -> 0;" in dot
    assert "0 [shape=circle" in dot
    assert "1 [shape=doublecircle" in dot
    assert '0 -> 1 [label="a"];' in dot
    assert dot.endswith("}")


def test_epsilon_rendered_as_glyph():
    dot = automaton_to_dot(closure(build_symbol("a")))
    assert '0 -> 1 [label="ε"];' in dot
    assert EPSILON not in dot
    assert symbol_label(EPSILON) == "ε"
    assert symbol_label("x") == "x"


def test_accept_shape_follows_declared_accept_only():
    view = SimpleNamespace(
        states=[State(0, True), State(1, False), State(2, True)],
        transitions=[Transition(0, "a", 1)],
        start=0,
        accept=1,
    )
    dot = automaton_to_dot(view)
    assert "1 [shape=doublecircle" in dot
    assert "0 [shape=circle" in dot
    assert "2 [shape=circle" in dot


def test_dangling_transitions_are_skipped():
    view = SimpleNamespace(
        states=[State(0), State(1, True)],
        transitions=[Transition(0, "a", 1), Transition(1, "b", 7), Transition(9, EPSILON, 0)],
        start=0,
        accept=1,
    )
    dot = automaton_to_dot(view)
    assert '0 -> 1 [label="a"];' in dot
    assert "-> 7" not in dot
    assert "9 ->" not in dot


def test_highlight_path_colours_edges():
    nfa = build_number()
    path = nfa.accepting_path("0")
    dot = automaton_to_dot(nfa, highlight_path=path)
    assert '2 -> 3 [label="0", color="red", fontcolor="red"];' in dot
    assert '4 -> 5 [label="."];' in dot


def test_graph_name_is_escaped():
    dot = automaton_to_dot(build_symbol("a"), graph_name='say "hi"')
    assert dot.startswith('digraph "say \\"hi\\"" {')


def test_write_dot(tmp_path):
    target = tmp_path / "symbol.dot"
    returned = write_dot(build_symbol("a"), str(target))
    assert returned == str(target)
    assert target.read_text(encoding="utf-8").endswith("}\n")


def test_format_path():
    nfa = closure(build_symbol("a"))
    assert format_path(nfa.accepting_path("a")) == "0 -ε-> 2 -a-> 3 -ε-> 1"
    assert format_path([]) == "<empty>"
