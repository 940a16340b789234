from __future__ import annotations

from typing import Any, Iterable, List, Sequence, Set, Tuple

from .automata import EPSILON

EPSILON_GLYPH = "ε"


def automaton_to_dot(
    automaton: Any,
    *,
    graph_name: str = "NFA",
    rankdir: str = "LR",
    highlight_path: Iterable[Any] = (),
) -> str:
    """Return a Graphviz DOT representation for the provided automaton.

    ``automaton`` only needs ``states``, ``transitions``, ``start`` and
    ``accept``. Transitions with an endpoint missing from ``states`` are
    left out of the drawing.
    """
    state_ids: Set[int] = {state.id for state in automaton.states}
    highlight_edges = {(t.source, t.symbol, t.target) for t in highlight_path}

    lines: List[str] = [f'digraph "{_escape(graph_name)}" {{']
    lines.append(f"  rankdir={rankdir};")
    lines.append("  node [shape=circle];")
    if automaton.start in state_ids:
        lines.append("  __start__ [shape=point];")
        lines.append(f"  __start__ -> {automaton.start};")

    for state in automaton.states:
        shape = "doublecircle" if state.id == automaton.accept else "circle"
        lines.append(f'  {state.id} [shape={shape}, label="{state.id}"];')

    for source, destination, labels, highlighted in _collect_edges(automaton, state_ids, highlight_edges):
        label = ", ".join(labels)
        attributes = [f'label="{_escape(label)}"']
        if highlighted:
            attributes.append('color="red"')
            attributes.append('fontcolor="red"')
        attr_text = ", ".join(attributes)
        lines.append(f"  {source} -> {destination} [{attr_text}];")

    lines.append("}")
    return "\n".join(lines)


def _collect_edges(
    automaton: Any,
    state_ids: Set[int],
    highlight_edges: Set[Tuple[int, str, int]],
) -> Iterable[Tuple[int, int, List[str], bool]]:
    grouped: dict[Tuple[int, int], List[str]] = {}
    highlighted: Set[Tuple[int, int]] = set()
    for transition in automaton.transitions:
        if transition.source not in state_ids or transition.target not in state_ids:
            continue
        key = (transition.source, transition.target)
        labels = grouped.setdefault(key, [])
        label = symbol_label(transition.symbol)
        if label not in labels:
            labels.append(label)
        if (transition.source, transition.symbol, transition.target) in highlight_edges:
            highlighted.add(key)
    for key, labels in sorted(grouped.items()):
        labels.sort()
        yield key[0], key[1], labels, key in highlighted


def symbol_label(symbol: str) -> str:
    return EPSILON_GLYPH if symbol == EPSILON else symbol


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def write_dot(automaton: Any, path: str, **kwargs) -> str:
    """Generate a DOT file at `path` and return the path."""
    dot = automaton_to_dot(automaton, **kwargs)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(dot + "\n")
    return path


def format_path(path: Sequence[Any]) -> str:
    if not path:
        return "<empty>"
    parts = [str(path[0].source)]
    for transition in path:
        parts.append(f"-{symbol_label(transition.symbol)}-> {transition.target}")
    return " ".join(parts)
