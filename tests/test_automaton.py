import pytest

from conftest import EXPRESSION_GRAMMAR
from slr_parser import (
    AutomatonGenerator,
    GeneratorConfig,
    StateLimitExceededError,
    generate_states,
    parse_grammar,
)
from test_item_sets import STATE_ZERO, as_strings


def test_expression_grammar_has_twelve_states(expression_grammar):
    states, transitions = generate_states(expression_grammar)
    assert len(states) == 12
    assert [state.state_id for state in states] == list(range(12))
    assert as_strings(states[0].items) == STATE_ZERO


def test_textbook_transitions(expression_grammar):
    _, transitions = generate_states(expression_grammar)
    expected = {
        (0, "E"): 1, (0, "T"): 2, (0, "F"): 3, (0, "("): 4, (0, "id"): 5,
        (1, "+"): 6,
        (2, "*"): 7,
        (4, "E"): 8, (4, "T"): 2, (4, "F"): 3, (4, "("): 4, (4, "id"): 5,
        (6, "T"): 9, (6, "F"): 3, (6, "("): 4, (6, "id"): 5,
        (7, "F"): 10, (7, "("): 4, (7, "id"): 5,
        (8, ")"): 11, (8, "+"): 6,
        (9, "*"): 7,
    }
    assert transitions == expected


def test_textbook_item_sets(expression_grammar):
    states, _ = generate_states(expression_grammar)
    assert as_strings(states[1].items) == {"E' → E •", "E → E • + T"}
    assert as_strings(states[5].items) == {"F → id •"}
    assert as_strings(states[11].items) == {"F → ( E ) •"}
    assert as_strings(states[9].items) == {"E → E + T •", "T → T • * F"}


def test_state_transitions_mirror_automaton_map(expression_grammar):
    automaton = AutomatonGenerator(expression_grammar).generate_states()
    for state in automaton.states:
        for symbol, target in state.transitions.items():
            assert automaton.transitions[(state.state_id, symbol)] == target
    assert automaton.transition_triples()[0] == (0, 1, "E")
    assert len(automaton.transition_triples()) == len(automaton.transitions)


def test_generation_is_deterministic():
    runs = []
    for _ in range(3):
        grammar, _ = parse_grammar(EXPRESSION_GRAMMAR)
        automaton = AutomatonGenerator(grammar).generate_states()
        runs.append((
            [as_strings(state.items) for state in automaton.states],
            automaton.transition_triples(),
        ))
    assert runs[0] == runs[1] == runs[2]


def test_no_duplicate_item_sets(expression_grammar):
    states, _ = generate_states(expression_grammar)
    assert len({state.items for state in states}) == len(states)


def test_single_rule_grammar():
    grammar, _ = parse_grammar("S -> a")
    states, transitions = generate_states(grammar)
    assert [as_strings(state.items) for state in states] == [
        {"S' → • S", "S → • a"},
        {"S' → S •"},
        {"S → a •"},
    ]
    assert transitions == {(0, "S"): 1, (0, "a"): 2}


@pytest.mark.parametrize("text", ["L -> L a | a", "R -> a R | a"])
def test_left_and_right_recursion(text):
    grammar, _ = parse_grammar(text)
    states, _ = generate_states(grammar)
    assert len(states) == 4


def test_unreachable_non_terminal_is_kept_but_never_entered():
    grammar, _ = parse_grammar("S -> a\nU -> b")
    states, transitions = generate_states(grammar)
    assert "U" in grammar.non_terminals
    assert len(states) == 3
    assert all(item.production.lhs != "U" for state in states for item in state.items)


def test_state_limit_guard(expression_grammar):
    generator = AutomatonGenerator(expression_grammar, GeneratorConfig(max_states=5))
    with pytest.raises(StateLimitExceededError) as excinfo:
        generator.generate_states()
    assert excinfo.value.limit == 5


def test_performance_stats(expression_grammar):
    generator = AutomatonGenerator(expression_grammar)
    generator.generate_states()
    stats = generator.get_performance_stats()
    assert stats['states_created'] == 12
    assert stats['transitions_created'] == 22
    assert stats['closure_cache_hits'] > 0
