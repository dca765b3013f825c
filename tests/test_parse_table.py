import pytest

from conftest import AMBIGUOUS_GRAMMAR, DANGLING_ELSE_GRAMMAR, EPSILON_GRAMMAR
from slr_parser import (
    ActionType,
    AutomatonGenerator,
    ConflictError,
    SLRTableGenerator,
    build_table,
    compute_follow,
    generate_slr_table,
    parse_grammar,
)


def test_expression_table_columns(expression_result):
    assert expression_result.table.columns() == ["+", "*", "(", ")", "id", "$", "E'", "E", "T", "F"]


def test_expression_table_cells(expression_result):
    table = expression_result.table
    assert table.get(0, "id").cell() == "s5"
    assert table.get(0, "(").cell() == "s4"
    assert table.get(0, "E").cell() == "1"
    assert table.get(0, "T").cell() == "2"
    assert table.get(1, "+").cell() == "s6"
    assert table.get(1, "$").cell() == "acc"
    assert table.get(2, "+").cell() == "r2"
    assert table.get(2, "*").cell() == "s7"
    assert table.get(5, "$").cell() == "r6"
    assert table.get(9, ")").cell() == "r1"
    assert table.get(11, "*").cell() == "r5"
    assert table.get(0, "+").action_type == ActionType.ERROR
    assert table.get(0, "+").cell() == ""


def test_expression_table_rows(expression_result):
    rows = expression_result.table.rows()
    assert len(rows) == 12
    assert all(len(row) == 10 for row in rows)
    assert rows[1] == ["s6", "", "", "", "", "acc", "", "", "", ""]
    assert rows[0] == ["", "", "s4", "", "s5", "", "", "1", "2", "3"]


def test_expression_grammar_is_slr1(expression_result):
    table = expression_result.table
    assert table.is_slr1
    assert expression_result.conflicts == []
    assert all(action.action_type != ActionType.CONFLICT for action in table.action.values())
    table.raise_for_conflicts()


def test_exactly_one_accept_cell(expression_result):
    assert expression_result.table.accept_cells() == [(1, "$")]


def test_reduce_uses_follow_sets(expression_result):
    table = expression_result.table
    reduce_cells = {symbol for (state, symbol), action in table.action.items()
                    if state == 3 and action.action_type == ActionType.REDUCE}
    assert reduce_cells == {"+", "*", ")", "$"}


def test_single_rule_grammar_table():
    result = generate_slr_table("S -> a")
    table = result.table
    assert table.rows() == [
        ["s2", "", "", "1"],
        ["", "acc", "", ""],
        ["", "r1", "", ""],
    ]
    assert table.goto == {(0, "S"): 1}
    assert table.is_slr1


def test_epsilon_grammar_table():
    result = generate_slr_table(EPSILON_GRAMMAR)
    table = result.table
    assert table.is_slr1
    # A -> ε reduces in state 0 on FOLLOW(A) = {b, $}
    assert table.get(0, "b").cell() == "r3"
    assert table.get(0, "$").cell() == "r3"
    assert table.get(0, "a").action_type == ActionType.SHIFT


def test_reduce_reduce_conflict_is_reported():
    result = generate_slr_table(AMBIGUOUS_GRAMMAR)
    table = result.table
    target = result.automaton.transitions[(0, "a")]

    assert not table.is_slr1
    assert len(table.conflicts) == 1
    conflict = table.conflicts[0]
    assert conflict.conflict_type == "reduce/reduce"
    assert conflict.state_id == target
    assert conflict.symbol == "$"
    assert conflict.actions == ["r3", "r4"]

    cell = table.get(target, "$")
    assert cell.action_type == ActionType.CONFLICT
    assert [str(a.value) for a in cell.alternatives] == ["A → a", "B → a"]
    assert cell.cell() == "r3/r4"


def test_shift_reduce_conflict_is_reported():
    result = generate_slr_table(DANGLING_ELSE_GRAMMAR)
    conflicts = result.table.conflicts
    assert len(conflicts) == 1
    assert conflicts[0].conflict_type == "shift/reduce"
    assert conflicts[0].symbol == "else"
    kinds = {a.action_type for a in result.table.get(conflicts[0].state_id, "else").alternatives}
    assert kinds == {ActionType.SHIFT, ActionType.REDUCE}


def test_accept_reduce_collision_is_described():
    result = generate_slr_table("S -> S | a")
    conflicts = result.table.conflicts
    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.state_id == result.automaton.transitions[(0, "S")]
    assert conflict.symbol == "$"
    assert conflict.conflict_type == "reduce/reduce"
    assert conflict.actions == ["acc", "r1"]
    assert conflict.description == "Accept on '$' collides with reduce actions ['reduce S → S']"
    assert "Multiple reduce" not in str(conflict)


def test_every_conflict_is_reported():
    result = generate_slr_table(
        "S -> A x | B x | C y | D y\nA -> a\nB -> a\nC -> a\nD -> a"
    )
    conflicts = result.table.conflicts
    assert [(c.symbol, c.conflict_type) for c in conflicts] == [
        ("x", "reduce/reduce"),
        ("y", "reduce/reduce"),
    ]
    assert conflicts[0].state_id == conflicts[1].state_id


def test_three_way_conflict_keeps_every_action():
    result = generate_slr_table("S -> A | B | C\nA -> a\nB -> a\nC -> a")
    assert len(result.table.conflicts) == 1
    assert len(result.table.conflicts[0].actions) == 3


def test_raise_for_conflicts():
    result = generate_slr_table(AMBIGUOUS_GRAMMAR)
    with pytest.raises(ConflictError) as excinfo:
        result.table.raise_for_conflicts()
    error = excinfo.value
    assert error.kind == "reduce/reduce"
    assert error.symbol == "$"
    assert error.state == result.automaton.transitions[(0, "a")]
    assert "not SLR(1)" in str(error)


def test_build_table_matches_generator(expression_grammar):
    automaton = AutomatonGenerator(expression_grammar).generate_states()
    follow = compute_follow(expression_grammar)
    table = build_table(automaton.states, automaton.transitions, expression_grammar, follow)
    assert table.rows() == \
        SLRTableGenerator(expression_grammar, automaton).generate_parsing_table().rows()


def test_conflict_report_lists_state_items():
    grammar, _ = parse_grammar(AMBIGUOUS_GRAMMAR)
    automaton = AutomatonGenerator(grammar).generate_states()
    generator = SLRTableGenerator(grammar, automaton)
    generator.generate_parsing_table()
    report = generator.generate_conflict_report()
    assert "Found 1 conflict(s)" in report
    assert "A → a •" in report


def test_result_to_dict(expression_result):
    data = expression_result.to_dict()
    assert data['start_symbol'] == "E"
    assert data['augmented_start_symbol'] == "E'"
    assert len(data['states']) == 12
    assert data['states'][0]['items'][0] == {
        'non_terminal': "E'", 'item_with_dot': ["•", "E"], 'text': "E' → • E",
    }
    assert data['transitions'][0] == {'from': 0, 'to': 1, 'label': 'E'}
    assert data['follow_sets']['E'] == ["+", ")", "$"]
    assert data['follow_sets']['T'] == ["+", "*", ")", "$"]
    assert data['is_slr1'] is True
