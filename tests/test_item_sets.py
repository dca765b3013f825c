from slr_parser import AutomatonGenerator, LR0Item, LR0ItemSetBuilder, Production


STATE_ZERO = {
    "E' → • E",
    "E → • E + T",
    "E → • T",
    "T → • T * F",
    "T → • F",
    "F → • ( E )",
    "F → • id",
}


def as_strings(items):
    return {str(item) for item in items}


def test_items_compare_structurally():
    first = LR0Item(Production("A", ("a", "B")), 1)
    second = LR0Item(Production("A", ("a", "B"), 7), 1)
    assert first == second
    assert len({first, second}) == 1
    assert first != LR0Item(Production("A", ("a", "B")), 2)


def test_item_rendering():
    item = LR0Item(Production("E", ("E", "+", "T")), 1)
    assert str(item) == "E → E • + T"
    assert item.next_symbol() == "+"
    assert not item.is_complete()
    assert str(LR0Item(Production("A", ()), 0)) == "A → •"
    assert LR0Item(Production("A", ()), 0).is_complete()


def test_closure_of_initial_item(expression_grammar):
    builder = LR0ItemSetBuilder(expression_grammar)
    closure = builder.closure([LR0Item(expression_grammar.augmented_production, 0)])
    assert as_strings(closure) == STATE_ZERO
    assert len(closure) == len(STATE_ZERO)


def test_closure_is_idempotent(expression_grammar):
    builder = LR0ItemSetBuilder(expression_grammar)
    automaton = AutomatonGenerator(expression_grammar).generate_states()
    for state in automaton.states:
        assert builder.closure(state.items) == state.items
        kernel = state.kernel_items()
        assert builder.closure(builder.closure(kernel)) == builder.closure(kernel)


def test_closure_ignores_discovery_order(expression_grammar):
    builder = LR0ItemSetBuilder(expression_grammar)
    items = [LR0Item(p, 0) for p in expression_grammar.productions[1:4]]
    assert builder.closure(items) == LR0ItemSetBuilder(expression_grammar).closure(reversed(items))


def test_goto_advances_dot_and_closes(expression_grammar):
    builder = LR0ItemSetBuilder(expression_grammar)
    state_one = [
        LR0Item(expression_grammar.productions[0], 1),
        LR0Item(expression_grammar.productions[1], 1),
    ]
    assert as_strings(builder.goto(state_one, "+")) == {
        "E → E + • T",
        "T → • T * F",
        "T → • F",
        "F → • ( E )",
        "F → • id",
    }


def test_goto_is_empty_iff_no_item_expects_symbol(expression_grammar):
    builder = LR0ItemSetBuilder(expression_grammar)
    automaton = AutomatonGenerator(expression_grammar).generate_states()
    for state in automaton.states:
        for symbol in expression_grammar.symbols:
            expects = any(item.next_symbol() == symbol for item in state.items)
            assert bool(builder.goto(state.items, symbol)) == expects


def test_epsilon_item_is_complete_in_closure(epsilon_grammar):
    builder = LR0ItemSetBuilder(epsilon_grammar)
    closure = builder.closure([LR0Item(epsilon_grammar.augmented_production, 0)])
    assert "A → •" in as_strings(closure)
    assert "B → •" not in as_strings(closure)
