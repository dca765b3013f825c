import pytest

from slr_parser import parse_grammar, generate_slr_table


EXPRESSION_GRAMMAR = """
E -> E + T | T
T -> T * F | F
F -> ( E ) | id
"""

AMBIGUOUS_GRAMMAR = """
S -> A | B
A -> a
B -> a
"""

EPSILON_GRAMMAR = """
S -> A B
A -> a A |
B -> b B | ε
"""

DANGLING_ELSE_GRAMMAR = """
S -> if E then S | if E then S else S | other
E -> cond
"""


@pytest.fixture
def expression_grammar():
    grammar, _ = parse_grammar(EXPRESSION_GRAMMAR)
    return grammar


@pytest.fixture
def expression_result():
    return generate_slr_table(EXPRESSION_GRAMMAR)


@pytest.fixture
def epsilon_grammar():
    grammar, _ = parse_grammar(EPSILON_GRAMMAR)
    return grammar
