"""
SLR Parser Generator - Core Data Structures and Table Construction

This module implements the grammar reader, LR(0) item set construction,
FIRST/FOLLOW computation and SLR(1) ACTION/GOTO table generation. The whole
pipeline is a pure function of the grammar text and has no external
dependencies.
"""

from dataclasses import dataclass, field
from typing import List, Set, Dict, Tuple, Optional, Union, Any, FrozenSet, Iterable
from collections import deque
from enum import Enum
import argparse
import re
import sys


EPSILON = 'ε'
END_MARKER = '$'
DOT = '•'
ARROW = '→'


# ================ Errors ================

class GrammarError(Exception):
    """Base class for every failure of the generation pipeline."""
    error_type = "grammar_error"


class MalformedRuleError(GrammarError):
    """A non-blank line has no LHS -> RHS structure."""
    error_type = "malformed_rule"

    def __init__(self, line_number: int, line: str, reason: str = "expected 'LHS -> alternatives'"):
        self.line_number = line_number
        self.line = line
        super().__init__(f"Malformed rule on line {line_number}: '{line}' ({reason})")


class EmptyGrammarError(GrammarError):
    error_type = "empty_grammar"

    def __init__(self):
        super().__init__("Grammar is empty: no productions were found")


class UndefinedStartSymbolError(GrammarError):
    error_type = "undefined_start_symbol"

    def __init__(self, symbol: str, candidates: List[str]):
        self.symbol = symbol
        super().__init__(
            f"Start symbol '{symbol}' is not defined by any production. Must be one of: {candidates}"
        )


class UndefinedSymbolError(GrammarError):
    error_type = "undefined_symbol"

    def __init__(self, symbol: str, production: 'Production'):
        self.symbol = symbol
        self.production = production
        super().__init__(
            f"Symbol '{symbol}' in production '{production}' looks like a non-terminal but has no productions"
        )


class StateLimitExceededError(GrammarError):
    error_type = "state_limit"

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"LR(0) automaton exceeds the limit of {limit} states")


class ConflictError(GrammarError):
    """Raised on request when a parse table holds SLR(1) conflicts."""
    error_type = "conflict"

    def __init__(self, conflicts: List['Conflict']):
        self.conflicts = list(conflicts)
        first = self.conflicts[0]
        self.kind = first.conflict_type
        self.state = first.state_id
        self.symbol = first.symbol
        lines = [f"Grammar is not SLR(1): {len(self.conflicts)} conflict(s)"]
        lines.extend(f"  {conflict}" for conflict in self.conflicts)
        super().__init__("\n".join(lines))


# ================ Configuration ================

@dataclass
class GeneratorConfig:
    """Tunable limits and lexical conventions for the generator."""
    max_states: int = 1000  # Guard against pathological grammars
    strict_symbols: bool = False  # Raise instead of warn on undefined non-terminals
    epsilon_tokens: Tuple[str, ...] = (EPSILON, 'epsilon')
    augment_suffix: str = "'"


# ================ Data Model ================

class SymbolKind(Enum):
    TERMINAL = "terminal"
    NON_TERMINAL = "non_terminal"
    EPSILON = "epsilon"
    END_MARKER = "end_marker"


@dataclass(frozen=True)
class Production:
    """Represents a single production rule in a context-free grammar."""
    lhs: str  # Left-hand side non-terminal
    rhs: Tuple[str, ...]  # Right-hand side symbols, empty for epsilon
    index: int = field(default=-1, compare=False)  # Rule number used by reduce actions

    @property
    def is_epsilon(self) -> bool:
        return not self.rhs

    def __str__(self) -> str:
        if self.is_epsilon:
            return f"{self.lhs} {ARROW} {EPSILON}"
        return f"{self.lhs} {ARROW} {' '.join(self.rhs)}"


@dataclass
class Grammar:
    """Represents an augmented context-free grammar."""
    productions: List[Production]  # Augmented production first
    terminals: List[str]
    non_terminals: List[str]
    start_symbol: str  # Synthetic augmented start symbol
    original_start_symbol: str
    warnings: List[str] = field(default_factory=list)
    _by_lhs: Dict[str, List[Production]] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        for production in self.productions:
            self._by_lhs.setdefault(production.lhs, []).append(production)

    @property
    def augmented_production(self) -> Production:
        return self.productions[0]

    @property
    def symbols(self) -> List[str]:
        """Canonical alphabet in first-seen order, end marker excluded."""
        seen = []
        known = set()
        for production in self.productions:
            for symbol in (production.lhs,) + production.rhs:
                if symbol not in known:
                    known.add(symbol)
                    seen.append(symbol)
        return seen

    def productions_for(self, lhs: str) -> List[Production]:
        return self._by_lhs.get(lhs, [])

    def is_non_terminal(self, symbol: str) -> bool:
        return symbol in self._by_lhs

    def symbol_kind(self, symbol: str) -> SymbolKind:
        if symbol == END_MARKER:
            return SymbolKind.END_MARKER
        if symbol == EPSILON:
            return SymbolKind.EPSILON
        if self.is_non_terminal(symbol):
            return SymbolKind.NON_TERMINAL
        return SymbolKind.TERMINAL

    def __str__(self) -> str:
        lines = [f"Start Symbol: {self.original_start_symbol} (augmented: {self.start_symbol})"]
        lines.append(f"Terminals: {self.terminals}")
        lines.append(f"Non-terminals: {self.non_terminals}")
        lines.append("Productions:")
        for prod in self.productions:
            lines.append(f"  {prod.index}: {prod}")
        return "\n".join(lines)


@dataclass(frozen=True)
class LR0Item:
    """Represents an LR(0) item: a production with a dot position."""
    production: Production
    dot_position: int  # Position of dot in RHS (0 = before first symbol)

    def is_complete(self) -> bool:
        """Check if the dot is at the end of the production."""
        return self.dot_position >= len(self.production.rhs)

    def next_symbol(self) -> Optional[str]:
        """Get the symbol after the dot, or None if at end."""
        if self.is_complete():
            return None
        return self.production.rhs[self.dot_position]

    def advance(self) -> 'LR0Item':
        return LR0Item(self.production, self.dot_position + 1)

    def sort_key(self) -> Tuple[int, int]:
        return (self.production.index, self.dot_position)

    def symbols_with_dot(self) -> List[str]:
        rhs_with_dot = list(self.production.rhs)
        rhs_with_dot.insert(self.dot_position, DOT)
        return rhs_with_dot

    def __str__(self) -> str:
        return f"{self.production.lhs} {ARROW} {' '.join(self.symbols_with_dot())}"


@dataclass
class SLRState:
    """Represents a state in the LR(0) automaton."""
    items: FrozenSet[LR0Item]
    state_id: int
    transitions: Dict[str, int] = field(default_factory=dict)  # symbol -> target state id

    def sorted_items(self) -> List[LR0Item]:
        return sorted(self.items, key=LR0Item.sort_key)

    def kernel_items(self) -> List[LR0Item]:
        return [item for item in self.sorted_items()
                if item.dot_position > 0 or item.production.index == 0]

    def __str__(self) -> str:
        items_str = "\n  ".join(str(item) for item in self.sorted_items())
        return f"State {self.state_id}:\n  {items_str}"

    def __hash__(self) -> int:
        return hash(self.items)


@dataclass
class SLRAutomaton:
    """Represents the canonical collection of LR(0) item sets."""
    states: List[SLRState]
    transitions: Dict[Tuple[int, str], int]  # (state_id, symbol) -> target_state_id
    start_state_id: int = 0

    def transition_triples(self) -> List[Tuple[int, int, str]]:
        """Return (source, target, symbol) triples in discovery order."""
        return [(source, target, symbol) for (source, symbol), target in self.transitions.items()]

    def __str__(self) -> str:
        lines = [f"LR(0) Automaton with {len(self.states)} states"]
        lines.append(f"Start state: {self.start_state_id}")
        lines.append("\nStates:")
        for state in self.states:
            lines.append(str(state))
        lines.append("\nTransitions:")
        for source, target, symbol in self.transition_triples():
            lines.append(f"  GOTO({source}, {symbol}) = {target}")
        return "\n".join(lines)


class ActionType(Enum):
    """Enumeration of SLR table actions."""
    SHIFT = "shift"
    REDUCE = "reduce"
    ACCEPT = "accept"
    GOTO = "goto"
    ERROR = "error"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class ParseAction:
    """Represents a single table entry."""
    action_type: ActionType
    value: Optional[Union[int, Production]] = None  # State ID for shift/goto, Production for reduce
    alternatives: Tuple['ParseAction', ...] = ()  # Competing actions of a conflict cell

    def cell(self) -> str:
        """Compact cell text: sN, rN, acc, N, or blank."""
        if self.action_type == ActionType.SHIFT:
            return f"s{self.value}"
        elif self.action_type == ActionType.REDUCE:
            return f"r{self.value.index}"
        elif self.action_type == ActionType.ACCEPT:
            return "acc"
        elif self.action_type == ActionType.GOTO:
            return str(self.value)
        elif self.action_type == ActionType.CONFLICT:
            return "/".join(action.cell() for action in self.alternatives)
        return ""

    def __str__(self) -> str:
        if self.action_type == ActionType.SHIFT:
            return f"shift {self.value}"
        elif self.action_type == ActionType.REDUCE:
            return f"reduce {self.value}"
        elif self.action_type == ActionType.ACCEPT:
            return "accept"
        elif self.action_type == ActionType.GOTO:
            return f"goto {self.value}"
        elif self.action_type == ActionType.CONFLICT:
            return "conflict: " + " | ".join(str(action) for action in self.alternatives)
        return "error"


ERROR_ACTION = ParseAction(ActionType.ERROR)
ACCEPT_ACTION = ParseAction(ActionType.ACCEPT)


@dataclass
class Conflict:
    """Represents a parsing conflict in the SLR table."""
    state_id: int
    symbol: str
    conflict_type: str  # "shift/reduce" or "reduce/reduce"
    actions: List[str]  # Cell text of each competing action
    description: str

    def __str__(self) -> str:
        return f"{self.conflict_type} conflict in state {self.state_id} on symbol '{self.symbol}': {self.description}"


@dataclass
class ParseTable:
    """Represents the SLR(1) ACTION and GOTO tables."""
    action: Dict[Tuple[int, str], ParseAction]  # (state, terminal or $) -> action
    goto: Dict[Tuple[int, str], int]  # (state, non_terminal) -> state
    terminals: List[str]
    non_terminals: List[str]
    state_count: int
    conflicts: List[Conflict] = field(default_factory=list)

    @property
    def is_slr1(self) -> bool:
        return not self.conflicts

    def columns(self) -> List[str]:
        return self.terminals + [END_MARKER] + self.non_terminals

    def get(self, state_id: int, symbol: str) -> ParseAction:
        if symbol in self.non_terminals:
            target = self.goto.get((state_id, symbol))
            if target is None:
                return ERROR_ACTION
            return ParseAction(ActionType.GOTO, target)
        return self.action.get((state_id, symbol), ERROR_ACTION)

    def rows(self) -> List[List[str]]:
        """Row per state, column per symbol, of cell strings."""
        columns = self.columns()
        return [[self.get(state_id, symbol).cell() for symbol in columns]
                for state_id in range(self.state_count)]

    def accept_cells(self) -> List[Tuple[int, str]]:
        return [key for key, action in self.action.items() if action.action_type == ActionType.ACCEPT]

    def raise_for_conflicts(self):
        if self.conflicts:
            raise ConflictError(self.conflicts)

    def __str__(self) -> str:
        lines = ["Parsing Table:"]
        lines.append("\nAction Table:")
        for (state, terminal), action in sorted(self.action.items()):
            lines.append(f"  ACTION[{state}, {terminal}] = {action}")
        lines.append("\nGoto Table:")
        for (state, non_terminal), target in sorted(self.goto.items()):
            lines.append(f"  GOTO[{state}, {non_terminal}] = {target}")
        return "\n".join(lines)


# ================ Grammar Reader ================

# LHS may not contain separator characters, so "--> b" has no valid split
_RULE_PATTERN = re.compile(r'^\s*([^\s|\->→:=]+)\s*(?:->|→|::=)(.*)$')
_SEPARATOR_PATTERN = re.compile(r'->|→|::=')


class GrammarProcessor:
    """Processes grammar text and creates augmented Grammar objects."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.productions: List[Production] = []
        self.warnings: List[str] = []

    def parse_grammar(self, cfg_text: str, start_symbol: Optional[str] = None) -> Grammar:
        """
        Parse grammar text and return an augmented Grammar object.

        Format: one rule per line, ``A -> alpha | beta``. Blank lines are
        ignored. An empty alternative (or ``ε``) is an epsilon production.
        The left-hand side of the first rule is the start symbol unless
        ``start_symbol`` is given.
        """
        self._reset()

        raw_rules = self._extract_raw_rules(cfg_text)
        user_productions = self._normalize_productions(raw_rules)
        if not user_productions:
            raise EmptyGrammarError()

        defined = []
        for production in user_productions:
            if production.lhs not in defined:
                defined.append(production.lhs)

        natural_start = user_productions[0].lhs
        if start_symbol is None:
            start_symbol = natural_start
        elif start_symbol not in defined:
            raise UndefinedStartSymbolError(start_symbol, defined)

        # Augment with S' -> S, S' fresh with respect to every symbol
        all_symbols = set(defined)
        for production in user_productions:
            all_symbols.update(production.rhs)
        augmented_start = start_symbol + self.config.augment_suffix
        while augmented_start in all_symbols:
            augmented_start += self.config.augment_suffix

        self.productions = [Production(augmented_start, (start_symbol,), 0)] + [
            Production(p.lhs, p.rhs, i) for i, p in enumerate(user_productions, 1)
        ]

        grammar = Grammar(
            productions=self.productions,
            terminals=[],
            non_terminals=[],
            start_symbol=augmented_start,
            original_start_symbol=start_symbol,
            warnings=self.warnings,
        )
        grammar.terminals, grammar.non_terminals = extract_symbols(grammar)
        self._check_undefined_symbols(grammar)
        return grammar

    def _reset(self):
        """Reset internal state for new grammar parsing."""
        self.productions = []
        self.warnings = []

    def _extract_raw_rules(self, cfg_text: str) -> List[Tuple[int, str, str, str]]:
        """Split text into (line_number, line, lhs, rhs_text) tuples."""
        rules = []
        for line_number, line in enumerate(cfg_text.splitlines(), 1):
            # Remove // comments
            line = re.sub(r'//.*$', '', line).strip()
            if not line:
                continue

            match = _RULE_PATTERN.match(line)
            if not match:
                raise MalformedRuleError(line_number, line)

            lhs = match.group(1)
            if lhs == END_MARKER or lhs in self.config.epsilon_tokens:
                raise MalformedRuleError(line_number, line, f"'{lhs}' cannot be a left-hand side")
            rules.append((line_number, line, lhs, match.group(2)))
        return rules

    def _normalize_productions(self, raw_rules: List[Tuple[int, str, str, str]]) -> List[Production]:
        """Expand alternatives into one Production each."""
        productions = []
        seen = set()

        for line_number, line, lhs, rhs_text in raw_rules:
            for alt in rhs_text.split('|'):
                symbols = tuple(s for s in alt.split() if s not in self.config.epsilon_tokens)
                if END_MARKER in symbols:
                    raise MalformedRuleError(
                        line_number, line, f"'{END_MARKER}' is the reserved end-of-input marker"
                    )
                for symbol in symbols:
                    if _SEPARATOR_PATTERN.search(symbol):
                        raise MalformedRuleError(
                            line_number, line, f"unexpected separator in '{symbol}'"
                        )

                key = (lhs, symbols)
                if key in seen:
                    self.warnings.append(
                        f"Duplicate production '{Production(lhs, symbols)}' on line {line_number} ignored"
                    )
                    continue
                seen.add(key)
                productions.append(Production(lhs=lhs, rhs=symbols))

        return productions

    def _check_undefined_symbols(self, grammar: Grammar):
        """Flag right-hand side symbols that look like undefined non-terminals."""
        reported = set()
        for production in grammar.productions:
            for symbol in production.rhs:
                if grammar.is_non_terminal(symbol) or symbol in reported:
                    continue
                if symbol[0].isupper():
                    if self.config.strict_symbols:
                        raise UndefinedSymbolError(symbol, production)
                    reported.add(symbol)
                    grammar.warnings.append(
                        f"Symbol '{symbol}' has no productions and is treated as a terminal"
                    )


def parse_grammar(text: str, start_symbol: Optional[str] = None,
                  config: Optional[GeneratorConfig] = None) -> Tuple[Grammar, str]:
    """Parse grammar text, returning the augmented grammar and the start symbol in effect."""
    grammar = GrammarProcessor(config).parse_grammar(text, start_symbol)
    return grammar, grammar.original_start_symbol


def extract_symbols(grammar: Grammar) -> Tuple[List[str], List[str]]:
    """
    Classify grammar symbols.

    Strategy:
    1. All LHS symbols are non-terminals (the augmented one included)
    2. Symbols that appear in a RHS but never as LHS are terminals
    3. The end marker is never a grammar symbol

    Both lists are in first-seen order.
    """
    terminals = []
    non_terminals = []
    for symbol in grammar.symbols:
        if grammar.is_non_terminal(symbol):
            non_terminals.append(symbol)
        elif symbol != END_MARKER:
            terminals.append(symbol)
    return terminals, non_terminals


# ================ Item Sets ================

class LR0ItemSetBuilder:
    """Computes closure and goto over LR(0) item sets."""

    def __init__(self, grammar: Grammar):
        self.grammar = grammar
        self._closure_cache: Dict[FrozenSet[LR0Item], FrozenSet[LR0Item]] = {}
        self._closure_cache_hits = 0
        self._closure_cache_misses = 0

    def closure(self, items: Iterable[LR0Item]) -> FrozenSet[LR0Item]:
        """
        Compute the closure of a set of LR(0) items.

        Algorithm:
        1. Start with the given items
        2. For each item A -> α•Bβ where B is non-terminal:
        3. For each production B -> γ, add B -> •γ if not already present
        4. Repeat until no new items are added
        """
        items_key = frozenset(items)
        if items_key in self._closure_cache:
            self._closure_cache_hits += 1
            return self._closure_cache[items_key]

        self._closure_cache_misses += 1
        closure_items = set(items_key)
        worklist = list(items_key)

        while worklist:
            item = worklist.pop()
            next_symbol = item.next_symbol()
            if next_symbol is None or not self.grammar.is_non_terminal(next_symbol):
                continue
            for production in self.grammar.productions_for(next_symbol):
                new_item = LR0Item(production, 0)
                if new_item not in closure_items:
                    closure_items.add(new_item)
                    worklist.append(new_item)

        result = frozenset(closure_items)
        self._closure_cache[items_key] = result
        return result

    def goto(self, items: Iterable[LR0Item], symbol: str) -> FrozenSet[LR0Item]:
        """
        Compute GOTO(I, X).

        Advance the dot past X in every item A -> α•Xβ and return the closure
        of the result. The empty set means there is no transition on X.
        """
        advanced = [item.advance() for item in items if item.next_symbol() == symbol]
        if not advanced:
            return frozenset()
        return self.closure(advanced)

    def get_cache_stats(self) -> Dict[str, int]:
        return {
            'closure_cache_hits': self._closure_cache_hits,
            'closure_cache_misses': self._closure_cache_misses,
            'closure_cache_size': len(self._closure_cache),
        }


class AutomatonGenerator:
    """Builds the canonical collection of LR(0) item sets breadth-first."""

    def __init__(self, grammar: Grammar, config: Optional[GeneratorConfig] = None):
        self.grammar = grammar
        self.config = config or GeneratorConfig()
        self.item_builder = LR0ItemSetBuilder(grammar)
        self.states: List[SLRState] = []
        self.state_map: Dict[FrozenSet[LR0Item], int] = {}  # Map item sets to state IDs
        self.transitions: Dict[Tuple[int, str], int] = {}

    def generate_states(self) -> SLRAutomaton:
        """
        Build the LR(0) automaton.

        Algorithm:
        1. State 0 is the closure of S' -> •S
        2. For each unprocessed state and each symbol, compute GOTO
        3. Reuse a state with the same item set or append a new one
        4. Continue until the worklist is empty
        """
        self.states = []
        self.state_map = {}
        self.transitions = {}

        initial_item = LR0Item(self.grammar.augmented_production, 0)
        self._create_state(self.item_builder.closure([initial_item]))

        alphabet = self.grammar.symbols
        worklist = deque([0])
        while worklist:
            current_state = self.states[worklist.popleft()]

            for symbol in alphabet:
                goto_items = self.item_builder.goto(current_state.items, symbol)
                if not goto_items:
                    continue

                target_id = self.state_map.get(goto_items)
                if target_id is None:
                    target_id = self._create_state(goto_items).state_id
                    worklist.append(target_id)

                current_state.transitions[symbol] = target_id
                self.transitions[(current_state.state_id, symbol)] = target_id

        return SLRAutomaton(states=self.states, transitions=self.transitions, start_state_id=0)

    def _create_state(self, items: FrozenSet[LR0Item]) -> SLRState:
        if len(self.states) >= self.config.max_states:
            raise StateLimitExceededError(self.config.max_states)
        state = SLRState(items=items, state_id=len(self.states))
        self.states.append(state)
        self.state_map[items] = state.state_id
        return state

    def get_performance_stats(self) -> Dict[str, int]:
        stats = {
            'states_created': len(self.states),
            'transitions_created': len(self.transitions),
            'max_states_limit': self.config.max_states,
        }
        stats.update(self.item_builder.get_cache_stats())
        return stats


def generate_states(grammar: Grammar, config: Optional[GeneratorConfig] = None
                    ) -> Tuple[List[SLRState], Dict[Tuple[int, str], int]]:
    automaton = AutomatonGenerator(grammar, config).generate_states()
    return automaton.states, automaton.transitions


# ================ FIRST / FOLLOW ================

class FirstFollowComputer:
    """Computes FIRST and FOLLOW sets by fixed-point iteration."""

    def __init__(self, grammar: Grammar):
        self.grammar = grammar
        self._first_sets: Optional[Dict[str, Set[str]]] = None
        self._follow_sets: Optional[Dict[str, Set[str]]] = None

    def compute_first_sets(self) -> Dict[str, Set[str]]:
        """
        Compute FIRST sets for all grammar symbols.

        Rules:
        1. If X is terminal, FIRST(X) = {X}
        2. If X -> ε, add ε to FIRST(X)
        3. If X -> Y1 Y2 ... Yk, add FIRST(Y1) - {ε} to FIRST(X);
           if ε in FIRST(Y1), add FIRST(Y2) - {ε}, and so on
        """
        first: Dict[str, Set[str]] = {t: {t} for t in self.grammar.terminals}
        for nt in self.grammar.non_terminals:
            first[nt] = set()

        changed = True
        while changed:
            changed = False
            for production in self.grammar.productions:
                rhs_first = self._first_of_sequence(production.rhs, first)
                target = first[production.lhs]
                before_size = len(target)
                target.update(rhs_first)
                if len(target) > before_size:
                    changed = True

        self._first_sets = first
        return {symbol: values.copy() for symbol, values in first.items()}

    def compute_follow_sets(self) -> Dict[str, Set[str]]:
        """
        Compute FOLLOW sets for all non-terminals.

        FOLLOW(S') = {$}. For every A -> αBβ, FIRST(β) - {ε} is added to
        FOLLOW(B), and FOLLOW(A) too when β is empty or nullable.
        """
        if self._first_sets is None:
            self.compute_first_sets()

        follow: Dict[str, Set[str]] = {nt: set() for nt in self.grammar.non_terminals}
        follow[self.grammar.start_symbol].add(END_MARKER)

        # Iterate until no changes (fixed point)
        changed = True
        while changed:
            changed = False
            for production in self.grammar.productions:
                for i, symbol in enumerate(production.rhs):
                    if symbol not in follow:
                        continue
                    first_beta = self.first_of_string(production.rhs[i + 1:])

                    before_size = len(follow[symbol])
                    follow[symbol].update(first_beta - {EPSILON})
                    if EPSILON in first_beta:
                        follow[symbol].update(follow[production.lhs])
                    if len(follow[symbol]) > before_size:
                        changed = True

        self._follow_sets = follow
        return {symbol: values.copy() for symbol, values in follow.items()}

    def first_of_string(self, symbols: Iterable[str]) -> Set[str]:
        """FIRST of a symbol sequence; {ε} for the empty sequence."""
        if self._first_sets is None:
            self.compute_first_sets()
        return self._first_of_sequence(symbols, self._first_sets)

    def get_first(self, symbol: str) -> Set[str]:
        return self.first_of_string([symbol])

    def get_follow(self, symbol: str) -> Set[str]:
        if self._follow_sets is None:
            self.compute_follow_sets()
        return self._follow_sets.get(symbol, set()).copy()

    def nullable(self) -> Set[str]:
        if self._first_sets is None:
            self.compute_first_sets()
        return {nt for nt in self.grammar.non_terminals if EPSILON in self._first_sets[nt]}

    @staticmethod
    def _first_of_sequence(symbols: Iterable[str], first: Dict[str, Set[str]]) -> Set[str]:
        result = set()
        for symbol in symbols:
            symbol_first = first.get(symbol, {symbol})
            result.update(symbol_first - {EPSILON})
            # If epsilon not in FIRST(symbol), stop
            if EPSILON not in symbol_first:
                return result
        result.add(EPSILON)
        return result


def compute_follow(grammar: Grammar) -> Dict[str, Set[str]]:
    return FirstFollowComputer(grammar).compute_follow_sets()


# ================ Table Construction ================

class SLRTableGenerator:
    """Generates the SLR(1) table from the LR(0) automaton and FOLLOW sets."""

    def __init__(self, grammar: Grammar, automaton: SLRAutomaton,
                 follow_sets: Optional[Dict[str, Set[str]]] = None):
        self.grammar = grammar
        self.automaton = automaton
        if follow_sets is None:
            follow_sets = FirstFollowComputer(grammar).compute_follow_sets()
        self.follow_sets = follow_sets
        self.action_table: Dict[Tuple[int, str], ParseAction] = {}
        self.goto_table: Dict[Tuple[int, str], int] = {}
        self._conflicts: Dict[Tuple[int, str], Conflict] = {}

        # Lookahead order follows the table columns so conflict reports are stable
        self._lookahead_order = self.grammar.terminals + [END_MARKER]

    def generate_parsing_table(self) -> ParseTable:
        """
        Generate the ACTION and GOTO tables.

        For each state i and each item in it:
        - If A -> α•aβ and GOTO(i,a) = j, then ACTION[i,a] = shift j
        - If A -> α• and A != S', then ACTION[i,t] = reduce A -> α for t in FOLLOW(A)
        - If S' -> S•, then ACTION[i,$] = accept
        - If A -> α•Bβ and GOTO(i,B) = j, then GOTO[i,B] = j
        Conflicts are recorded, never resolved.
        """
        self.action_table = {}
        self.goto_table = {}
        self._conflicts = {}

        for state in self.automaton.states:
            state_id = state.state_id

            for item in state.sorted_items():
                next_symbol = item.next_symbol()

                if next_symbol is None:
                    if item.production.lhs == self.grammar.start_symbol:
                        self._add_action(state_id, END_MARKER, ACCEPT_ACTION)
                    else:
                        reduce_action = ParseAction(ActionType.REDUCE, item.production)
                        follow = self.follow_sets.get(item.production.lhs, set())
                        for lookahead in self._lookahead_order:
                            if lookahead in follow:
                                self._add_action(state_id, lookahead, reduce_action)

                elif self.grammar.is_non_terminal(next_symbol):
                    target_state = state.transitions.get(next_symbol)
                    if target_state is not None:
                        self.goto_table[(state_id, next_symbol)] = target_state

                else:
                    target_state = state.transitions.get(next_symbol)
                    if target_state is not None:
                        self._add_action(state_id, next_symbol,
                                         ParseAction(ActionType.SHIFT, target_state))

        return ParseTable(
            action=dict(self.action_table),
            goto=dict(self.goto_table),
            terminals=list(self.grammar.terminals),
            non_terminals=list(self.grammar.non_terminals),
            state_count=len(self.automaton.states),
            conflicts=list(self._conflicts.values()),
        )

    def _add_action(self, state_id: int, symbol: str, action: ParseAction):
        """
        Add an action to the action table, detecting conflicts.

        A cell receiving a second, different action becomes a CONFLICT cell
        holding every competing action.
        """
        key = (state_id, symbol)
        existing_action = self.action_table.get(key)

        if existing_action is None:
            self.action_table[key] = action
            return
        if existing_action == action:
            return

        if existing_action.action_type == ActionType.CONFLICT:
            if action in existing_action.alternatives:
                return
            alternatives = existing_action.alternatives + (action,)
        else:
            alternatives = (existing_action, action)

        self.action_table[key] = ParseAction(ActionType.CONFLICT, alternatives=alternatives)
        self._conflicts[key] = self._describe_conflict(state_id, symbol, alternatives)

    def _describe_conflict(self, state_id: int, symbol: str,
                           alternatives: Tuple[ParseAction, ...]) -> Conflict:
        shift_actions = [a for a in alternatives if a.action_type == ActionType.SHIFT]
        reduce_actions = [a for a in alternatives if a.action_type == ActionType.REDUCE]
        accepts = any(a.action_type == ActionType.ACCEPT for a in alternatives)

        # Accept competes like a reduce of S' -> S
        if shift_actions:
            conflict_type = "shift/reduce"
            description = (f"Shift action {shift_actions[0]} conflicts with reduce actions "
                           f"{[str(a) for a in reduce_actions]}")
        elif accepts:
            conflict_type = "reduce/reduce"
            description = (f"Accept on '{symbol}' collides with reduce actions "
                           f"{[str(a) for a in reduce_actions]}")
        else:
            conflict_type = "reduce/reduce"
            description = f"Multiple reduce actions: {[str(a) for a in reduce_actions]}"

        return Conflict(
            state_id=state_id,
            symbol=symbol,
            conflict_type=conflict_type,
            actions=[a.cell() for a in alternatives],
            description=description,
        )

    def generate_conflict_report(self) -> str:
        """
        Generate a detailed report of all conflicts found in the parsing table.

        Returns:
            String containing detailed conflict analysis
        """
        conflicts = list(self._conflicts.values())
        if not conflicts:
            return "No conflicts detected in the parsing table."

        lines = [f"Found {len(conflicts)} conflict(s) in the parsing table:\n"]

        for i, conflict in enumerate(conflicts, 1):
            lines.append(f"Conflict {i}: {conflict}")
            lines.append(f"  State {conflict.state_id} items:")
            for item in self.automaton.states[conflict.state_id].sorted_items():
                lines.append(f"    {item}")
            lines.append(f"  Conflicting actions on symbol '{conflict.symbol}':")
            for action in conflict.actions:
                lines.append(f"    {action}")
            lines.append("")

        return "\n".join(lines)


def build_table(states: List[SLRState], transitions: Dict[Tuple[int, str], int], grammar: Grammar,
                follow_sets: Optional[Dict[str, Set[str]]] = None) -> ParseTable:
    automaton = SLRAutomaton(states=states, transitions=transitions)
    return SLRTableGenerator(grammar, automaton, follow_sets).generate_parsing_table()


# ================ Pipeline ================

@dataclass
class SLRGenerationResult:
    """Every artifact produced from one grammar text."""
    grammar: Grammar
    automaton: SLRAutomaton
    first_sets: Dict[str, Set[str]]
    follow_sets: Dict[str, Set[str]]
    table: ParseTable

    @property
    def conflicts(self) -> List[Conflict]:
        return self.table.conflicts

    @property
    def warnings(self) -> List[str]:
        return self.grammar.warnings

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready view for presentation layers."""
        ordered_lookaheads = self.grammar.terminals + [END_MARKER]
        return {
            'start_symbol': self.grammar.original_start_symbol,
            'augmented_start_symbol': self.grammar.start_symbol,
            'productions': [{'index': p.index, 'lhs': p.lhs, 'rhs': list(p.rhs), 'text': str(p)}
                            for p in self.grammar.productions],
            'terminals': list(self.grammar.terminals),
            'non_terminals': list(self.grammar.non_terminals),
            'states': [
                {
                    'index': state.state_id,
                    'items': [
                        {'non_terminal': item.production.lhs,
                         'item_with_dot': item.symbols_with_dot(),
                         'text': str(item)}
                        for item in state.sorted_items()
                    ],
                }
                for state in self.automaton.states
            ],
            'transitions': [{'from': source, 'to': target, 'label': symbol}
                            for source, target, symbol in self.automaton.transition_triples()],
            'follow_sets': {nt: [t for t in ordered_lookaheads if t in follow]
                            for nt, follow in self.follow_sets.items()},
            'table': {'columns': self.table.columns(), 'rows': self.table.rows()},
            'conflicts': [
                {'state': c.state_id, 'symbol': c.symbol, 'type': c.conflict_type,
                 'actions': c.actions, 'message': str(c)}
                for c in self.table.conflicts
            ],
            'warnings': list(self.grammar.warnings),
            'is_slr1': self.table.is_slr1,
        }


def generate_slr_table(cfg_text: str, start_symbol: Optional[str] = None,
                       config: Optional[GeneratorConfig] = None) -> SLRGenerationResult:
    """
    Run the full pipeline: text -> grammar -> automaton, FOLLOW -> table.

    Raises a GrammarError subclass on malformed input. Conflicts do not raise;
    they are reported on the returned table.
    """
    config = config or GeneratorConfig()
    grammar = GrammarProcessor(config).parse_grammar(cfg_text, start_symbol)
    automaton = AutomatonGenerator(grammar, config).generate_states()

    ff_computer = FirstFollowComputer(grammar)
    first_sets = ff_computer.compute_first_sets()
    follow_sets = ff_computer.compute_follow_sets()

    table = SLRTableGenerator(grammar, automaton, follow_sets).generate_parsing_table()
    return SLRGenerationResult(
        grammar=grammar,
        automaton=automaton,
        first_sets=first_sets,
        follow_sets=follow_sets,
        table=table,
    )


class SLRParserVisualizer:
    """
    High-level interface combining generation with visualization.

    Results are plain dictionaries so they can be handed to a web layer as is.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def parse_productions(self, cfg_text: str) -> Dict[str, Any]:
        """
        Parse grammar productions without building the automaton.

        Returns:
            Dictionary containing success status, numbered productions and symbols
        """
        try:
            grammar, natural_start = parse_grammar(cfg_text, config=self.config)
        except GrammarError as e:
            return self._error_result(e)

        return {
            'success': True,
            'productions': [f"{p.index}: {p}" for p in grammar.productions],
            'start_symbol': natural_start,
            'augmented_start_symbol': grammar.start_symbol,
            'start_symbols': [nt for nt in grammar.non_terminals if nt != grammar.start_symbol],
            'terminals': list(grammar.terminals),
            'non_terminals': list(grammar.non_terminals),
            'warnings': list(grammar.warnings),
        }

    def process_grammar(self, cfg_text: str, start_symbol: Optional[str] = None) -> Dict[str, Any]:
        """
        Generate the SLR table and all visualization components.

        Args:
            cfg_text: Grammar in text format
            start_symbol: Optional override of the first rule's left-hand side

        Returns:
            Dictionary containing the JSON view plus HTML/DOT renderings
        """
        try:
            result = generate_slr_table(cfg_text, start_symbol, self.config)
        except GrammarError as e:
            return self._error_result(e)

        from visualization import VisualizationGenerator
        viz_generator = VisualizationGenerator()

        output = result.to_dict()
        output.update({
            'success': True,
            'error': None,
            'parse_table_html': viz_generator.generate_parse_table_html(result.table),
            'automaton_dot': viz_generator.generate_automaton_dot(result.automaton),
            'conflicts_html': viz_generator.error_formatter.format_conflict_report(result.conflicts),
            'table_info': {
                'states_count': len(result.automaton.states),
                'transitions_count': len(result.automaton.transitions),
                'action_entries': len(result.table.action),
                'goto_entries': len(result.table.goto),
                'conflicts_count': len(result.conflicts),
            },
        })
        return output

    def _error_result(self, error: GrammarError) -> Dict[str, Any]:
        from visualization import ErrorMessageFormatter
        error_formatter = ErrorMessageFormatter()
        return {
            'success': False,
            'error': str(error),
            'error_type': error.error_type,
            'error_html': error_formatter.format_generation_error(str(error)),
        }


# ================ Command Line ================

def _format_grid(columns: List[str], rows: List[List[str]]) -> str:
    header = ["State"] + columns
    body = [[str(i)] + row for i, row in enumerate(rows)]
    widths = [max(len(line[c]) for line in [header] + body) for c in range(len(header))]
    lines = []
    for line in [header] + body:
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip())
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    arg_parser = argparse.ArgumentParser(description="Generate an SLR(1) parsing table from a grammar")
    arg_parser.add_argument('grammar_file', nargs='?', help="grammar file (reads stdin when omitted)")
    arg_parser.add_argument('--start', dest='start_symbol', help="start symbol override")
    arg_parser.add_argument('--max-states', type=int, default=GeneratorConfig.max_states)
    arg_parser.add_argument('--strict', action='store_true', help="reject undefined non-terminals")
    args = arg_parser.parse_args(argv)

    if args.grammar_file:
        with open(args.grammar_file, encoding='utf-8') as grammar_file:
            cfg_text = grammar_file.read()
    else:
        cfg_text = sys.stdin.read()

    config = GeneratorConfig(max_states=args.max_states, strict_symbols=args.strict)
    try:
        result = generate_slr_table(cfg_text, args.start_symbol, config)
    except GrammarError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(result.grammar)
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    print()
    print(result.automaton)
    print("\nFOLLOW sets:")
    for nt, follow in result.follow_sets.items():
        print(f"  FOLLOW({nt}) = {{{', '.join(sorted(follow))}}}")
    print()
    print(_format_grid(result.table.columns(), result.table.rows()))

    if result.conflicts:
        print()
        for conflict in result.conflicts:
            print(conflict)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
