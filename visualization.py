"""
Visualization and Output Formatting Module

This module provides visualization and formatting capabilities for the SLR
parser generator, including HTML table generation, DOT format output for the
LR(0) automaton, and error/conflict reports.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass
import html

from slr_parser import ActionType, END_MARKER


@dataclass
class VisualizationConfig:
    """Configuration options for visualization output."""
    table_css_classes: str = "parse-table"
    error_css_classes: str = "error-message"
    include_inline_styles: bool = True
    compact_mode: bool = False
    max_state_label_items: int = 12  # Items shown per DOT node before eliding


class HTMLTableGenerator:
    """Generates HTML tables for SLR parsing tables."""

    def __init__(self, config: Optional[VisualizationConfig] = None):
        self.config = config or VisualizationConfig()

    def generate_parse_table_html(self, table) -> str:
        """
        Generate combined HTML table for ACTION and GOTO sections.

        Args:
            table: ParseTable produced by the table generator

        Returns:
            HTML string containing the parsing table
        """
        if table.state_count == 0:
            return self._generate_empty_table_html("No parsing states found")

        action_columns = table.terminals + [END_MARKER]
        goto_columns = list(table.non_terminals)

        html_lines = []
        html_lines.append(f'<table class="grammar-table {self.config.table_css_classes}" role="table" aria-label="SLR Parsing Table with ACTION and GOTO sections">')
        html_lines.append(self._generate_table_header(action_columns, goto_columns))

        html_lines.append('<tbody>')
        for state_id in range(table.state_count):
            html_lines.append(self._generate_table_row(table, state_id, action_columns, goto_columns))
        html_lines.append('</tbody>')

        html_lines.append('</table>')

        return '\n'.join(html_lines)

    def _generate_table_header(self, action_columns: List[str], goto_columns: List[str]) -> str:
        """Generate the table header with ACTION and GOTO sections."""
        lines = []
        lines.append('<thead>')

        # First header row with ACTION and GOTO spans
        lines.append('<tr>')
        lines.append('<th class="grammar-table-header grammar-table-header-primary" scope="col" rowspan="2">State</th>')
        lines.append(f'<th class="grammar-table-header" scope="colgroup" colspan="{len(action_columns)}">ACTION</th>')
        if goto_columns:
            lines.append(f'<th class="grammar-table-header" scope="colgroup" colspan="{len(goto_columns)}">GOTO</th>')
        lines.append('</tr>')

        # Second header row with individual symbols
        lines.append('<tr>')
        for symbol in action_columns + goto_columns:
            lines.append(f'<th class="grammar-table-header" scope="col">{html.escape(symbol)}</th>')
        lines.append('</tr>')

        lines.append('</thead>')
        return '\n'.join(lines)

    def _generate_table_row(self, table, state_id: int,
                            action_columns: List[str], goto_columns: List[str]) -> str:
        """Generate a single table row for the given state."""
        lines = []
        lines.append('<tr>')
        lines.append(f'<th class="grammar-table-cell grammar-table-cell-primary" scope="row">{state_id}</th>')

        for symbol in action_columns + goto_columns:
            formatted_action = self._format_action(table.get(state_id, symbol))
            lines.append(f'<td class="grammar-table-cell">{formatted_action}</td>')

        lines.append('</tr>')
        return '\n'.join(lines)

    def _format_action(self, action) -> str:
        """Format a table entry for HTML display."""
        if action.action_type == ActionType.ERROR:
            return ''

        # Conflicts keep every competing action visible
        if action.action_type == ActionType.CONFLICT:
            formatted_actions = []
            for alternative in action.alternatives:
                formatted_actions.append(
                    f'<span class="conflict-action" title="{html.escape(str(alternative))}">{html.escape(alternative.cell())}</span>'
                )
            return '<span class="grammar-action-conflict">' + ' / '.join(formatted_actions) + '</span>'

        cell = html.escape(action.cell())
        title = html.escape(str(action))
        if action.action_type == ActionType.SHIFT:
            return f'<span class="grammar-action-shift" title="{title}">{cell}</span>'
        elif action.action_type == ActionType.REDUCE:
            return f'<span class="grammar-action-reduce" title="{title}">{cell}</span>'
        elif action.action_type == ActionType.ACCEPT:
            return f'<span class="grammar-action-accept" title="{title}">{cell}</span>'
        return f'<span class="grammar-action-goto">{cell}</span>'

    def _generate_empty_table_html(self, message: str) -> str:
        """Generate HTML for an empty table with a message."""
        html_lines = []
        html_lines.append(f'<div class="{self.config.error_css_classes}">')
        html_lines.append(f'<p>{html.escape(message)}</p>')
        html_lines.append('</div>')
        return '\n'.join(html_lines)


class DOTGenerator:
    """Generates DOT format output for the LR(0) automaton."""

    def __init__(self, config: Optional[VisualizationConfig] = None):
        self.config = config or VisualizationConfig()

    def generate_automaton_dot(self, automaton, title: str = "LR(0) Automaton") -> str:
        """
        Generate DOT format representation of an LR(0) automaton.

        Args:
            automaton: SLRAutomaton object
            title: Title for the graph

        Returns:
            DOT format string
        """
        if not automaton.states:
            return self._generate_empty_dot(title, "Automaton has no states")

        lines = []

        # Graph header
        lines.append(f'digraph "{self._escape_dot_string(title)}" {{')
        lines.append('  rankdir=LR;')
        lines.append('  node [shape=box, fontname="Courier New", fontsize=10];')
        lines.append('  edge [fontname="Arial", fontsize=9];')

        # Add states
        for state in automaton.states:
            state_label = self._format_state_label(state)
            if state.state_id == automaton.start_state_id:
                lines.append(f'  state{state.state_id} [label="{state_label}", style=bold];')
            else:
                lines.append(f'  state{state.state_id} [label="{state_label}"];')

        # Add transitions
        for source, target, symbol in automaton.transition_triples():
            escaped_symbol = self._escape_dot_string(symbol)
            lines.append(f'  state{source} -> state{target} [label="{escaped_symbol}"];')

        lines.append('}')

        return '\n'.join(lines)

    def _format_state_label(self, state) -> str:
        """Format a state for DOT display; lines are joined with a left-justified break."""
        if self.config.compact_mode:
            return str(state.state_id)

        limit = self.config.max_state_label_items
        items = state.sorted_items()
        items_text = [self._escape_dot_string(str(item)) for item in items[:limit]]
        if len(items) > limit:
            items_text.append("...")

        return f"State {state.state_id}\\l" + "".join(text + "\\l" for text in items_text)

    def _generate_empty_dot(self, title: str, message: str) -> str:
        lines = []
        lines.append(f'digraph "{self._escape_dot_string(title)}" {{')
        lines.append(f'  empty [label="{self._escape_dot_string(message)}", shape=box, color=red];')
        lines.append('}')
        return '\n'.join(lines)

    def _escape_dot_string(self, text: str) -> str:
        """Escape a string for use in DOT format."""
        if not text:
            return ""

        text = str(text)
        text = text.replace('\\', '\\\\')
        text = text.replace('"', '\\"')
        text = text.replace('\n', '\\n')
        text = text.replace('\t', '\\t')
        text = text.replace('\r', '\\r')

        return text


class ErrorMessageFormatter:
    """Formats error messages with proper styling and context."""

    def __init__(self, config: Optional[VisualizationConfig] = None):
        self.config = config or VisualizationConfig()

    def format_generation_error(self, error_message: str) -> str:
        """
        Format a grammar/generation error message.

        Args:
            error_message: The error message

        Returns:
            Formatted HTML error message
        """
        html_lines = []

        if self.config.include_inline_styles:
            html_lines.append(self._generate_error_styles())

        html_lines.append(f'<div class="{self.config.error_css_classes}">')
        html_lines.append('<h4>Grammar Error</h4>')
        for line in error_message.splitlines():
            html_lines.append(f'<p class="error-text">{html.escape(line)}</p>')
        html_lines.append('</div>')

        return '\n'.join(html_lines)

    def format_conflict_report(self, conflicts: List) -> str:
        """
        Format a conflict report as HTML.

        Args:
            conflicts: List of Conflict objects

        Returns:
            Formatted HTML conflict report
        """
        if not conflicts:
            return '<div class="no-conflicts">No conflicts detected: the grammar is SLR(1).</div>'

        html_lines = []

        if self.config.include_inline_styles:
            html_lines.append(self._generate_error_styles())

        html_lines.append('<div class="conflict-report">')
        html_lines.append(f'<h4>Grammar Conflicts ({len(conflicts)} found)</h4>')

        for i, conflict in enumerate(conflicts, 1):
            html_lines.append('<div class="conflict-item">')
            html_lines.append(f'<h5>Conflict {i}: {html.escape(conflict.conflict_type)}</h5>')
            html_lines.append(f'<p><strong>State:</strong> {conflict.state_id}</p>')
            html_lines.append(f'<p><strong>Symbol:</strong> {html.escape(conflict.symbol)}</p>')
            html_lines.append(f'<p><strong>Description:</strong> {html.escape(conflict.description)}</p>')

            if conflict.actions:
                html_lines.append('<p><strong>Conflicting Actions:</strong></p>')
                html_lines.append('<ul>')
                for action in conflict.actions:
                    html_lines.append(f'<li>{html.escape(action)}</li>')
                html_lines.append('</ul>')

            html_lines.append('</div>')

        html_lines.append('</div>')

        return '\n'.join(html_lines)

    def format_warnings(self, warnings: List[str]) -> str:
        if not warnings:
            return ''
        items = ''.join(f'<li>{html.escape(warning)}</li>' for warning in warnings)
        return f'<div class="grammar-warnings"><h4>Warnings</h4><ul>{items}</ul></div>'

    def _generate_error_styles(self) -> str:
        """Generate inline CSS styles for error messages."""
        return """
<style>
.error-message {
    color: #cc0000;
    background-color: #ffeeee;
    border: 1px solid #cc0000;
    border-radius: 4px;
    padding: 10px;
    margin: 10px 0;
    font-family: Arial, sans-serif;
}

.error-text {
    font-weight: bold;
    margin: 5px 0;
}

.conflict-report {
    background-color: #fff8e1;
    border: 1px solid #ff9800;
    border-radius: 4px;
    padding: 10px;
    margin: 10px 0;
}

.conflict-item {
    margin: 10px 0;
    padding: 8px;
    background-color: #ffffff;
    border-left: 3px solid #ff9800;
}

.no-conflicts {
    color: #4caf50;
    font-weight: bold;
    padding: 10px;
    background-color: #e8f5e8;
    border: 1px solid #4caf50;
    border-radius: 4px;
}
</style>
"""


class VisualizationGenerator:
    """Main visualization generator that combines all formatting capabilities."""

    def __init__(self, config: Optional[VisualizationConfig] = None):
        self.config = config or VisualizationConfig()
        self.table_generator = HTMLTableGenerator(self.config)
        self.dot_generator = DOTGenerator(self.config)
        self.error_formatter = ErrorMessageFormatter(self.config)

    def generate_complete_visualization(self, result) -> Dict[str, str]:
        """
        Generate visualization output for every artifact of a generation run.

        Args:
            result: SLRGenerationResult

        Returns:
            Dictionary with keys: 'tables_html', 'automaton_dot',
            'conflicts_html', 'warnings_html'
        """
        return {
            'tables_html': self.generate_parse_table_html(result.table),
            'automaton_dot': self.generate_automaton_dot(result.automaton),
            'conflicts_html': self.error_formatter.format_conflict_report(result.conflicts),
            'warnings_html': self.error_formatter.format_warnings(result.warnings),
        }

    def generate_parse_table_html(self, table) -> str:
        """Generate HTML for the parsing table."""
        return self.table_generator.generate_parse_table_html(table)

    def generate_automaton_dot(self, automaton, title: str = "LR(0) Automaton") -> str:
        """Generate DOT format for the automaton."""
        return self.dot_generator.generate_automaton_dot(automaton, title)
