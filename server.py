import os
import sys
import traceback
from flask import Flask, request, jsonify

from slr_parser import GeneratorConfig, SLRParserVisualizer

app = Flask(__name__)

# --- Server settings, overridable from the environment ---
HOST = os.environ.get('SLR_SERVER_HOST', '127.0.0.1')
PORT = int(os.environ.get('SLR_SERVER_PORT', '5000'))
DEBUG = os.environ.get('SLR_SERVER_DEBUG') == '1'
MAX_STATES = int(os.environ.get('SLR_MAX_STATES', str(GeneratorConfig.max_states)))

# --- Request Helpers ---
def read_request_fields():
    """Return (grammar, start_symbol, error) from the JSON body."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, None, "Request body must be a JSON object"

    grammar_input = data.get('grammar')
    if not grammar_input:
        return None, None, "No grammar provided"
    if not isinstance(grammar_input, str):
        return None, None, "Grammar must be a string"

    start_symbol = data.get('start_symbol') or None
    if start_symbol is not None and not isinstance(start_symbol, str):
        return None, None, "Start symbol must be a string"
    return grammar_input, start_symbol, None

def make_visualizer():
    return SLRParserVisualizer(GeneratorConfig(max_states=MAX_STATES))

# --- Flask Endpoints ---

@app.route('/parse-grammar-productions', methods=['POST'])
def parse_grammar_productions():
    """
    Parse grammar input and return the numbered productions and symbols.

    Lets a client show the augmented grammar and pick a start symbol
    before building the table.
    """
    grammar_input, _, request_error = read_request_fields()
    if request_error:
        return jsonify({"error": request_error}), 400

    try:
        print("--- Parsing Grammar Productions ---", file=sys.stderr)

        result = make_visualizer().parse_productions(grammar_input)

        if result['success']:
            print("--- Production Parsing SUCCEEDED ---", file=sys.stderr)
            print(f"Found {len(result['productions'])} productions", file=sys.stderr)
            print(f"Potential start symbols: {result['start_symbols']}", file=sys.stderr)
            return jsonify(result)
        else:
            print("--- Production Parsing FAILED ---", file=sys.stderr)
            print(f"Error: {result['error']}", file=sys.stderr)
            return jsonify(result), 400

    except Exception as e:
        print(f"--- UNEXPECTED Python Error: {e} ---", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        return jsonify({"error": f"Unexpected server error: {e}", "error_type": "system_error"}), 500

@app.route('/build-parse-table', methods=['POST'])
def build_parse_table():
    """
    Build the SLR(1) parse table for a grammar.

    Accepts the grammar text and an optional start symbol. Returns the
    states, transitions, table grid, conflicts, and HTML/DOT renderings.
    Conflicts do not fail the request: the table is returned with every
    conflicting cell flagged.
    """
    grammar_input, start_symbol, request_error = read_request_fields()
    if request_error:
        return jsonify({"error": request_error}), 400

    try:
        print("--- Building Parse Table ---", file=sys.stderr)
        if start_symbol:
            print(f"Start symbol: {start_symbol}", file=sys.stderr)

        result = make_visualizer().process_grammar(grammar_input, start_symbol)

        if result['success']:
            print("--- Parse Table Building SUCCEEDED ---", file=sys.stderr)
            print(f"States created: {result['table_info']['states_count']}", file=sys.stderr)
            print(f"Action entries: {result['table_info']['action_entries']}", file=sys.stderr)
            print(f"Goto entries: {result['table_info']['goto_entries']}", file=sys.stderr)
            if result['conflicts']:
                print(f"Conflicts detected: {len(result['conflicts'])}", file=sys.stderr)
            return jsonify(result)
        else:
            print("--- Parse Table Building FAILED ---", file=sys.stderr)
            print(f"Error: {result['error']}", file=sys.stderr)
            return jsonify(result), 400

    except Exception as e:
        print(f"--- UNEXPECTED Python Error: {e} ---", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        return jsonify({"error": f"Unexpected server error: {e}", "error_type": "system_error"}), 500

# --- Main Execution ---
if __name__ == '__main__':
    print("--- SLR Parser Generator Server ---")
    print(f"Running on http://{HOST}:{PORT}")
    print("-" * 34)
    app.run(host=HOST, debug=DEBUG, port=PORT, use_reloader=False)
