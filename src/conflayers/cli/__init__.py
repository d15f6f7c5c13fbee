"""
conflayers CLI package.

- _dispatcher: command discovery and the ``conflayers`` entry point
- _output: output formatting (text, JSON and YAML modes)
- _args: shared argument helpers
"""
from ._args import add_json_flag, add_load_options, options_from_args
from ._dispatcher import main
from ._output import OutputFormatter, format_value

__all__ = [
    "OutputFormatter",
    "format_value",
    "add_json_flag",
    "add_load_options",
    "options_from_args",
    "main",
]
