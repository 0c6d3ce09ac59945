"""
Wrappers around the external notebook converter.

The converter (nbconvert) is treated as an opaque tool: qopublish only builds
its command lines and watches its exit status.
"""

from .commands import (
    converter_environment,
    derive_output_names,
    markdown_command,
    script_command,
)
from .process import ConverterRunner, kill_process_tree

__all__ = [
    "ConverterRunner",
    "converter_environment",
    "derive_output_names",
    "kill_process_tree",
    "markdown_command",
    "script_command",
]
