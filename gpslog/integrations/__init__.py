"""
Integrations subpackage for input containers (plain files, zip archives).
"""

from .archive import (
    guess_file_type,
    open_input,
    open_zip,
)

__all__ = [
    "guess_file_type",
    "open_input",
    "open_zip",
]
