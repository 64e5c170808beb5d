"""
ui/
---
Input boundary of the web layer.

    from ui import parse_inputs, example_payload, random_payload, InputError
"""

from ui.inputs import (
    EXAMPLES,
    InputError,
    example_payload,
    parse_inputs,
    random_payload,
)

__all__ = [
    "EXAMPLES",
    "InputError",
    "example_payload",
    "parse_inputs",
    "random_payload",
]
