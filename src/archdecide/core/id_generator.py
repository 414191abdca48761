"""
Centralized ID generator for archdecide.

Error instances get a hex32 id so a reported failure can be correlated
with the matching debug.log entry.
"""

import re
import secrets

_HEX32 = re.compile(r"^[0-9a-f]{32}$")


def generate_id() -> str:
    """Generate a random hex32 identifier."""
    return secrets.token_hex(16)


def is_valid_id(id_str: str) -> bool:
    """Check that a string is a hex32 identifier."""
    return isinstance(id_str, str) and bool(_HEX32.match(id_str))
