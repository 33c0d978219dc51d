"""
Identifier Validation - Security Layer

Gates every store operation on the resource identifier before any
filesystem access happens. The grammar keeps identifiers safe to use as
file names: no separators, no leading dot, no traversal.

Grammar:
    [A-Za-z0-9] followed by zero or more of [A-Za-z0-9-_.]
"""

import re
from typing import Optional

from config_server.exceptions import InvalidIdentifierError, MissingIdentifierError

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9\-_.]*")


def is_valid_identifier(identifier: Optional[str]) -> bool:
    """
    Check an identifier against the grammar.

    Args:
        identifier: Candidate identifier

    Returns:
        True if the identifier is present and well-formed
    """
    if identifier is None or not identifier.strip():
        return False
    return IDENTIFIER_PATTERN.fullmatch(identifier) is not None


def validate_identifier(identifier: Optional[str], kind: Optional[str] = None) -> str:
    """
    Validate an identifier, distinguishing missing from malformed.

    Args:
        identifier: Candidate identifier
        kind: Content kind, only used to annotate the raised error

    Returns:
        The identifier, unchanged

    Raises:
        MissingIdentifierError: If identifier is None, empty or whitespace only
        InvalidIdentifierError: If identifier does not match the grammar

    Example:
        >>> validate_identifier("test-_V1.1")
        'test-_V1.1'
        >>> validate_identifier("../etc/passwd")  # Raises InvalidIdentifierError
    """
    if identifier is None or not identifier.strip():
        raise MissingIdentifierError("Missing required 'id' parameter", kind=kind)

    if IDENTIFIER_PATTERN.fullmatch(identifier) is None:
        raise InvalidIdentifierError(
            f"Invalid identifier format: {identifier}",
            kind=kind,
            resource_id=identifier
        )

    return identifier
