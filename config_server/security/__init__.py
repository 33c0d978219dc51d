"""
Security Layer

Input validation for resource identifiers.
"""

from .sanitization import (
    IDENTIFIER_PATTERN,
    is_valid_identifier,
    validate_identifier,
)

__all__ = [
    'IDENTIFIER_PATTERN',
    'is_valid_identifier',
    'validate_identifier',
]
