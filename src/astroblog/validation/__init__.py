"""
astroblog.validation

Input validation for write endpoints.

Responsibilities:
- Declarative schemas for posts, tags and comments.
- A non-raising `validate()` returning `Valid | Invalid` with field-level violations.
"""

from astroblog.validation.core import FieldViolation, Invalid, Valid, validate, violations_from

__all__ = ["FieldViolation", "Invalid", "Valid", "validate", "violations_from"]
