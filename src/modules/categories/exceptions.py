"""Category domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class InvalidCategory(Exception):
    """The category name is blank or too long."""


class CategoryNotFound(Exception):
    """The requested category does not exist."""
