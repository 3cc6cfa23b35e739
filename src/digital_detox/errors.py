"""
Exceptions raised by the estimation and progression APIs.

Both derive from ValueError so callers that already guard numeric input
with ``except ValueError`` keep working.
"""


class InvalidArgumentError(ValueError):
    """A quantity is negative, non-finite, or otherwise out of range."""


class UnknownCategoryError(ValueError):
    """A category, tier, action or identifier is not recognized."""
