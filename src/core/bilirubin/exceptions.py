"""Errors raised by the bilirubin calculator."""


class BilirubinError(Exception):
    """Base class for calculator errors."""


class InvalidCategoryError(BilirubinError, ValueError):
    """Treatment category is neither phototherapy nor exchange."""

    def __init__(self, category):
        self.category = category
        super().__init__(
            f"Unknown treatment category {category!r}; "
            "expected 'phototherapy' or 'exchange'"
        )


class InvalidCurveError(BilirubinError):
    """A reference curve violates its ordering or size invariants."""
