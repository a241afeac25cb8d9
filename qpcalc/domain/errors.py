"""Recoverable error conditions of the calculator core."""


class InvalidInput(ValueError):
    """Price or quantity is empty, non-numeric, non-finite or not positive."""


class MissingRate(LookupError):
    """A calculation was requested before any base rate was configured."""


class UnknownUnit(KeyError):
    """Unit symbol not in the catalog, or not part of the requested category."""
