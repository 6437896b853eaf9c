from __future__ import annotations


class InvalidInput(ValueError):
    """Raised when mesh data or build parameters are malformed.

    Validation runs before the node store exists, so a build either fails
    with this error or returns a complete tree.
    """


__all__ = ["InvalidInput"]
