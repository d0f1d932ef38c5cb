"""
infrastructure package

Shared base interfaces for the slot-puzzle solver.

Modules:
    - interfaces: BasicConstraint and SearchObserver base classes
"""

from infrastructure.interfaces import BasicConstraint, SearchObserver

__all__ = [
    "BasicConstraint",
    "SearchObserver",
]
