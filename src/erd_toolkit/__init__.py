"""Interactive entity-relationship schema designer core."""

__version__ = "0.1.0"
