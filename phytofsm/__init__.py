"""Build validated hierarchical UML state machines and run them against user-supplied actions."""

__version__ = "0.7.0"