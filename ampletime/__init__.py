"""Time tracking reports for notes: tables, pie and radar charts."""

__version__ = "0.1.0"
