"""qtodo: a local to-do list with due-date alarms."""

__version__ = "0.1.0"
