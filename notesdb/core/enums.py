# notesdb/core/enums.py
"""
Canonical enums for the persistence layer.
"""
from enum import Enum


class StepErrorPolicy(str, Enum):
    """What the migration runner does when a step fails."""
    CONTINUE = "continue"   # log and keep going (normal startup)
    ABORT = "abort"         # raise on first failure (reinitialize)
