"""Core Layer - pure ban domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or models/
    - All functions are pure and deterministic (time is always passed in)
"""
