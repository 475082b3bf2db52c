"""Core Layer: pure protocol logic, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic
"""
