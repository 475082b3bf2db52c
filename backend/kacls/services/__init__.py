"""Services Layer: imperative shell around the pure protocol core.

Invariants:
    - Services orchestrate core functions and boundary protocols; no HTTP types here
"""
