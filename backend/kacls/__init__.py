"""KACLS Application Package: key access control list front door for client-side encryption.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
