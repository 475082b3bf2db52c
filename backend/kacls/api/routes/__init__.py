"""Route Modules: one file per concern (discovery, key wrapping).

Invariants:
    - Each module defines its own APIRouter
    - Routes never contain protocol logic (delegate to services/core)
"""
