"""Infrastructure Layer: external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - External clients exposed through core.boundary_protocols types
"""
