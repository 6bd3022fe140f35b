"""API Layer - FastAPI routes, middleware, dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Handlers reach the store only through the injected UserRepository
"""
