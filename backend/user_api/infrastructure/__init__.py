"""Infrastructure Layer - store client, SQL repository, and logging.

Invariants:
    - Infrastructure never imports from the API layer
    - All SQLAlchemy failures leave this layer as DatabaseError
"""
