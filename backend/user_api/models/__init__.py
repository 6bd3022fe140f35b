"""ORM Models - SQLAlchemy declarative models.

Design Decisions:
    - Models imported here so Base.metadata is populated before create_all runs
"""

from user_api.models.user import User  # noqa: F401
