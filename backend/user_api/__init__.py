"""User API Package - CRUD service for a single `users` table.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
