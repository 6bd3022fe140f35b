"""Core - errors, request context, and boundary protocols. No IO lives here."""
