"""
Request-scoped authentication for protected routes.

Handlers obtain the caller's identity only through ``require_identity``;
subject ids from request bodies or query strings are never trusted.
"""
