"""
Login validation package.

Glues the launch payload pipeline to the session token codec:

- Parsing, verifying and extracting the identity from a launch payload.
- Issuing the session token returned by the login endpoint.
- Validating presented session tokens for protected routes.

Every failure surfaces as an AuthenticationError subclass; the HTTP layer
turns all of them into the same generic 401.
"""
