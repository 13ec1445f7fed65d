"""
Session token package.

Issues and validates the short-lived HS256 session tokens handed out after
a successful login. Tokens are self-contained: there is no server-side
session store and no revocation list, expiry is the only way out.
"""
