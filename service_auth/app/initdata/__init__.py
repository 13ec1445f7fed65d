"""
Launch payload (init data) verification package.

The client presents the signed query string it received from the
messaging platform's in-app browser. Processing is a strict pipeline:

- parser: raw query string -> FieldSet
- verifier: FieldSet -> VerifiedFieldSet (HMAC check against the bot token)
- identity: VerifiedFieldSet -> VerifiedIdentity

Every step is a pure function; nothing here performs IO or holds state.
"""
