"""
Auth Service package.

Exchanges a signed launch payload from the messaging platform's in-app
browser for a short-lived session token, and admits later requests that
present that token.

- app.main: Application entrypoint that wires routes and lifecycle.
- app.initdata: Launch payload parsing, signature check, identity extraction.
- app.session: Session token issue/validate.
- app.validation: Login pipeline and request/response models.
- app.domain: Request-scoped authentication dependency.

Design notes:
- Module import must not read configuration or perform IO; secrets are
  loaded once when the service object is built.
- Use the shared/ utilities for logging, metrics, errors and config.
- Stateless: no session store, no revocation list.
"""
