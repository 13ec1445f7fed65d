"""
Shared utilities for the WebApp auth service.

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton (middleware, health, error mapping)
- test_helpers: Factories for signed launch payloads used by tests

Do not import from service_* packages into shared/.
"""
