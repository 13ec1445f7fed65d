"""Auth service for the WebApp backend."""
