"""Service layer: stores, delivery, rate limiting and the auth orchestration."""
