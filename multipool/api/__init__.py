"""HTTP API for the pool manager."""
