"""HTTP API for the QR token service."""
