"""Encrypted QR access tokens: AES-256-GCM payloads rendered as QR codes."""

__version__ = "0.1.0"
