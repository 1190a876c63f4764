"""Settings, identity, time formatting, retry, TLS and metric helpers for service health probing."""

__version__ = "1.7.0"