"""Storage-event driven provisioning and ingestion launch for cache tables."""

__version__ = "0.1.0"
