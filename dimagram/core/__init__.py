"""Core services: album store, ingestion, remote sync, CDN, publisher."""
