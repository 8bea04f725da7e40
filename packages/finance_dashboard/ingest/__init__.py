"""Ingestion of aggregation-API and dashboard JSON payloads."""
