"""Workflow orchestrators composing ingest, persistence and matching."""
