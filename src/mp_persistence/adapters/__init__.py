"""Adapters – concrete query executors (in-memory, SQLAlchemy)."""
