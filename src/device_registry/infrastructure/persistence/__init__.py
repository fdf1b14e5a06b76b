"""Persistence layer built on SQLAlchemy 2.0 async."""
