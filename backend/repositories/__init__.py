"""Persistence functions over SQLAlchemy sessions."""
