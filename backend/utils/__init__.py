"""Configuration, auth, validation, bulk and pagination helpers."""
