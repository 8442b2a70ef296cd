"""API routers and error handling."""
