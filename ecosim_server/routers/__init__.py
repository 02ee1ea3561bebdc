"""API routers for the game server."""
