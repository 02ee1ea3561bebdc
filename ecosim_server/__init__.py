"""HTTP and persistence collaborators for the ecosystem game."""
