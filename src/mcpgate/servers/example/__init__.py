"""Example collaborator group."""
