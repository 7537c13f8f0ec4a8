"""Sample symbol datasets shipped with the service."""
