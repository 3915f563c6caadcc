"""Application layer: services orchestrating documents and chat."""
