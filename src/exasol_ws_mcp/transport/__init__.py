"""Frame transports."""
