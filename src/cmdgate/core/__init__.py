"""Gateway core: contracts, cancellation, and the CommandGateway itself."""
