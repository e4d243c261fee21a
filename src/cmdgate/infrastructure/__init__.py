"""Infrastructure layer — SQLAlchemy engines and connection adapters.

This layer depends on core contracts and third-party libs (SQLAlchemy,
aiosqlite). It must never import from services, commands, or output.
"""
