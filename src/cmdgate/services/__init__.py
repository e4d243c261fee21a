"""Service layer — gateway-backed operations returning ServiceResult.

Services may import from core and infrastructure layers.
They must never import from commands or output.
"""
