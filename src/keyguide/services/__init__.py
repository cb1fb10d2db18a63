"""Service layer — resolution, candidate building, and ranking.

Services may import from the domain layer.
They must never import from commands or output.
"""
