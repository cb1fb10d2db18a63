"""Domain layer — types, rules, key combos, and bindings.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, output, or config.
"""
