"""
Domain layer for the bundle orders service.

This layer contains business entities, value objects, and domain logic
following Domain-Driven Design principles.
"""
