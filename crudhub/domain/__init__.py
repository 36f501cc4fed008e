"""
Domain layer: entities, value objects, business rules and repository ports.
"""
