"""
Domain layer - Employee model and domain errors.

No dependencies on infrastructure or frameworks.
"""
