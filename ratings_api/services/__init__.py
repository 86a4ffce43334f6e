"""Business logic services.

Services contain all business logic and are called by routes.
They take the database session explicitly and raise ratings_api.errors
exceptions; they never build HTTP responses.
"""
