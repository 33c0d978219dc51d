"""
API Layer

HTTP routes, dependencies and middleware.
"""
