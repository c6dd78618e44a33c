"""Core event primitives (the room event envelope and its closed set of kinds).

Kept free of FastAPI and Redis concerns so it can be reused by the publisher, observers, and tests.
"""
