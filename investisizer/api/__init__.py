"""
REST API for Investisizer.

A stateless FastAPI surface over the projection engine.
"""
