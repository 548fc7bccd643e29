"""FastAPI application module for the Local Food Lovers Network.

This module contains the FastAPI application, route handlers, and request
schemas for the recipe, review and favorite endpoints.
"""
