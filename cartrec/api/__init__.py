"""FastAPI application module for CartRec.

This module contains the FastAPI application, route handlers, and API
endpoints for the suggestion service. Catalog and order history are read
through collaborator objects so the scoring core never touches storage.
"""
