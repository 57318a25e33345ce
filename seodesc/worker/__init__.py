"""Batch processing package.

Contains the generation retry loop and the batch orchestrator that the API
routers invoke per request.
"""
