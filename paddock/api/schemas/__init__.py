"""Pydantic schemas for the Paddock API."""
