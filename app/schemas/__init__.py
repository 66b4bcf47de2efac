"""Pydantic request schemas, one per mutating endpoint."""
