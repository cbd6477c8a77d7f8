"""Pydantic models and value types shared across deflink."""
