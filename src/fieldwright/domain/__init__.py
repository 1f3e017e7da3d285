"""Domain layer — field definitions, error codes, validation rules, ports.

This layer depends only on stdlib and pydantic.
It must never import from fields, services, commands, or config.
"""
