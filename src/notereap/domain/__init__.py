"""Domain layer — documents, references, scopes, and rewrite rules.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
