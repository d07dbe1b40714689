"""
Infrastructure layer - adapters for the incid editing core.

This layer contains:
- structlog configuration (observability)
- The YAML classification source adapter
- In-memory stubs of the repository and change notifier ports

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""
