"""
Application layer - incid editing use cases.

This layer contains:
- The IncidEditorService orchestrating one loaded incid
- Port definitions (interfaces for infrastructure adapters)
- The edit context shared with the logging configuration

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure, config, bootstrap
"""
