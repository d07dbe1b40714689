"""HLU incid editing core.

Derivation, reconciliation, dirty tracking and validation for incid
habitat classification records.

Layers:
- domain: models, errors and the pure domain services
- application: ports and the incid editor service
- infrastructure: logging, the YAML reference adapter and stubs
- config: editor configuration from the environment
- bootstrap: wiring helpers
"""

__version__ = "0.1.0"
