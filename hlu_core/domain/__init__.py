"""
Domain layer - pure business logic for incid editing.

This layer contains:
- Domain models (incid aggregate, child records, reference rows)
- Domain services (selector, collection, reconciler, tracker, validator)
- Domain exceptions

This layer must NOT import from application, infrastructure, config
or bootstrap.
"""

from hlu_core.domain.exceptions import HluCoreError

__all__: list[str] = ["HluCoreError"]
