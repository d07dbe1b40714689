"""Application ports - interfaces for infrastructure adapters.

Available ports:
- ClassificationSourceProtocol: loads the classification reference tables
- IncidRepositoryProtocol: loads and saves incid aggregates
- ChangeNotifierProtocol: tells the host which aggregates changed
"""

from hlu_core.application.ports.change_notifier import ChangeNotifierProtocol
from hlu_core.application.ports.classification_source import (
    ClassificationSourceProtocol,
)
from hlu_core.application.ports.incid_repository import IncidRepositoryProtocol

__all__: list[str] = [
    "ChangeNotifierProtocol",
    "ClassificationSourceProtocol",
    "IncidRepositoryProtocol",
]
