"""
param-linker

Associates infrastructure templates with the parameters files that supply
their input values, by content sniffing, filename heuristics and a layered
settings store.
"""

__version__ = "0.1.0"

from param_linker.core.association_store import AssociationStore
from param_linker.core.workflow import ParameterFileWorkflow, Session, TemplateDocument

__all__ = [
    "AssociationStore",
    "ParameterFileWorkflow",
    "Session",
    "TemplateDocument",
]
