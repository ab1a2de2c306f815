"""Parameter-file association engine."""

from param_linker.core.association_store import AssociationStore
from param_linker.core.candidate_finder import (
    PossibleParamsFile,
    find_available_parameters_files,
)
from param_linker.core.content_sniffer import is_parameters_file
from param_linker.core.global_state import DontAskList, GlobalState, reset_global_state
from param_linker.core.name_matcher import is_likely_matching_params_file
from param_linker.core.paths import normalize_path
from param_linker.core.scopes import (
    ConfigurationTarget,
    MemoryScope,
    ScopeStack,
    YamlFileScope,
    build_scope_stack,
)
from param_linker.core.selection import build_selection_items, propose_association
from param_linker.core.workflow import (
    ParameterFileWorkflow,
    ReconcileState,
    SelectionOutcome,
    Session,
    TemplateDocument,
)

__all__ = [
    "AssociationStore",
    "ConfigurationTarget",
    "DontAskList",
    "GlobalState",
    "MemoryScope",
    "ParameterFileWorkflow",
    "PossibleParamsFile",
    "ReconcileState",
    "ScopeStack",
    "SelectionOutcome",
    "Session",
    "TemplateDocument",
    "YamlFileScope",
    "build_scope_stack",
    "build_selection_items",
    "find_available_parameters_files",
    "is_likely_matching_params_file",
    "is_parameters_file",
    "normalize_path",
    "propose_association",
    "reset_global_state",
]
