# src/syncplan/core/validation/__init__.py
"""
Validação semântica da declaração de sincronização.

Componentes:
    - paths     → segurança de caminhos relativos
    - names     → formatos de repositório e branch
    - targets   → targets, mapeamentos, globs e labels
    - validator → orquestrador fail-fast (`validate_config`)
    - context   → trace estruturado, warnings e cancelamento cooperativo
"""

from .context import ValidationContext
from .names import validate_branch_name, validate_branch_prefix, validate_repo_name
from .paths import check_path, normalize_destination
from .targets import (
    validate_directory_mapping,
    validate_file_mapping,
    validate_glob_pattern,
    validate_pr_labels,
    validate_target,
)
from .validator import validate_config

__all__ = [
    "ValidationContext",
    "check_path",
    "normalize_destination",
    "validate_branch_name",
    "validate_branch_prefix",
    "validate_config",
    "validate_directory_mapping",
    "validate_file_mapping",
    "validate_glob_pattern",
    "validate_pr_labels",
    "validate_repo_name",
    "validate_target",
]
