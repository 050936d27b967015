# src/syncplan/core/config/__init__.py

"""
Camada de configuração do syncplan.

Este pacote contém o modelo de dados da declaração de sincronização e os
utilitários responsáveis por carregá-la, adaptá-la e completá-la antes da
validação.

Responsabilidades do pacote:
    - Decodificação estrita do documento YAML (`schema`)
    - Adaptação dos formatos legados para grupos (`legacy`)
    - Cascateamento de defaults (`defaults`)
    - Resolução de listas reutilizáveis (`lists`)
    - Hierarquia de exceções (`errors`)

Limites explícitos:
    - Não valida semântica (ver `syncplan.core.validation`)
    - Não executa sincronização
"""

from .defaults import (
    DEFAULT_BRANCH,
    DEFAULT_BRANCH_PREFIX,
    DEFAULT_EXCLUSIONS,
    DEFAULT_PR_LABELS,
    apply_defaults,
    apply_directory_defaults,
    default_exclusions,
)
from .legacy import ensure_groups
from .lists import ListRegistry, resolve_list_references
from .loader import load, load_from_reader
from .schema import (
    SUPPORTED_VERSION,
    Config,
    ConfigLayout,
    ConflictResolution,
    DefaultConfig,
    DirectoryList,
    DirectoryMapping,
    FileList,
    FileMapping,
    GlobalConfig,
    Group,
    ModuleConfig,
    SourceConfig,
    SourceMapping,
    SourceTargetPair,
    TargetConfig,
    Transform,
    TriState,
    decode_config,
)

__all__ = [
    "DEFAULT_BRANCH",
    "DEFAULT_BRANCH_PREFIX",
    "DEFAULT_EXCLUSIONS",
    "DEFAULT_PR_LABELS",
    "SUPPORTED_VERSION",
    "Config",
    "ConfigLayout",
    "ConflictResolution",
    "DefaultConfig",
    "DirectoryList",
    "DirectoryMapping",
    "FileList",
    "FileMapping",
    "GlobalConfig",
    "Group",
    "ListRegistry",
    "ModuleConfig",
    "SourceConfig",
    "SourceMapping",
    "SourceTargetPair",
    "TargetConfig",
    "Transform",
    "TriState",
    "apply_defaults",
    "apply_directory_defaults",
    "decode_config",
    "default_exclusions",
    "ensure_groups",
    "load",
    "load_from_reader",
    "resolve_list_references",
]
