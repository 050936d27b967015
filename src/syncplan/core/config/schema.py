# src/syncplan/core/config/schema.py
"""
Schema canônico da declaração de sincronização (version 1).

Este módulo define o modelo de dados explícito do syncplan e a
decodificação estrita de um mapping YAML já parseado para esse modelo.

Modelo (alto nível):
    Config
      ├── groups: List[Group]            (formato canônico)
      ├── source / targets               (formato legado "flat")
      ├── mappings: List[SourceMapping]  (formato legado multi-source)
      ├── file_lists / directory_lists   (fragmentos reutilizáveis por ID)
      ├── global / defaults              (valores em cascata)
      └── conflict_resolution            (política multi-source)

Decisões arquiteturais:
    - Implementação com dataclasses, sem dependências de validação externas
    - Decodificação estrita: qualquer chave desconhecida rejeita o documento
    - Booleanos opcionais usam `TriState` para distinguir "não declarado"
      de "explicitamente false"
    - `exclude` distingue `None` (não declarado) de `[]` (explicitamente vazio)

Limites explícitos:
    - Não aplica defaults (ver `defaults.py`)
    - Não resolve referências de listas (ver `lists.py`)
    - Não valida semântica (ver `syncplan.core.validation`)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .errors import ConfigParseError, UnknownFieldError

SUPPORTED_VERSION = 1


class TriState(str, Enum):
    """
    Valor booleano opcional com três estados explícitos.

    Estados:
        - UNSET: não declarado no documento (o default se aplica)
        - TRUE / FALSE: declarado explicitamente
    """

    UNSET = "unset"
    TRUE = "true"
    FALSE = "false"

    @classmethod
    def from_value(cls, value: Optional[bool]) -> "TriState":
        if value is None:
            return cls.UNSET
        return cls.TRUE if value else cls.FALSE

    @property
    def is_set(self) -> bool:
        return self is not TriState.UNSET

    def resolve(self, default: bool) -> bool:
        if self is TriState.UNSET:
            return default
        return self is TriState.TRUE

    def to_value(self) -> Optional[bool]:
        if self is TriState.UNSET:
            return None
        return self is TriState.TRUE


class ConfigLayout(str, Enum):
    """Formato declarado no documento de origem."""

    GROUPS = "groups"
    FLAT = "flat"
    MAPPINGS = "mappings"


# ---------------------------------------------------------------------------
# Mapeamentos
# ---------------------------------------------------------------------------

@dataclass
class Transform:
    """Transformação de conteúdo (dado opaco, não interpretado aqui)."""

    repo_name: bool = False
    variables: Dict[str, str] = field(default_factory=dict)

    def clone(self) -> "Transform":
        return Transform(repo_name=self.repo_name, variables=dict(self.variables))


@dataclass
class FileMapping:
    src: str = ""
    dest: str = ""
    delete: bool = False


@dataclass
class ModuleConfig:
    """Configuração de sincronização versionada de um módulo (ex.: Go)."""

    type: str = ""
    version: str = ""
    check_tags: TriState = TriState.UNSET


@dataclass
class DirectoryMapping:
    """
    Mapeamento de diretório entre repositório fonte e target.

    Invariantes:
        - `exclude is None` significa "não declarado" e recebe a lista de
          exclusões padrão no cascateamento
        - `clone()` nunca compartilha listas, variáveis ou `module` com a origem
    """

    src: str = ""
    dest: str = ""
    exclude: Optional[List[str]] = None
    include_only: List[str] = field(default_factory=list)
    transform: Transform = field(default_factory=Transform)
    preserve_structure: TriState = TriState.UNSET
    include_hidden: TriState = TriState.UNSET
    module: Optional[ModuleConfig] = None
    delete: bool = False

    def clone(self) -> "DirectoryMapping":
        module = None
        if self.module is not None:
            module = ModuleConfig(
                type=self.module.type,
                version=self.module.version,
                check_tags=self.module.check_tags,
            )
        return DirectoryMapping(
            src=self.src,
            dest=self.dest,
            exclude=list(self.exclude) if self.exclude is not None else None,
            include_only=list(self.include_only),
            transform=self.transform.clone(),
            preserve_structure=self.preserve_structure,
            include_hidden=self.include_hidden,
            module=module,
            delete=self.delete,
        )


# ---------------------------------------------------------------------------
# Fontes, targets e grupos
# ---------------------------------------------------------------------------

@dataclass
class SourceConfig:
    repo: str = ""
    branch: str = ""
    id: str = ""

    @property
    def display_id(self) -> str:
        return self.id or self.repo


@dataclass
class GlobalConfig:
    """Configuração global: mesclada em todos os targets, nunca sobrescrita."""

    pr_labels: List[str] = field(default_factory=list)
    pr_assignees: List[str] = field(default_factory=list)
    pr_reviewers: List[str] = field(default_factory=list)
    pr_team_reviewers: List[str] = field(default_factory=list)

    def merged_with(self, other: "GlobalConfig") -> "GlobalConfig":
        return GlobalConfig(
            pr_labels=_union(self.pr_labels, other.pr_labels),
            pr_assignees=_union(self.pr_assignees, other.pr_assignees),
            pr_reviewers=_union(self.pr_reviewers, other.pr_reviewers),
            pr_team_reviewers=_union(self.pr_team_reviewers, other.pr_team_reviewers),
        )


@dataclass
class DefaultConfig:
    """Valores de fallback, aplicados apenas quando o campo não foi declarado."""

    branch_prefix: str = ""
    pr_labels: List[str] = field(default_factory=list)
    pr_assignees: List[str] = field(default_factory=list)
    pr_reviewers: List[str] = field(default_factory=list)
    pr_team_reviewers: List[str] = field(default_factory=list)


@dataclass
class TargetConfig:
    repo: str = ""
    branch: str = ""
    files: List[FileMapping] = field(default_factory=list)
    directories: List[DirectoryMapping] = field(default_factory=list)
    transform: Transform = field(default_factory=Transform)
    pr_labels: List[str] = field(default_factory=list)
    pr_assignees: List[str] = field(default_factory=list)
    pr_reviewers: List[str] = field(default_factory=list)
    pr_team_reviewers: List[str] = field(default_factory=list)
    file_list_refs: List[str] = field(default_factory=list)
    directory_list_refs: List[str] = field(default_factory=list)


@dataclass
class Group:
    """
    Unidade habilitável que liga uma fonte a um conjunto de targets.

    `files_only` é definido pelo adaptador do formato flat e impõe a regra
    mais estrita daquele formato (sem diretórios, ao menos um arquivo).
    """

    name: str = ""
    id: str = ""
    description: str = ""
    priority: int = 0
    depends_on: List[str] = field(default_factory=list)
    enabled: TriState = TriState.UNSET
    source: SourceConfig = field(default_factory=SourceConfig)
    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    defaults: DefaultConfig = field(default_factory=DefaultConfig)
    targets: List[TargetConfig] = field(default_factory=list)
    files_only: bool = False

    @property
    def is_enabled(self) -> bool:
        return self.enabled.resolve(True)


@dataclass
class SourceMapping:
    """Entrada do formato legado multi-source (`mappings`)."""

    source: SourceConfig = field(default_factory=SourceConfig)
    targets: List[TargetConfig] = field(default_factory=list)
    defaults: Optional[DefaultConfig] = None


@dataclass
class FileList:
    id: str = ""
    name: str = ""
    description: str = ""
    files: List[FileMapping] = field(default_factory=list)


@dataclass
class DirectoryList:
    id: str = ""
    name: str = ""
    description: str = ""
    directories: List[DirectoryMapping] = field(default_factory=list)


@dataclass
class ConflictResolution:
    strategy: str = ""
    priority: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SourceTargetPair:
    """Tupla (fonte, target, defaults efetivos) consumida pelo executor."""

    source: SourceConfig
    target: TargetConfig
    defaults: DefaultConfig
    global_config: GlobalConfig
    group_id: str


@dataclass
class Config:
    """
    Documento de configuração raiz.

    Ciclo de vida:
        - decodificado uma vez
        - mutado no lugar pelo cascateamento de defaults e pela resolução de listas
        - tratado como imutável após `validate()` bem-sucedido
    """

    version: int = 0
    groups: List[Group] = field(default_factory=list)
    source: Optional[SourceConfig] = None
    targets: List[TargetConfig] = field(default_factory=list)
    mappings: List[SourceMapping] = field(default_factory=list)
    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    defaults: DefaultConfig = field(default_factory=DefaultConfig)
    file_lists: List[FileList] = field(default_factory=list)
    directory_lists: List[DirectoryList] = field(default_factory=list)
    conflict_resolution: Optional[ConflictResolution] = None
    layout: ConfigLayout = ConfigLayout.GROUPS

    def get_groups(self) -> List[Group]:
        from .legacy import ensure_groups

        ensure_groups(self)
        return self.groups

    def is_group_based(self) -> bool:
        return self.layout is ConfigLayout.GROUPS and bool(self.groups)

    def get_all_targets(self) -> Set[str]:
        return {t.repo for g in self.get_groups() for t in g.targets}

    def get_target_mappings(self, repo: str) -> List[SourceTargetPair]:
        pairs: List[SourceTargetPair] = []
        for group in self.get_groups():
            merged_global = self.global_config.merged_with(group.global_config)
            for target in group.targets:
                if target.repo != repo:
                    continue
                pairs.append(
                    SourceTargetPair(
                        source=group.source,
                        target=target,
                        defaults=group.defaults,
                        global_config=merged_global,
                        group_id=group.id,
                    )
                )
        return pairs

    def validate(self, ctx=None) -> None:
        from syncplan.core.validation.validator import validate_config

        validate_config(self, ctx=ctx)

    def to_dict(self) -> Dict[str, Any]:
        return _to_plain(self)


def _union(first: Iterable[str], second: Iterable[str]) -> List[str]:
    out: List[str] = []
    for item in list(first) + list(second):
        if item not in out:
            out.append(item)
    return out


def _to_plain(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "__dataclass_fields__"):
        return {name: _to_plain(getattr(obj, name)) for name in obj.__dataclass_fields__}
    if isinstance(obj, list):
        return [_to_plain(v) for v in obj]
    if isinstance(obj, dict):
        return {k: _to_plain(v) for k, v in obj.items()}
    return copy.copy(obj)


# ---------------------------------------------------------------------------
# Decodificação estrita
# ---------------------------------------------------------------------------

_ROOT_KEYS = {
    "version",
    "groups",
    "source",
    "targets",
    "mappings",
    "global",
    "defaults",
    "file_lists",
    "directory_lists",
    "conflict_resolution",
}
_GROUP_KEYS = {
    "name",
    "id",
    "description",
    "priority",
    "depends_on",
    "enabled",
    "source",
    "global",
    "defaults",
    "targets",
}
_SOURCE_KEYS = {"repo", "branch", "id"}
_GLOBAL_KEYS = {"pr_labels", "pr_assignees", "pr_reviewers", "pr_team_reviewers"}
_DEFAULT_KEYS = _GLOBAL_KEYS | {"branch_prefix"}
_TARGET_KEYS = {
    "repo",
    "branch",
    "files",
    "directories",
    "transform",
    "pr_labels",
    "pr_assignees",
    "pr_reviewers",
    "pr_team_reviewers",
    "file_list_refs",
    "directory_list_refs",
}
_FILE_KEYS = {"src", "dest", "delete"}
_DIRECTORY_KEYS = {
    "src",
    "dest",
    "exclude",
    "include_only",
    "transform",
    "preserve_structure",
    "include_hidden",
    "module",
    "delete",
}
_MODULE_KEYS = {"type", "version", "check_tags"}
_TRANSFORM_KEYS = {"repo_name", "variables"}
_MAPPING_KEYS = {"source", "targets", "defaults"}
_FILE_LIST_KEYS = {"id", "name", "description", "files"}
_DIRECTORY_LIST_KEYS = {"id", "name", "description", "directories"}
_CONFLICT_KEYS = {"strategy", "priority"}


def _fail(path: str, msg: str) -> None:
    raise ConfigParseError(f"{path or 'root'}: {msg}", path=path or "root")


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _check_keys(data: Dict[str, Any], allowed: Set[str], path: str) -> None:
    unknown = sorted(str(k) for k in data if k not in allowed)
    if unknown:
        where = path or "root"
        raise UnknownFieldError(
            f"unknown field(s) at {where}: {', '.join(unknown)}",
            path=where,
            fields=unknown,
        )


def _mapping(value: Any, path: str, allowed: Set[str]) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        _fail(path, "must be a mapping")
    _check_keys(value, allowed, path)
    return value


def _str(value: Any, path: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        _fail(path, "must be a string")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _bool(value: Any, path: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        _fail(path, "must be a boolean")
    return value


def _tristate(value: Any, path: str) -> TriState:
    if value is None:
        return TriState.UNSET
    return TriState.from_value(_bool(value, path))


def _int(value: Any, path: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        _fail(path, "must be an integer")
    return value


def _str_list(value: Any, path: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        _fail(path, "must be a list of strings")
    return [_str(item, f"{path}[{i}]") for i, item in enumerate(value)]


def _optional_str_list(value: Any, path: str) -> Optional[List[str]]:
    if value is None:
        return None
    return _str_list(value, path)


def _str_map(value: Any, path: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        _fail(path, "must be a mapping of strings")
    return {str(k): _str(v, f"{path}.{k}") for k, v in value.items()}


def _entries(value: Any, path: str) -> List[Tuple[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        _fail(path, "must be a list")
    return [(f"{path}[{i}]", item) for i, item in enumerate(value)]


def decode_transform(value: Any, path: str) -> Transform:
    data = _mapping(value, path, _TRANSFORM_KEYS)
    return Transform(
        repo_name=_bool(data.get("repo_name"), _join(path, "repo_name")),
        variables=_str_map(data.get("variables"), _join(path, "variables")),
    )


def decode_file_mapping(value: Any, path: str) -> FileMapping:
    data = _mapping(value, path, _FILE_KEYS)
    return FileMapping(
        src=_str(data.get("src"), _join(path, "src")),
        dest=_str(data.get("dest"), _join(path, "dest")),
        delete=_bool(data.get("delete"), _join(path, "delete")),
    )


def decode_module(value: Any, path: str) -> Optional[ModuleConfig]:
    if value is None:
        return None
    data = _mapping(value, path, _MODULE_KEYS)
    return ModuleConfig(
        type=_str(data.get("type"), _join(path, "type")),
        version=_str(data.get("version"), _join(path, "version")),
        check_tags=_tristate(data.get("check_tags"), _join(path, "check_tags")),
    )


def decode_directory_mapping(value: Any, path: str) -> DirectoryMapping:
    data = _mapping(value, path, _DIRECTORY_KEYS)
    return DirectoryMapping(
        src=_str(data.get("src"), _join(path, "src")),
        dest=_str(data.get("dest"), _join(path, "dest")),
        exclude=_optional_str_list(data.get("exclude"), _join(path, "exclude")),
        include_only=_str_list(data.get("include_only"), _join(path, "include_only")),
        transform=decode_transform(data.get("transform"), _join(path, "transform")),
        preserve_structure=_tristate(data.get("preserve_structure"), _join(path, "preserve_structure")),
        include_hidden=_tristate(data.get("include_hidden"), _join(path, "include_hidden")),
        module=decode_module(data.get("module"), _join(path, "module")),
        delete=_bool(data.get("delete"), _join(path, "delete")),
    )


def decode_source(value: Any, path: str) -> SourceConfig:
    data = _mapping(value, path, _SOURCE_KEYS)
    return SourceConfig(
        repo=_str(data.get("repo"), _join(path, "repo")),
        branch=_str(data.get("branch"), _join(path, "branch")),
        id=_str(data.get("id"), _join(path, "id")),
    )


def decode_global(value: Any, path: str) -> GlobalConfig:
    data = _mapping(value, path, _GLOBAL_KEYS)
    return GlobalConfig(
        pr_labels=_str_list(data.get("pr_labels"), _join(path, "pr_labels")),
        pr_assignees=_str_list(data.get("pr_assignees"), _join(path, "pr_assignees")),
        pr_reviewers=_str_list(data.get("pr_reviewers"), _join(path, "pr_reviewers")),
        pr_team_reviewers=_str_list(data.get("pr_team_reviewers"), _join(path, "pr_team_reviewers")),
    )


def decode_defaults(value: Any, path: str) -> DefaultConfig:
    data = _mapping(value, path, _DEFAULT_KEYS)
    return DefaultConfig(
        branch_prefix=_str(data.get("branch_prefix"), _join(path, "branch_prefix")),
        pr_labels=_str_list(data.get("pr_labels"), _join(path, "pr_labels")),
        pr_assignees=_str_list(data.get("pr_assignees"), _join(path, "pr_assignees")),
        pr_reviewers=_str_list(data.get("pr_reviewers"), _join(path, "pr_reviewers")),
        pr_team_reviewers=_str_list(data.get("pr_team_reviewers"), _join(path, "pr_team_reviewers")),
    )


def decode_target(value: Any, path: str) -> TargetConfig:
    data = _mapping(value, path, _TARGET_KEYS)
    return TargetConfig(
        repo=_str(data.get("repo"), _join(path, "repo")),
        branch=_str(data.get("branch"), _join(path, "branch")),
        files=[decode_file_mapping(v, p) for p, v in _entries(data.get("files"), _join(path, "files"))],
        directories=[
            decode_directory_mapping(v, p)
            for p, v in _entries(data.get("directories"), _join(path, "directories"))
        ],
        transform=decode_transform(data.get("transform"), _join(path, "transform")),
        pr_labels=_str_list(data.get("pr_labels"), _join(path, "pr_labels")),
        pr_assignees=_str_list(data.get("pr_assignees"), _join(path, "pr_assignees")),
        pr_reviewers=_str_list(data.get("pr_reviewers"), _join(path, "pr_reviewers")),
        pr_team_reviewers=_str_list(data.get("pr_team_reviewers"), _join(path, "pr_team_reviewers")),
        file_list_refs=_str_list(data.get("file_list_refs"), _join(path, "file_list_refs")),
        directory_list_refs=_str_list(data.get("directory_list_refs"), _join(path, "directory_list_refs")),
    )


def decode_group(value: Any, path: str) -> Group:
    data = _mapping(value, path, _GROUP_KEYS)
    return Group(
        name=_str(data.get("name"), _join(path, "name")),
        id=_str(data.get("id"), _join(path, "id")),
        description=_str(data.get("description"), _join(path, "description")),
        priority=_int(data.get("priority"), _join(path, "priority")),
        depends_on=_str_list(data.get("depends_on"), _join(path, "depends_on")),
        enabled=_tristate(data.get("enabled"), _join(path, "enabled")),
        source=decode_source(data.get("source"), _join(path, "source")),
        global_config=decode_global(data.get("global"), _join(path, "global")),
        defaults=decode_defaults(data.get("defaults"), _join(path, "defaults")),
        targets=[decode_target(v, p) for p, v in _entries(data.get("targets"), _join(path, "targets"))],
    )


def decode_source_mapping(value: Any, path: str) -> SourceMapping:
    data = _mapping(value, path, _MAPPING_KEYS)
    defaults = None
    if data.get("defaults") is not None:
        defaults = decode_defaults(data.get("defaults"), _join(path, "defaults"))
    return SourceMapping(
        source=decode_source(data.get("source"), _join(path, "source")),
        targets=[decode_target(v, p) for p, v in _entries(data.get("targets"), _join(path, "targets"))],
        defaults=defaults,
    )


def decode_file_list(value: Any, path: str) -> FileList:
    data = _mapping(value, path, _FILE_LIST_KEYS)
    return FileList(
        id=_str(data.get("id"), _join(path, "id")),
        name=_str(data.get("name"), _join(path, "name")),
        description=_str(data.get("description"), _join(path, "description")),
        files=[decode_file_mapping(v, p) for p, v in _entries(data.get("files"), _join(path, "files"))],
    )


def decode_directory_list(value: Any, path: str) -> DirectoryList:
    data = _mapping(value, path, _DIRECTORY_LIST_KEYS)
    return DirectoryList(
        id=_str(data.get("id"), _join(path, "id")),
        name=_str(data.get("name"), _join(path, "name")),
        description=_str(data.get("description"), _join(path, "description")),
        directories=[
            decode_directory_mapping(v, p)
            for p, v in _entries(data.get("directories"), _join(path, "directories"))
        ],
    )


def decode_conflict_resolution(value: Any, path: str) -> Optional[ConflictResolution]:
    if value is None:
        return None
    data = _mapping(value, path, _CONFLICT_KEYS)
    return ConflictResolution(
        strategy=_str(data.get("strategy"), _join(path, "strategy")),
        priority=_str_list(data.get("priority"), _join(path, "priority")),
    )


def decode_config(data: Any) -> Config:
    """
    Decodifica estritamente um documento já parseado em um `Config`.

    Regras:
        - a raiz deve ser um mapping
        - qualquer chave desconhecida, em qualquer nível, gera `UnknownFieldError`
        - tipos incompatíveis geram `ConfigParseError` com o caminho pontuado
        - `groups` não pode coexistir com `source`/`targets`/`mappings`, e
          `mappings` não pode coexistir com `source`/`targets`

    Raises:
        ConfigParseError: documento estruturalmente incompatível.
        UnknownFieldError: chave não prevista no schema.
    """
    if not isinstance(data, dict):
        raise ConfigParseError(
            f"config root must be a mapping, got: {type(data).__name__}"
        )
    _check_keys(data, _ROOT_KEYS, "")

    has_groups = data.get("groups") is not None
    has_flat = data.get("source") is not None or data.get("targets") is not None
    has_mappings = data.get("mappings") is not None
    if has_groups and (has_flat or has_mappings):
        _fail("groups", "cannot be combined with legacy source/targets/mappings")
    if has_mappings and has_flat:
        _fail("mappings", "cannot be combined with legacy source/targets")

    source = None
    if data.get("source") is not None:
        source = decode_source(data.get("source"), "source")

    layout = ConfigLayout.GROUPS
    if has_flat:
        layout = ConfigLayout.FLAT
    elif has_mappings:
        layout = ConfigLayout.MAPPINGS

    return Config(
        version=_int(data.get("version"), "version"),
        groups=[decode_group(v, p) for p, v in _entries(data.get("groups"), "groups")],
        source=source,
        targets=[decode_target(v, p) for p, v in _entries(data.get("targets"), "targets")],
        mappings=[decode_source_mapping(v, p) for p, v in _entries(data.get("mappings"), "mappings")],
        global_config=decode_global(data.get("global"), "global"),
        defaults=decode_defaults(data.get("defaults"), "defaults"),
        file_lists=[decode_file_list(v, p) for p, v in _entries(data.get("file_lists"), "file_lists")],
        directory_lists=[
            decode_directory_list(v, p)
            for p, v in _entries(data.get("directory_lists"), "directory_lists")
        ],
        conflict_resolution=decode_conflict_resolution(data.get("conflict_resolution"), "conflict_resolution"),
        layout=layout,
    )
