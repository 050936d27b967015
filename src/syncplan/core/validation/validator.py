# src/syncplan/core/validation/validator.py
"""
Orquestrador da validação semântica da configuração.

Pipeline (fail-fast, a primeira violação interrompe):
    1. cancelamento
    2. versão suportada
    3. adaptação dos formatos legados
    4. definições de listas
    5. política de resolução de conflitos
    6. `global` / `defaults` do nível raiz
    7. grupos, na ordem declarada (fonte, defaults, targets, mapeamentos)
    8. grafo de dependências entre grupos (uma única vez)

Decisões arquiteturais:
    - Toda exceção carrega o contexto posicional (`group[0] (core):
      target[1] (org/svc): file[2]: ...`)
    - Duplicidade de target é verificada por grupo, sem diferenciar
      maiúsculas e minúsculas; o mesmo repo em grupos distintos é permitido
    - Cancelamento é consultado antes de cada grupo, target e mapeamento
    - Achados não fatais (lista vazia, grupo desabilitado) viram warnings

Limites explícitos:
    - Não calcula ordem de execução
    - Não acessa rede nem sistema de arquivos
"""

from __future__ import annotations

from typing import Dict, List, Optional

from syncplan.core.config.errors import (
    ConfigError,
    DuplicateGroupIDError,
    DuplicateListIDError,
    DuplicateTargetError,
    InvalidFormatError,
    MissingRequiredFieldError,
    UnsupportedVersionError,
)
from syncplan.core.config.legacy import ensure_groups
from syncplan.core.config.schema import (
    SUPPORTED_VERSION,
    Config,
    ConflictResolution,
    DefaultConfig,
    GlobalConfig,
    Group,
    SourceConfig,
)
from syncplan.core.engine.conflicts import CONFLICT_STRATEGIES
from syncplan.core.engine.planner import describe_dependency_graph, validate_group_dependencies

from .context import ValidationContext
from .names import validate_branch_name, validate_branch_prefix, validate_repo_name
from .targets import validate_directory_mapping, validate_file_mapping, validate_pr_labels, validate_target


def _poll(ctx: Optional[ValidationContext]) -> None:
    if ctx is not None:
        ctx.check_canceled()


def _trace(ctx: Optional[ValidationContext], step_id: str, message: str, **extra) -> None:
    if ctx is not None:
        ctx.trace(step_id=step_id, message=message, **extra)


def _validate_version(config: Config) -> None:
    if config.version != SUPPORTED_VERSION:
        raise UnsupportedVersionError(
            f"unsupported config version: {config.version} (only version {SUPPORTED_VERSION} is supported)",
            version=config.version,
        )


def _validate_list_definitions(config: Config, ctx: Optional[ValidationContext]) -> None:
    seen: Dict[str, int] = {}
    for idx, flist in enumerate(config.file_lists):
        location = f"file_lists[{idx}] ({flist.id})"
        if not flist.id.strip():
            raise MissingRequiredFieldError("list id is required", field="id").with_context(f"file_lists[{idx}]")
        if flist.id in seen:
            raise DuplicateListIDError(
                f"duplicate list ID: {flist.id} (first declared at file_lists[{seen[flist.id]}])",
                kind="file_list",
                list_id=flist.id,
            ).with_context(location)
        seen[flist.id] = idx
        if not flist.files:
            if ctx is not None:
                ctx.add_warning(step_id="validate.lists", message=f"file list '{flist.id}' has no files")
        for i, fmap in enumerate(flist.files):
            try:
                validate_file_mapping(fmap)
            except ConfigError as err:
                err.with_context(f"{location}: file[{i}]", list_id=flist.id)
                raise

    seen = {}
    for idx, dlist in enumerate(config.directory_lists):
        location = f"directory_lists[{idx}] ({dlist.id})"
        if not dlist.id.strip():
            raise MissingRequiredFieldError("list id is required", field="id").with_context(
                f"directory_lists[{idx}]"
            )
        if dlist.id in seen:
            raise DuplicateListIDError(
                f"duplicate list ID: {dlist.id} (first declared at directory_lists[{seen[dlist.id]}])",
                kind="directory_list",
                list_id=dlist.id,
            ).with_context(location)
        seen[dlist.id] = idx
        if not dlist.directories:
            if ctx is not None:
                ctx.add_warning(
                    step_id="validate.lists", message=f"directory list '{dlist.id}' has no directories"
                )
        for i, dmap in enumerate(dlist.directories):
            try:
                validate_directory_mapping(dmap)
            except ConfigError as err:
                err.with_context(f"{location}: directory[{i}]", list_id=dlist.id)
                raise

    _trace(
        ctx,
        "validate.lists",
        "list definitions ok",
        file_lists=len(config.file_lists),
        directory_lists=len(config.directory_lists),
    )


def _validate_conflict_resolution(policy: Optional[ConflictResolution]) -> None:
    if policy is None:
        return
    if policy.strategy and policy.strategy not in CONFLICT_STRATEGIES:
        raise InvalidFormatError(
            f"invalid conflict resolution strategy: {policy.strategy} "
            f"(expected one of: {', '.join(CONFLICT_STRATEGIES)})",
            field="conflict_resolution.strategy",
            value=policy.strategy,
        )
    for i, source_id in enumerate(policy.priority):
        if not source_id.strip():
            raise MissingRequiredFieldError(
                f"conflict_resolution.priority[{i}]: source id cannot be empty",
                field="conflict_resolution.priority",
            )


def _validate_global(global_config: GlobalConfig, location: str) -> None:
    validate_pr_labels(global_config.pr_labels, field=f"{location}.pr_labels")


def _validate_defaults(defaults: DefaultConfig, location: str) -> None:
    if defaults.branch_prefix:
        validate_branch_prefix(defaults.branch_prefix)
    validate_pr_labels(defaults.pr_labels, field=f"{location}.pr_labels")


def _validate_source(source: SourceConfig) -> None:
    if not source.repo:
        raise MissingRequiredFieldError("source repository is required", field="source.repo")
    validate_repo_name(source.repo)
    if source.branch:
        validate_branch_name(source.branch)


def _validate_targets(group: Group, ctx: Optional[ValidationContext]) -> None:
    if not group.targets:
        raise MissingRequiredFieldError("at least one target repository must be specified", field="targets")

    seen_repos: Dict[str, int] = {}
    for t_idx, target in enumerate(group.targets):
        _poll(ctx)
        try:
            validate_target(target, files_only=group.files_only, ctx=ctx)
            key = target.repo.casefold()
            if key in seen_repos:
                raise DuplicateTargetError(
                    f"duplicate target repository: {target.repo} "
                    f"(already declared at target[{seen_repos[key]}])",
                    repo=target.repo,
                )
            seen_repos[key] = t_idx
        except ConfigError as err:
            err.with_context(f"target[{t_idx}] ({target.repo})", target_index=t_idx, target=target.repo)
            raise


def _validate_group(group: Group, ctx: Optional[ValidationContext]) -> None:
    try:
        _validate_source(group.source)
    except ConfigError as err:
        err.with_context("source")
        raise

    _validate_global(group.global_config, "global")
    _validate_defaults(group.defaults, "defaults")
    _validate_targets(group, ctx)


def _validate_groups(groups: List[Group], ctx: Optional[ValidationContext]) -> None:
    if not groups:
        raise MissingRequiredFieldError(
            "at least one group (or legacy source/targets or mappings) must be specified",
            field="groups",
        )

    seen_ids: Dict[str, int] = {}
    for g_idx, group in enumerate(groups):
        _poll(ctx)
        try:
            if not group.id:
                raise MissingRequiredFieldError("group id is required", field="id")
            if group.id in seen_ids:
                raise DuplicateGroupIDError(
                    f"duplicate group ID: {group.id} (first declared at group[{seen_ids[group.id]}])",
                    group=group.id,
                )
            seen_ids[group.id] = g_idx
            _validate_group(group, ctx)
        except ConfigError as err:
            err.with_context(f"group[{g_idx}] ({group.id})", group_index=g_idx, group=group.id)
            raise

        if ctx is not None and not group.is_enabled:
            ctx.add_warning(step_id="validate.groups", message=f"group '{group.id}' is disabled")
        _trace(ctx, "validate.groups", f"group {group.id} ok", targets=len(group.targets))


def validate_config(config: Config, ctx: Optional[ValidationContext] = None) -> None:
    """
    Valida semanticamente uma configuração carregada.

    Args:
        config (Config): Configuração carregada (`load`/`load_from_reader`)
            ou construída em código.
        ctx (Optional[ValidationContext]): Contexto opcional para trace,
            warnings e cancelamento cooperativo.

    Raises:
        ValidationCanceledError: Se o contexto for cancelado ou expirar.
        ConfigValidationError: Primeira violação semântica encontrada.
    """
    _poll(ctx)
    _trace(ctx, "validate.start", "validating configuration", version=config.version)

    _validate_version(config)
    ensure_groups(config)
    _trace(ctx, "validate.layout", f"config layout: {config.layout.value}", groups=len(config.groups))

    _validate_list_definitions(config, ctx)
    _validate_conflict_resolution(config.conflict_resolution)
    _validate_global(config.global_config, "global")
    _validate_defaults(config.defaults, "defaults")

    _validate_groups(config.groups, ctx)

    _poll(ctx)
    validate_group_dependencies(config.groups)
    _trace(ctx, "validate.dependencies", describe_dependency_graph(config.groups))

    if ctx is not None:
        ctx.log(
            step_id="validate.end",
            level="info",
            message="configuration is valid",
            groups=len(config.groups),
        )
