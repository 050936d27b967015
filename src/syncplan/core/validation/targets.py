# src/syncplan/core/validation/targets.py
"""
Validação de targets e de seus mapeamentos de arquivo/diretório.

Regras por target:
    - `repo` obrigatório e no formato `org/repo`
    - `branch`, quando declarado, segue a regra de nomes de branch
    - ao menos um mapeamento (no formato flat: sem diretórios e com ao
      menos um arquivo)
    - destinos únicos na união de arquivos e diretórios
    - labels de PR não vazios

Decisões arquiteturais:
    - Fail-fast: a primeira violação interrompe a validação
    - O contexto posicional (`file[2]`, `directory[0]`) é acrescentado à
      mensagem sem trocar o tipo da exceção
    - Padrões glob são validados aqui, não no momento do matching

Limites explícitos:
    - Não acessa o sistema de arquivos
    - Não aplica defaults
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

import pathspec

from syncplan.core.config.errors import (
    ConfigError,
    DuplicateDestinationError,
    EmptyLabelError,
    FileDirectoryDestinationConflictError,
    InvalidFormatError,
    MissingRequiredFieldError,
    NoMappingsError,
)
from syncplan.core.config.schema import DirectoryMapping, FileMapping, TargetConfig

from .context import ValidationContext
from .names import validate_branch_name, validate_repo_name
from .paths import check_path, normalize_destination

SUPPORTED_MODULE_TYPES = ("go",)


# ---------------------------------------------------------------------------
# Padrões glob
# ---------------------------------------------------------------------------

def _glob_syntax_error(pattern: str) -> str:
    """Retorna a descrição do primeiro erro de sintaxe, ou "" se válido."""
    n = len(pattern)
    i = 0
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            if i + 1 >= n:
                return "trailing backslash"
            i += 2
            continue
        if ch != "[":
            i += 1
            continue

        # classe de caracteres
        i += 1
        # negação: `!` (gitwildmatch) ou `^`
        if i < n and pattern[i] in "^!":
            i += 1
        count = 0
        closed = False
        while i < n:
            ch = pattern[i]
            if ch == "]":
                if count == 0:
                    return "empty character class"
                closed = True
                i += 1
                break
            if ch == "\\":
                i += 1
                if i >= n:
                    return "trailing backslash"
            i += 1
            count += 1
            if i < n and pattern[i] == "-":
                i += 1
                if i >= n or pattern[i] == "]":
                    return "dangling range in character class"
                if pattern[i] == "\\":
                    i += 1
                    if i >= n:
                        return "trailing backslash"
                i += 1
        if not closed:
            return "unterminated character class"
    return ""


def validate_glob_pattern(pattern: str, field: str = "pattern") -> None:
    """
    Valida a sintaxe de um padrão glob de exclusão/inclusão.

    Raises:
        InvalidFormatError: Padrão vazio, sintaticamente inválido ou rejeitado
            pelo compilador gitwildmatch.
    """
    if not pattern.strip():
        raise InvalidFormatError(f"invalid glob pattern in {field}: pattern cannot be empty", field=field, value=pattern)

    reason = _glob_syntax_error(pattern)
    if reason:
        raise InvalidFormatError(f"invalid glob pattern in {field}: {pattern} ({reason})", field=field, value=pattern)

    try:
        pathspec.PathSpec.from_lines("gitwildmatch", [pattern])
    except (ValueError, re.error) as exc:
        raise InvalidFormatError(
            f"invalid glob pattern in {field}: {pattern} ({exc})", field=field, value=pattern
        ) from exc


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

def validate_pr_labels(labels: List[str], field: str = "pr_labels") -> None:
    for i, label in enumerate(labels):
        if not label.strip():
            raise EmptyLabelError(f"PR label cannot be empty ({field}[{i}])", field=field, index=i)


# ---------------------------------------------------------------------------
# Mapeamentos
# ---------------------------------------------------------------------------

def validate_file_mapping(mapping: FileMapping) -> None:
    """
    Valida um mapeamento de arquivo.

    `dest` é sempre obrigatório; `src` só é dispensado quando `delete=True`.
    """
    if not mapping.dest:
        raise MissingRequiredFieldError("destination path (dest) is required", field="dest")
    if not mapping.src and not mapping.delete:
        raise MissingRequiredFieldError(
            "source path (src) is required unless delete is true", field="src"
        )
    if mapping.src:
        check_path(mapping.src, field="src")
    check_path(mapping.dest, field="dest")


def validate_directory_mapping(mapping: DirectoryMapping) -> None:
    if not mapping.dest:
        raise MissingRequiredFieldError("destination path (dest) is required", field="dest")
    if mapping.src:
        check_path(mapping.src, field="src")
    check_path(mapping.dest, field="dest")

    for i, pattern in enumerate(mapping.exclude or []):
        validate_glob_pattern(pattern, field=f"exclude[{i}]")
    for i, pattern in enumerate(mapping.include_only):
        validate_glob_pattern(pattern, field=f"include_only[{i}]")

    if mapping.module is not None:
        mtype = mapping.module.type
        if mtype not in SUPPORTED_MODULE_TYPES:
            raise InvalidFormatError(
                f"unsupported module type: '{mtype}' (supported: {', '.join(SUPPORTED_MODULE_TYPES)})",
                field="module.type",
                value=mtype,
            )


def _check_destinations(target: TargetConfig) -> None:
    seen: Dict[str, Tuple[str, int]] = {}
    entries: List[Tuple[str, int, str]] = [("file", i, m.dest) for i, m in enumerate(target.files)]
    entries += [("directory", i, m.dest) for i, m in enumerate(target.directories)]

    for kind, idx, dest in entries:
        key = normalize_destination(dest)
        if key not in seen:
            seen[key] = (kind, idx)
            continue
        prev_kind, prev_idx = seen[key]
        if prev_kind == kind:
            raise DuplicateDestinationError(
                f"duplicate destination: {dest} ({kind}[{prev_idx}] and {kind}[{idx}])",
                dest=dest,
            )
        raise FileDirectoryDestinationConflictError(
            f"destination used by both a file and a directory mapping: {dest} "
            f"({prev_kind}[{prev_idx}] and {kind}[{idx}])",
            dest=dest,
        )


def _check_mapping_presence(target: TargetConfig, files_only: bool) -> None:
    if files_only:
        if target.directories:
            raise InvalidFormatError(
                "directory mappings are not supported in the legacy flat config format; use groups",
                field="directories",
            )
        if not target.files:
            raise NoMappingsError("at least one file mapping is required")
        return

    if not target.files and not target.directories:
        raise NoMappingsError("at least one file or directory mapping is required")


def validate_target(
    target: TargetConfig,
    *,
    files_only: bool = False,
    ctx: Optional[ValidationContext] = None,
) -> None:
    """
    Valida um target e todos os seus mapeamentos.

    Args:
        target (TargetConfig): Target já resolvido (listas expandidas).
        files_only (bool): Aplica a regra estrita do formato flat.
        ctx (Optional[ValidationContext]): Contexto para trace e cancelamento.

    Raises:
        ConfigValidationError: Primeira violação encontrada, com o índice do
            mapeamento ofensivo na mensagem.
    """
    if not target.repo:
        raise MissingRequiredFieldError("target repository is required", field="repo")
    validate_repo_name(target.repo)

    if target.branch:
        validate_branch_name(target.branch)

    _check_mapping_presence(target, files_only)

    for i, fmap in enumerate(target.files):
        if ctx is not None:
            ctx.check_canceled()
        try:
            validate_file_mapping(fmap)
        except ConfigError as err:
            err.with_context(f"file[{i}]", file_index=i)
            raise

    for i, dmap in enumerate(target.directories):
        if ctx is not None:
            ctx.check_canceled()
        try:
            validate_directory_mapping(dmap)
        except ConfigError as err:
            err.with_context(f"directory[{i}]", directory_index=i)
            raise

    _check_destinations(target)
    validate_pr_labels(target.pr_labels)

    if ctx is not None:
        ctx.trace(
            step_id="validate.target",
            message=f"target {target.repo} ok",
            files=len(target.files),
            directories=len(target.directories),
        )
