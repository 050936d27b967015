# src/syncplan/core/config/lists.py
"""
Registry e resolução de listas reutilizáveis (`file_lists` / `directory_lists`).

Um target pode referenciar listas por ID (`file_list_refs`,
`directory_list_refs`). A resolução expande essas referências em
mapeamentos concretos no próprio target.

Política de resolução (por destino):
    1. listas referenciadas, na ordem declarada (a lista posterior vence)
    2. mapeamentos inline do target (sempre vencem)

Decisões arquiteturais:
    - Toda entrada resolvida (de lista ou inline) é uma cópia independente,
      pois a mesma lista pode ser referenciada por vários targets
    - Destinos são comparados após normalização léxica (`./a` e `a` são o
      mesmo destino), como na detecção de duplicatas da validação
    - A saída é ordenada por destino apenas para estabilidade; somente o
      conteúdo por destino é garantido

Invariantes:
    - Cada destino aparece exatamente uma vez após a resolução
    - Resolver duas vezes não altera o resultado
    - As definições de lista nunca são mutadas

Limites explícitos:
    - Não valida caminhos nem padrões glob
    - Não aplica defaults de diretório (ver `defaults.py`)
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Dict, List

from .errors import DuplicateListIDError, ListReferenceNotFoundError
from .schema import (
    Config,
    DirectoryList,
    DirectoryMapping,
    FileList,
    FileMapping,
    Group,
    TargetConfig,
)


@dataclass
class ListRegistry:
    """Índices por ID das listas declaradas no documento."""

    file_lists: Dict[str, FileList] = field(default_factory=dict)
    directory_lists: Dict[str, DirectoryList] = field(default_factory=dict)

    @classmethod
    def build(cls, config: Config) -> "ListRegistry":
        """
        Constrói o registry a partir da configuração.

        Raises:
            DuplicateListIDError: Se um ID se repetir dentro do mesmo tipo de lista.
        """
        registry = cls()
        for flist in config.file_lists:
            if flist.id in registry.file_lists:
                raise DuplicateListIDError(
                    f"duplicate list ID: {flist.id} (file_lists)",
                    kind="file_list",
                    list_id=flist.id,
                )
            registry.file_lists[flist.id] = flist
        for dlist in config.directory_lists:
            if dlist.id in registry.directory_lists:
                raise DuplicateListIDError(
                    f"duplicate list ID: {dlist.id} (directory_lists)",
                    kind="directory_list",
                    list_id=dlist.id,
                )
            registry.directory_lists[dlist.id] = dlist
        return registry


def _not_found(kind: str, ref: str, available: List[str], other: List[str]) -> ListReferenceNotFoundError:
    other_kind = "directory" if kind == "file" else "file"
    message = f"{kind} list reference '{ref}' not found"
    if ref in other:
        message += f" (a {other_kind} list with this ID exists; use {other_kind}_list_refs)"
    message += f"; available {kind} lists: [{', '.join(sorted(available))}]"
    return ListReferenceNotFoundError(message, ref=ref, kind=f"{kind}_list")


def _dest_key(dest: str) -> str:
    # mesma normalização usada na detecção de destinos duplicados
    return posixpath.normpath(dest)


def _copy_file(entry: FileMapping) -> FileMapping:
    return FileMapping(src=entry.src, dest=entry.dest, delete=entry.delete)


def _resolve_files(target: TargetConfig, registry: ListRegistry) -> None:
    merged: Dict[str, FileMapping] = {}
    for ref in target.file_list_refs:
        flist = registry.file_lists.get(ref)
        if flist is None:
            raise _not_found(
                "file", ref, list(registry.file_lists), list(registry.directory_lists)
            )
        for entry in flist.files:
            merged[_dest_key(entry.dest)] = _copy_file(entry)

    for entry in target.files:
        merged[_dest_key(entry.dest)] = _copy_file(entry)

    target.files = [merged[key] for key in sorted(merged)]


def _resolve_directories(target: TargetConfig, registry: ListRegistry) -> None:
    merged: Dict[str, DirectoryMapping] = {}
    for ref in target.directory_list_refs:
        dlist = registry.directory_lists.get(ref)
        if dlist is None:
            raise _not_found(
                "directory", ref, list(registry.directory_lists), list(registry.file_lists)
            )
        for entry in dlist.directories:
            merged[_dest_key(entry.dest)] = entry.clone()

    for entry in target.directories:
        merged[_dest_key(entry.dest)] = entry.clone()

    target.directories = [merged[key] for key in sorted(merged)]


def _resolve_target(target: TargetConfig, registry: ListRegistry) -> None:
    if target.file_list_refs:
        _resolve_files(target, registry)
    if target.directory_list_refs:
        _resolve_directories(target, registry)


def resolve_list_references(config: Config) -> Config:
    """
    Expande as referências de listas de todos os targets (mutação in-place).

    Args:
        config (Config): Configuração já adaptada para a forma canônica.

    Returns:
        Config: A mesma instância, para encadeamento.

    Raises:
        DuplicateListIDError: Se houver IDs de lista repetidos.
        ListReferenceNotFoundError: Se um target referenciar uma lista inexistente.
    """
    registry = ListRegistry.build(config)
    groups: List[Group] = config.groups
    for group in groups:
        for t_idx, target in enumerate(group.targets):
            try:
                _resolve_target(target, registry)
            except ListReferenceNotFoundError as err:
                err.with_context(
                    f"group '{group.id}': target[{t_idx}] ({target.repo})",
                    group=group.id,
                    target=target.repo,
                )
                raise
    return config
