# src/syncplan/core/config/defaults.py
"""
Cascateamento de defaults da configuração.

Precedência (do mais específico para o mais geral):
    1. valor declarado no grupo
    2. valor declarado em `defaults` no nível raiz
    3. constante embutida deste módulo

Decisões arquiteturais:
    - Um campo só recebe default quando está vazio ou não declarado
    - `exclude: []` declarado explicitamente é preservado (lista vazia
      significa "não excluir nada")
    - Listas do nível raiz são copiadas, nunca compartilhadas entre grupos

Invariantes:
    - Aplicar os defaults duas vezes não altera o resultado

Limites explícitos:
    - Não valida valores
    - Não resolve referências de listas
"""

from __future__ import annotations

from typing import List

from .schema import Config, DirectoryMapping, Group, TriState

DEFAULT_BRANCH = "main"
DEFAULT_BRANCH_PREFIX = "chore/sync-files"
DEFAULT_PR_LABELS = ("automated-sync",)

DEFAULT_EXCLUSIONS = (
    "*.out",
    "*.test",
    "*.exe",
    "**/.DS_Store",
    "**/tmp/*",
    "**/.git",
)


def default_exclusions() -> List[str]:
    """Retorna uma nova lista com as exclusões padrão de diretório."""
    return list(DEFAULT_EXCLUSIONS)


def apply_directory_defaults(mapping: DirectoryMapping) -> DirectoryMapping:
    if mapping.exclude is None:
        mapping.exclude = default_exclusions()
    if not mapping.preserve_structure.is_set:
        mapping.preserve_structure = TriState.TRUE
    if not mapping.include_hidden.is_set:
        mapping.include_hidden = TriState.TRUE
    return mapping


def _apply_group_defaults(group: Group, config: Config) -> None:
    top = config.defaults
    defaults = group.defaults

    if not group.source.branch:
        group.source.branch = DEFAULT_BRANCH

    if not defaults.branch_prefix:
        defaults.branch_prefix = top.branch_prefix or DEFAULT_BRANCH_PREFIX

    if not defaults.pr_labels:
        defaults.pr_labels = list(top.pr_labels) or list(DEFAULT_PR_LABELS)
    if not defaults.pr_assignees:
        defaults.pr_assignees = list(top.pr_assignees)
    if not defaults.pr_reviewers:
        defaults.pr_reviewers = list(top.pr_reviewers)
    if not defaults.pr_team_reviewers:
        defaults.pr_team_reviewers = list(top.pr_team_reviewers)

    if not group.enabled.is_set:
        group.enabled = TriState.TRUE

    for target in group.targets:
        for mapping in target.directories:
            apply_directory_defaults(mapping)


def apply_defaults(config: Config) -> Config:
    """
    Aplica o cascateamento de defaults em todos os grupos (mutação in-place).

    Também completa os diretórios declarados em `directory_lists`, de forma
    que entradas reutilizadas já carreguem os defaults antes da resolução.

    Args:
        config (Config): Configuração já adaptada para a forma canônica.

    Returns:
        Config: A mesma instância, para encadeamento.
    """
    for group in config.groups:
        _apply_group_defaults(group, config)

    for dlist in config.directory_lists:
        for mapping in dlist.directories:
            apply_directory_defaults(mapping)

    return config
