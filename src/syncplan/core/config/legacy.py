# src/syncplan/core/config/legacy.py
"""
Adaptador dos formatos legados para o formato canônico de grupos.

Formatos aceitos:
    - flat:      `source` + `targets` no nível raiz
    - mappings:  lista `mappings` com uma fonte e seus targets por entrada
    - groups:    formato canônico (não é alterado)

Decisões arquiteturais:
    - A tradução é executada uma única vez no carregamento e, sob demanda,
      por `Config.get_groups()` e pela validação de configs construídos em código
    - Os targets traduzidos são os mesmos objetos declarados no formato
      legado, nunca cópias
    - Os defaults do nível raiz são copiados para cada grupo gerado

Invariantes:
    - Aplicar o adaptador duas vezes produz o mesmo resultado que aplicar uma
    - `Config.layout` registra o formato declarado no documento

Limites explícitos:
    - Não aplica defaults nem resolve listas
    - Não valida o conteúdo traduzido
"""

from __future__ import annotations

import copy
from typing import List

from .schema import Config, ConfigLayout, DefaultConfig, Group, SourceConfig

FLAT_GROUP_ID = "default"
FLAT_GROUP_NAME = "default"


def _copy_defaults(defaults: DefaultConfig) -> DefaultConfig:
    return copy.deepcopy(defaults)


def _adapt_flat(config: Config) -> List[Group]:
    group = Group(
        name=FLAT_GROUP_NAME,
        id=config.source.id or FLAT_GROUP_ID,
        source=config.source,
        defaults=_copy_defaults(config.defaults),
        targets=config.targets,
        files_only=True,
    )
    return [group]


def _adapt_mappings(config: Config) -> List[Group]:
    groups: List[Group] = []
    for i, mapping in enumerate(config.mappings):
        gid = mapping.source.id or f"mapping-{i}"
        defaults = mapping.defaults if mapping.defaults is not None else _copy_defaults(config.defaults)
        groups.append(
            Group(
                name=gid,
                id=gid,
                source=mapping.source,
                defaults=defaults,
                targets=mapping.targets,
            )
        )
    return groups


def ensure_groups(config: Config) -> Config:
    """
    Garante que `config.groups` contenha a forma canônica do documento.

    Args:
        config (Config): Configuração decodificada (mutada no lugar).

    Returns:
        Config: A mesma instância, para encadeamento.
    """
    if config.groups:
        return config

    if config.source is not None or config.targets:
        if config.source is None:
            config.source = SourceConfig()
        config.layout = ConfigLayout.FLAT
        config.groups = _adapt_flat(config)
    elif config.mappings:
        config.layout = ConfigLayout.MAPPINGS
        config.groups = _adapt_mappings(config)

    return config
