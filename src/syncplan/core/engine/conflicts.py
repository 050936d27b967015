# src/syncplan/core/engine/conflicts.py
"""
Resolução de conflitos entre múltiplas fontes que sincronizam o mesmo target.

Quando mais de um grupo (ou mapping legado) aponta para o mesmo repositório
target, seus mapeamentos podem reivindicar o mesmo destino. Este módulo
produz uma visão derivada e imutável (`TargetPlan`) para o executor.

Estratégias:
    - `last-wins` (padrão): a fonte declarada por último vence o destino
    - `priority`: fontes ordenadas pela lista de prioridade (IDs não
      listados por último, ordem estável); a primeira reivindicação vence
    - `error`: qualquer destino reivindicado por dois grupos é erro fatal

Decisões arquiteturais:
    - Arquivos e diretórios compartilham o mesmo espaço de destinos
    - Destinos são comparados após normalização léxica
    - Estratégias desconhecidas recaem em `last-wins` (a validação da
      configuração já as rejeita)

Invariantes:
    - Os targets de origem nunca são mutados
    - Um único grupo (ou mapping) contribuinte nunca gera conflito; dois
      grupos com a mesma fonte são contribuintes distintos

Limites explícitos:
    - Não se aplica ao formato flat legado
    - Não executa sincronização
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from syncplan.core.config.errors import ConfigValidationError, SourceConflictError
from syncplan.core.config.legacy import ensure_groups
from syncplan.core.config.schema import (
    Config,
    ConfigLayout,
    ConflictResolution,
    DirectoryMapping,
    FileMapping,
    SourceTargetPair,
)

STRATEGY_LAST_WINS = "last-wins"
STRATEGY_PRIORITY = "priority"
STRATEGY_ERROR = "error"

CONFLICT_STRATEGIES = (STRATEGY_LAST_WINS, STRATEGY_PRIORITY, STRATEGY_ERROR)
DEFAULT_STRATEGY = STRATEGY_LAST_WINS


@dataclass(frozen=True)
class PlannedMapping:
    """Mapeamento efetivo de um destino, com a fonte que o reivindicou."""

    dest: str
    kind: str
    source_id: str
    group_id: str
    mapping: Union[FileMapping, DirectoryMapping]


@dataclass(frozen=True)
class TargetPlan:
    """Plano somente-leitura de um repositório target."""

    repo: str
    strategy: str
    sources: Tuple[str, ...]
    mappings: Tuple[PlannedMapping, ...]

    @property
    def has_multiple_sources(self) -> bool:
        return len(self.sources) > 1

    def destinations(self) -> FrozenSet[str]:
        return frozenset(m.dest for m in self.mappings)

    def get(self, dest: str) -> Optional[PlannedMapping]:
        key = posixpath.normpath(dest)
        for planned in self.mappings:
            if posixpath.normpath(planned.dest) == key:
                return planned
        return None

    @property
    def files(self) -> List[PlannedMapping]:
        return [m for m in self.mappings if m.kind == "file"]

    @property
    def directories(self) -> List[PlannedMapping]:
        return [m for m in self.mappings if m.kind == "directory"]


def _effective_strategy(policy: Optional[ConflictResolution]) -> str:
    if policy is None or policy.strategy not in CONFLICT_STRATEGIES:
        return DEFAULT_STRATEGY
    return policy.strategy


def _ordered_pairs(
    pairs: Sequence[SourceTargetPair], strategy: str, policy: Optional[ConflictResolution]
) -> List[SourceTargetPair]:
    if strategy != STRATEGY_PRIORITY or policy is None:
        return list(pairs)
    rank = {sid: i for i, sid in enumerate(policy.priority)}
    unlisted = len(rank)
    # sorted() é estável: fontes não listadas mantêm a ordem declarada
    return sorted(pairs, key=lambda p: rank.get(p.source.display_id, unlisted))


def _entries(pair: SourceTargetPair) -> List[PlannedMapping]:
    sid = pair.source.display_id
    out = [PlannedMapping(m.dest, "file", sid, pair.group_id, m) for m in pair.target.files]
    out += [PlannedMapping(m.dest, "directory", sid, pair.group_id, m) for m in pair.target.directories]
    return out


def resolve_target_plan(
    repo: str,
    pairs: Sequence[SourceTargetPair],
    policy: Optional[ConflictResolution] = None,
) -> TargetPlan:
    """
    Combina as contribuições de todas as fontes de um target em um plano.

    Args:
        repo (str): Repositório target.
        pairs (Sequence[SourceTargetPair]): Contribuições na ordem declarada.
        policy (Optional[ConflictResolution]): Política de conflito.

    Returns:
        TargetPlan: Um mapeamento por destino.

    Raises:
        SourceConflictError: Estratégia `error` com destino disputado.
    """
    strategy = _effective_strategy(policy)
    claimed: Dict[str, PlannedMapping] = {}

    for pair in _ordered_pairs(pairs, strategy, policy):
        for planned in _entries(pair):
            key = posixpath.normpath(planned.dest)
            previous = claimed.get(key)
            if previous is None or previous.group_id == planned.group_id:
                claimed[key] = planned
                continue
            if strategy == STRATEGY_ERROR:
                raise SourceConflictError(
                    f"conflict detected for {repo}: destination '{planned.dest}' is claimed by "
                    f"sources '{previous.source_id}' (group '{previous.group_id}') and "
                    f"'{planned.source_id}' (group '{planned.group_id}')",
                    repo=repo,
                    dest=planned.dest,
                    sources=[previous.source_id, planned.source_id],
                    groups=[previous.group_id, planned.group_id],
                )
            if strategy == STRATEGY_PRIORITY:
                continue
            claimed[key] = planned

    sources: List[str] = []
    for pair in pairs:
        if pair.source.display_id not in sources:
            sources.append(pair.source.display_id)

    return TargetPlan(
        repo=repo,
        strategy=strategy,
        sources=tuple(sources),
        mappings=tuple(claimed[key] for key in sorted(claimed)),
    )


def build_execution_plans(config: Config) -> Dict[str, TargetPlan]:
    """
    Produz o plano de cada repositório target da configuração.

    Grupos desabilitados não contribuem.

    Raises:
        ConfigValidationError: Se a configuração estiver no formato flat legado.
        SourceConflictError: Estratégia `error` com destino disputado.
    """
    ensure_groups(config)
    if config.layout is ConfigLayout.FLAT:
        raise ConfigValidationError(
            "conflict resolution applies only to group-based or multi-mapping configs, "
            "not the legacy source/targets form"
        )

    enabled = {g.id for g in config.groups if g.is_enabled}
    repos: List[str] = []
    for group in config.groups:
        if group.id not in enabled:
            continue
        for target in group.targets:
            if target.repo not in repos:
                repos.append(target.repo)

    plans: Dict[str, TargetPlan] = {}
    for repo in repos:
        pairs = [p for p in config.get_target_mappings(repo) if p.group_id in enabled]
        plans[repo] = resolve_target_plan(repo, pairs, config.conflict_resolution)
    return plans
