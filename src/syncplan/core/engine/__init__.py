# src/syncplan/core/engine/__init__.py
"""
Engine do syncplan.

Este pacote reúne o que o executor de sincronização consome depois que a
configuração foi validada:
    - planner   → certificação de que o grafo `depends_on` é um DAG
    - conflicts → plano somente-leitura por target quando várias fontes
                  sincronizam o mesmo repositório

Limites explícitos:
    - Não calcula ordem de execução
    - Não executa sincronização
"""

from .conflicts import (
    CONFLICT_STRATEGIES,
    DEFAULT_STRATEGY,
    PlannedMapping,
    TargetPlan,
    build_execution_plans,
    resolve_target_plan,
)
from .planner import describe_dependency_graph, validate_group_dependencies

__all__ = [
    "CONFLICT_STRATEGIES",
    "DEFAULT_STRATEGY",
    "PlannedMapping",
    "TargetPlan",
    "build_execution_plans",
    "describe_dependency_graph",
    "resolve_target_plan",
    "validate_group_dependencies",
]
