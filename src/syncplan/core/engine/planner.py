# src/syncplan/core/engine/planner.py
"""
Validação do grafo de dependências entre grupos (`depends_on`).

O validador opera exclusivamente em nível estrutural, analisando:
    - identificadores de grupos
    - dependências declaradas
    - formação de ciclos

Decisões arquiteturais:
    - Primeira passada: toda dependência deve existir e nenhum grupo pode
      depender de si mesmo
    - Segunda passada: DFS com coloração em três estados
      (não visitado / na pilha / concluído)
    - Custo linear em grupos + arestas

Invariantes:
    - Um grafo aceito é um DAG

Limites explícitos:
    - Não calcula nem retorna ordem de execução; o executor deriva qualquer
      ordenação topológica válida a partir das mesmas arestas
    - Não executa grupos
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from syncplan.core.config.errors import (
    CircularDependencyError,
    SelfDependencyError,
    UnknownDependencyError,
)
from syncplan.core.config.schema import Group

_UNVISITED = 0
_ON_STACK = 1
_DONE = 2


def _adjacency(groups: Iterable[Group]) -> Dict[str, List[str]]:
    graph: Dict[str, List[str]] = {}
    for group in groups:
        graph[group.id] = list(group.depends_on)
    return graph


def validate_group_dependencies(groups: Iterable[Group]) -> None:
    """
    Certifica que o grafo `depends_on` dos grupos é um DAG.

    Args:
        groups (Iterable[Group]): Todos os grupos da configuração.

    Raises:
        SelfDependencyError: Se um grupo depender de si mesmo.
        UnknownDependencyError: Se um grupo depender de um ID inexistente.
        CircularDependencyError: Se houver ciclo no grafo.
    """
    graph = _adjacency(groups)

    for gid, deps in graph.items():
        for dep in deps:
            if dep == gid:
                raise SelfDependencyError(f"group '{gid}' cannot depend on itself", group=gid)
            if dep not in graph:
                raise UnknownDependencyError(
                    f"group '{gid}' depends on unknown group '{dep}'",
                    group=gid,
                    dependency=dep,
                )

    state: Dict[str, int] = {gid: _UNVISITED for gid in graph}

    def visit(gid: str, path: List[str]) -> None:
        state[gid] = _ON_STACK
        path.append(gid)
        for dep in graph[gid]:
            if state[dep] == _ON_STACK:
                cycle = path[path.index(dep):] + [dep]
                raise CircularDependencyError(
                    f"circular dependency detected involving group '{gid}': {' -> '.join(cycle)}",
                    group=gid,
                    cycle=cycle,
                )
            if state[dep] == _UNVISITED:
                visit(dep, path)
        path.pop()
        state[gid] = _DONE

    for gid in graph:
        if state[gid] == _UNVISITED:
            visit(gid, [])


def describe_dependency_graph(groups: Iterable[Group]) -> str:
    """Renderiza o grafo de dependências em texto legível (trace/debug)."""
    lines = ["Dependency Graph:"]
    for group in groups:
        status = "" if group.is_enabled else " [disabled]"
        if group.depends_on:
            lines.append(f"  {group.id}{status} -> {', '.join(group.depends_on)}")
        else:
            lines.append(f"  {group.id}{status} (no dependencies)")
    return "\n".join(lines)
