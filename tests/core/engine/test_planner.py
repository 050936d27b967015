# tests/core/engine/test_planner.py
"""
Testes do validador do grafo de dependências entre grupos.

Os testes asseguram que:
- cadeias e DAGs ramificados são aceitos
- auto-dependência, dependência desconhecida e ciclos são rejeitados
- o validador apenas certifica o grafo (não retorna ordem)
"""

import pytest

try:
    from syncplan.core.config.errors import (
        CircularDependencyError,
        SelfDependencyError,
        UnknownDependencyError,
    )
    from syncplan.core.config.schema import Group, TriState
    from syncplan.core.engine.planner import describe_dependency_graph, validate_group_dependencies
except Exception as e:  # noqa: BLE001
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing dependency graph validator. Implement:
- src/syncplan/core/engine/planner.py (validate_group_dependencies)
Import error: {_IMPORT_ERR}
""")


def make_groups(edges):
    return [Group(id=gid, depends_on=list(deps)) for gid, deps in edges]


def test_chain_and_diamond_are_accepted():
    """
    Verifica que grafos acíclicos são certificados.

    Invariantes:
        - Nenhuma exceção é levantada
        - Nenhuma ordem é retornada
    """
    _require_imports()
    groups = make_groups(
        [("a", []), ("b", ["a"]), ("c", ["a"]), ("d", ["b", "c"])]
    )
    assert validate_group_dependencies(groups) is None


def test_two_node_cycle():
    _require_imports()
    with pytest.raises(CircularDependencyError) as exc:
        validate_group_dependencies(make_groups([("a", ["b"]), ("b", ["a"])]))
    assert "a -> b -> a" in str(exc.value)


def test_long_cycle_names_discovering_group():
    """
    Verifica que ciclos longos são detectados e identificados.

    A mensagem nomeia o grupo que descobriu o ciclo e o caminho percorrido.
    """
    _require_imports()
    groups = make_groups([("a", ["b"]), ("b", ["c"]), ("c", ["a"]), ("d", [])])
    with pytest.raises(CircularDependencyError) as exc:
        validate_group_dependencies(groups)
    assert exc.value.details["group"] == "c"
    assert exc.value.details["cycle"] == ["a", "b", "c", "a"]


def test_self_dependency():
    _require_imports()
    with pytest.raises(SelfDependencyError) as exc:
        validate_group_dependencies(make_groups([("x", ["x"])]))
    assert "group 'x' cannot depend on itself" in str(exc.value)


def test_unknown_dependency_names_both_groups():
    _require_imports()
    with pytest.raises(UnknownDependencyError) as exc:
        validate_group_dependencies(make_groups([("y", ["nonexistent"])]))
    assert "'y'" in str(exc.value)
    assert "'nonexistent'" in str(exc.value)


def test_describe_dependency_graph():
    _require_imports()
    groups = make_groups([("a", []), ("b", ["a"])])
    groups[0].enabled = TriState.FALSE
    text = describe_dependency_graph(groups)
    assert text.splitlines() == [
        "Dependency Graph:",
        "  a [disabled] (no dependencies)",
        "  b -> a",
    ]
