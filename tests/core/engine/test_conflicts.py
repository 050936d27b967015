# tests/core/engine/test_conflicts.py
"""
Tests: engine.conflicts
=======================

Resolução de conflitos quando várias fontes sincronizam o mesmo target.
As asserções são feitas por destino, nunca pela ordem dos mapeamentos.
"""

import dataclasses

import pytest
import yaml

from syncplan.core.config.errors import ConfigValidationError, SourceConflictError
from syncplan.core.config.schema import ConflictResolution
from syncplan.core.engine.conflicts import build_execution_plans, resolve_target_plan


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def two_sources(strategy=None, priority=None, enabled_b=True, b_directories=False):
    b_target = {"repo": "org/service"}
    if b_directories:
        b_target["directories"] = [{"src": "docs", "dest": "shared.txt"}]
    else:
        b_target["files"] = [{"src": "b.txt", "dest": "shared.txt"}, {"src": "only-b", "dest": "b-only"}]
    doc = {
        "version": 1,
        "groups": [
            {
                "id": "a",
                "source": {"repo": "org/templates", "id": "templates"},
                "targets": [
                    {
                        "repo": "org/service",
                        "files": [{"src": "a.txt", "dest": "shared.txt"}, {"src": "only-a", "dest": "a-only"}],
                    }
                ],
            },
            {
                "id": "b",
                "enabled": enabled_b,
                "source": {"repo": "org/security"},
                "targets": [b_target],
            },
        ],
    }
    if strategy is not None:
        doc["conflict_resolution"] = {"strategy": strategy, "priority": priority or []}
    return yaml.safe_dump(doc, sort_keys=False)


# ---------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------

def test_default_strategy_is_last_wins(load_yaml):
    cfg = load_yaml(two_sources())
    plan = build_execution_plans(cfg)["org/service"]

    assert plan.strategy == "last-wins"
    assert plan.sources == ("templates", "org/security")
    assert plan.destinations() == {"shared.txt", "a-only", "b-only"}
    assert plan.get("shared.txt").source_id == "org/security"
    assert plan.get("shared.txt").mapping.src == "b.txt"


def test_priority_first_claim_wins(load_yaml):
    cfg = load_yaml(two_sources("priority", ["templates"]))
    plan = build_execution_plans(cfg)["org/service"]

    assert plan.get("shared.txt").source_id == "templates"
    assert plan.get("b-only").source_id == "org/security"


def test_priority_order_follows_list(load_yaml):
    cfg = load_yaml(two_sources("priority", ["org/security", "templates"]))
    plan = build_execution_plans(cfg)["org/service"]
    assert plan.get("shared.txt").mapping.src == "b.txt"


def test_error_strategy_names_both_sources(load_yaml):
    cfg = load_yaml(two_sources("error"))
    with pytest.raises(SourceConflictError) as exc:
        build_execution_plans(cfg)
    message = str(exc.value)
    assert "shared.txt" in message
    assert "'templates'" in message
    assert "'org/security'" in message


def test_files_and_directories_share_namespace(load_yaml):
    cfg = load_yaml(two_sources("error", b_directories=True))
    with pytest.raises(SourceConflictError):
        build_execution_plans(cfg)


def test_disabled_group_does_not_contribute(load_yaml):
    cfg = load_yaml(two_sources("error", enabled_b=False))
    plan = build_execution_plans(cfg)["org/service"]
    assert plan.sources == ("templates",)
    assert plan.destinations() == {"shared.txt", "a-only"}


def test_single_source_has_no_conflict(load_yaml, mappings_yaml):
    cfg = load_yaml(mappings_yaml)
    pairs = cfg.get_target_mappings("org/service")[:1]

    plan = resolve_target_plan("org/service", pairs, ConflictResolution(strategy="error"))
    assert plan.has_multiple_sources is False
    assert plan.get("shared.txt").source_id == "templates"


def test_unknown_strategy_falls_back_to_last_wins(load_yaml, mappings_yaml):
    cfg = load_yaml(mappings_yaml)
    pairs = cfg.get_target_mappings("org/service")

    plan = resolve_target_plan("org/service", pairs, ConflictResolution(strategy="whatever"))
    assert plan.strategy == "last-wins"
    assert plan.get("shared.txt").mapping.src == "b.txt"


def test_targets_are_not_mutated(load_yaml):
    cfg = load_yaml(two_sources("priority", ["templates"]))
    before = cfg.to_dict()
    plan = build_execution_plans(cfg)["org/service"]

    assert cfg.to_dict() == before
    with pytest.raises(dataclasses.FrozenInstanceError):
        plan.repo = "org/other"


def test_flat_form_is_rejected(load_yaml, flat_yaml):
    cfg = load_yaml(flat_yaml)
    with pytest.raises(ConfigValidationError):
        build_execution_plans(cfg)


def same_source_two_groups(strategy=None, priority=None):
    groups = []
    for gid, branch, src in (("a", "main", "a.txt"), ("b", "dev", "b.txt")):
        groups.append(
            {
                "id": gid,
                "source": {"repo": "org/tmpl", "branch": branch},
                "targets": [{"repo": "org/service", "files": [{"src": src, "dest": "x"}]}],
            }
        )
    doc = {"version": 1, "groups": groups}
    if strategy is not None:
        doc["conflict_resolution"] = {"strategy": strategy, "priority": priority or []}
    return yaml.safe_dump(doc, sort_keys=False)


def test_same_source_in_two_groups_conflicts(load_yaml):
    """
    Dois grupos com o mesmo repositório de origem (branches diferentes)
    disputando um destino são contribuintes distintos.
    """
    cfg = load_yaml(same_source_two_groups("error"))
    with pytest.raises(SourceConflictError) as exc:
        build_execution_plans(cfg)
    message = str(exc.value)
    assert "'org/tmpl'" in message
    assert "group 'a'" in message
    assert "group 'b'" in message
    assert exc.value.details["groups"] == ["a", "b"]


def test_same_source_in_two_groups_priority_keeps_first(load_yaml):
    cfg = load_yaml(same_source_two_groups("priority", ["org/tmpl"]))
    plan = build_execution_plans(cfg)["org/service"]

    assert plan.sources == ("org/tmpl",)
    assert plan.get("x").group_id == "a"
    assert plan.get("x").mapping.src == "a.txt"


def test_same_source_in_two_groups_last_wins(load_yaml):
    cfg = load_yaml(same_source_two_groups())
    plan = build_execution_plans(cfg)["org/service"]
    assert plan.get("x").group_id == "b"
    assert plan.get("x").mapping.src == "b.txt"
