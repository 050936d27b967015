# tests/core/config/test_schema.py
"""
Tests: config.schema
====================

Decodificação estrita do documento e comportamento do modelo de dados
(TriState, clone de DirectoryMapping, acessores de Config).
"""

import pytest

from syncplan.core.config.errors import ConfigParseError, UnknownFieldError
from syncplan.core.config.schema import (
    Config,
    DirectoryMapping,
    ModuleConfig,
    Transform,
    TriState,
    decode_config,
)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def make_doc(**target):
    base_target = {"repo": "org/s", "files": [{"src": "f", "dest": "f"}]}
    base_target.update(target)
    return {
        "version": 1,
        "groups": [{"id": "g", "source": {"repo": "org/t"}, "targets": [base_target]}],
    }


# ---------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------

def test_unknown_top_level_field():
    doc = make_doc()
    doc["verison"] = 1
    with pytest.raises(UnknownFieldError) as exc:
        decode_config(doc)
    assert "verison" in str(exc.value)
    assert exc.value.details["fields"] == ["verison"]


def test_unknown_nested_field_reports_dotted_path():
    doc = make_doc(directories=[{"src": "a", "dest": "b", "exlude": ["*.tmp"]}])
    with pytest.raises(UnknownFieldError) as exc:
        decode_config(doc)
    assert "groups[0].targets[0].directories[0]" in str(exc.value)
    assert "exlude" in str(exc.value)


def test_unknown_field_is_a_parse_error():
    doc = make_doc()
    doc["groups"][0]["source"]["ref"] = "main"
    with pytest.raises(ConfigParseError):
        decode_config(doc)


def test_wrong_type_is_rejected():
    doc = make_doc(files="README.md")
    with pytest.raises(ConfigParseError) as exc:
        decode_config(doc)
    assert "groups[0].targets[0].files" in str(exc.value)


def test_bool_field_rejects_string():
    doc = make_doc(directories=[{"src": "a", "dest": "b", "preserve_structure": "yes please"}])
    with pytest.raises(ConfigParseError):
        decode_config(doc)


def test_groups_and_flat_form_cannot_be_mixed():
    doc = make_doc()
    doc["source"] = {"repo": "org/t"}
    with pytest.raises(ConfigParseError):
        decode_config(doc)


def test_mappings_and_flat_form_cannot_be_mixed():
    doc = {
        "version": 1,
        "targets": [{"repo": "org/s"}],
        "mappings": [{"source": {"repo": "org/t"}}],
    }
    with pytest.raises(ConfigParseError):
        decode_config(doc)


def test_exclude_distinguishes_unset_from_empty():
    doc = make_doc(
        directories=[
            {"src": "a", "dest": "a"},
            {"src": "b", "dest": "b", "exclude": []},
        ]
    )
    cfg = decode_config(doc)
    dirs = cfg.groups[0].targets[0].directories
    assert dirs[0].exclude is None
    assert dirs[1].exclude == []


def test_tristate_values_are_decoded():
    doc = make_doc(
        directories=[{"src": "a", "dest": "a", "include_hidden": False, "preserve_structure": True}]
    )
    doc["groups"][0]["enabled"] = False
    cfg = decode_config(doc)
    dmap = cfg.groups[0].targets[0].directories[0]
    assert dmap.include_hidden is TriState.FALSE
    assert dmap.preserve_structure is TriState.TRUE
    assert cfg.groups[0].enabled is TriState.FALSE
    assert cfg.groups[0].is_enabled is False


def test_tristate_resolution():
    assert TriState.from_value(None) is TriState.UNSET
    assert TriState.UNSET.resolve(True) is True
    assert TriState.UNSET.resolve(False) is False
    assert TriState.FALSE.resolve(True) is False
    assert TriState.TRUE.is_set
    assert not TriState.UNSET.is_set


def test_directory_clone_is_independent():
    original = DirectoryMapping(
        src="a",
        dest="b",
        exclude=["*.tmp"],
        include_only=["*.go"],
        transform=Transform(repo_name=True, variables={"K": "V"}),
        module=ModuleConfig(type="go", version="v1.0.0"),
    )
    clone = original.clone()

    clone.exclude.append("*.log")
    clone.include_only.clear()
    clone.transform.variables["K"] = "changed"
    clone.module.version = "v2.0.0"

    assert original.exclude == ["*.tmp"]
    assert original.include_only == ["*.go"]
    assert original.transform.variables == {"K": "V"}
    assert original.module.version == "v1.0.0"


def test_scalar_strings_are_coerced():
    doc = make_doc(branch=1.0)
    cfg = decode_config(doc)
    assert cfg.groups[0].targets[0].branch == "1.0"


def test_to_dict_is_plain():
    cfg = decode_config(make_doc())
    out = cfg.to_dict()
    assert out["groups"][0]["id"] == "g"
    assert out["groups"][0]["enabled"] == "unset"
    assert out["layout"] == "groups"


def test_empty_config_has_no_groups():
    cfg = Config(version=1)
    assert cfg.get_groups() == []
    assert cfg.is_group_based() is False
