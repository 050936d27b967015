# tests/core/validation/test_context.py
"""
Tests: validation.context
=========================

Trace estruturado, warnings e cancelamento cooperativo da validação.
"""

import threading

import pytest

from syncplan.core.config.errors import ValidationCanceledError
from syncplan.core.validation.context import ContextCanceled, ValidationContext


# ---------------------------------------------------------------------
# Eventos e warnings
# ---------------------------------------------------------------------

def test_log_event_shape(validation_ctx):
    validation_ctx.log(step_id="validate.start", level="info", message="hello", groups=2)
    (event,) = validation_ctx.events
    assert event["run_id"] == "run-test-001"
    assert event["step_id"] == "validate.start"
    assert event["level"] == "info"
    assert event["message"] == "hello"
    assert event["groups"] == 2
    assert event["timestamp"]


def test_trace_requires_debug():
    ctx = ValidationContext(run_id="r")
    ctx.trace(step_id="s", message="hidden")
    ctx.log(step_id="s", level="debug", message="hidden too")
    ctx.log(step_id="s", level="info", message="visible")
    assert [e["message"] for e in ctx.events] == ["visible"]


def test_add_warning_is_recorded_and_logged(validation_ctx):
    validation_ctx.add_warning(step_id="validate.lists", message="file list 'L' has no files")
    assert validation_ctx.warnings == {"validate.lists": ["file list 'L' has no files"]}
    assert validation_ctx.events[-1]["level"] == "warning"


def test_validation_emits_trace_and_warnings(load_yaml, validation_ctx):
    doc = """\
version: 1
file_lists:
  - id: empty
groups:
  - id: off
    enabled: false
    source: {repo: org/t}
    targets:
      - repo: org/s
        files: [{src: f, dest: f}]
"""
    cfg = load_yaml(doc)
    cfg.validate(validation_ctx)

    steps = {e["step_id"] for e in validation_ctx.events}
    assert {"validate.start", "validate.groups", "validate.dependencies", "validate.end"} <= steps
    assert validation_ctx.warnings["validate.lists"] == ["file list 'empty' has no files"]
    assert validation_ctx.warnings["validate.groups"] == ["group 'off' is disabled"]

    graph = [e for e in validation_ctx.events if e["step_id"] == "validate.dependencies"]
    assert graph[0]["message"].startswith("Dependency Graph:")


# ---------------------------------------------------------------------
# Cancelamento
# ---------------------------------------------------------------------

def test_check_canceled_is_noop_by_default(validation_ctx):
    validation_ctx.check_canceled()
    assert validation_ctx.canceled is False


def test_cancel_surfaces_as_validation_canceled(load_yaml, minimal_groups_yaml, validation_ctx):
    cfg = load_yaml(minimal_groups_yaml)
    validation_ctx.cancel()

    with pytest.raises(ValidationCanceledError) as exc:
        cfg.validate(validation_ctx)

    assert str(exc.value) == "validation canceled: context canceled"
    assert isinstance(exc.value.__cause__, ContextCanceled)


def test_cancel_from_another_thread(validation_ctx):
    worker = threading.Thread(target=validation_ctx.cancel, args=("shutdown requested",))
    worker.start()
    worker.join()

    assert validation_ctx.canceled is True
    with pytest.raises(ValidationCanceledError) as exc:
        validation_ctx.check_canceled("target")
    assert str(exc.value) == "target canceled: shutdown requested"


def test_deadline_behaves_like_cancellation(load_yaml, minimal_groups_yaml):
    ctx = ValidationContext(run_id="r", timeout=0)
    cfg = load_yaml(minimal_groups_yaml)

    with pytest.raises(ValidationCanceledError) as exc:
        cfg.validate(ctx)
    assert "context deadline exceeded" in str(exc.value)


def test_first_cancel_reason_is_kept(validation_ctx):
    validation_ctx.cancel("first")
    validation_ctx.cancel("second")
    with pytest.raises(ValidationCanceledError) as exc:
        validation_ctx.check_canceled()
    assert "first" in str(exc.value)
