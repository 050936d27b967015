# src/syncplan/core/validation/context.py
"""
ValidationContext — contexto opcional de uma execução de validação.

O contexto é o único meio de:
    - registrar eventos estruturados de validação (trace)
    - coletar warnings não fatais por etapa
    - sinalizar cancelamento cooperativo (explícito ou por deadline)

Princípios fundamentais:
    - Isolamento por execução (cada validação recebe seu próprio contexto)
    - Nenhuma saída em console; eventos são apenas acumulados
    - Cancelamento é consultado em fronteiras de iteração, nunca preemptivo

Decisões arquiteturais:
    - `cancel()` pode ser chamado de outra thread (`threading.Event`)
    - Eventos `debug`/`trace` só são registrados com `debug=True`
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from syncplan.core.config.errors import ValidationCanceledError

CANCELED_CAUSE = "context canceled"
DEADLINE_CAUSE = "context deadline exceeded"

_VERBOSE_LEVELS = {"debug", "trace"}


class ContextCanceled(Exception):
    """Causa encadeada de um `ValidationCanceledError`."""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ValidationContext:
    """
    Contexto de uma execução de validação.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - debug: registra também eventos `debug`/`trace`
    - timeout: prazo opcional, em segundos, contado a partir da criação
    - warnings: warnings por step_id
    - events: log estruturado de eventos
    """

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=_now_iso)
    debug: bool = False
    timeout: Optional[float] = None

    warnings: Dict[str, List[str]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False)
    _cancel_reason: str = field(default="", repr=False)
    _started: float = field(default_factory=time.monotonic, repr=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        if level in _VERBOSE_LEVELS and not self.debug:
            return
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": _now_iso(),
        }
        event.update(extra)
        self.events.append(event)

    def trace(self, *, step_id: str, message: str, **extra: Any) -> None:
        self.log(step_id=step_id, level="trace", message=message, **extra)

    def add_warning(self, *, step_id: str, message: str) -> None:
        if step_id not in self.warnings:
            self.warnings[step_id] = []
        self.warnings[step_id].append(message)
        self.log(step_id=step_id, level="warning", message=message)

    # -----------------------------
    # Cancelamento cooperativo
    # -----------------------------
    def cancel(self, reason: str = CANCELED_CAUSE) -> None:
        if not self._cancel_event.is_set():
            self._cancel_reason = reason
            self._cancel_event.set()

    @property
    def canceled(self) -> bool:
        return self._cancel_event.is_set() or self._deadline_exceeded()

    def _deadline_exceeded(self) -> bool:
        if self.timeout is None:
            return False
        return time.monotonic() - self._started >= self.timeout

    def check_canceled(self, scope: str = "validation") -> None:
        """
        Interrompe a validação se o contexto foi cancelado ou expirou.

        Raises:
            ValidationCanceledError: Encadeado (`from`) com a causa do cancelamento.
        """
        if self._cancel_event.is_set():
            cause = ContextCanceled(self._cancel_reason or CANCELED_CAUSE)
        elif self._deadline_exceeded():
            cause = ContextCanceled(DEADLINE_CAUSE)
        else:
            return
        self.log(step_id=scope, level="error", message=f"{scope} canceled: {cause}")
        raise ValidationCanceledError(f"{scope} canceled: {cause}", cause=str(cause)) from cause
