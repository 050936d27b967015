# src/syncplan/core/validation/names.py
"""
Validadores de identificadores: repositórios e branches.

Formatos aceitos:
    - repositório: `org/repo`, cada segmento iniciando com alfanumérico,
      seguido de caracteres de palavra, pontos ou hífens
    - branch: inicia com alfanumérico, seguido de caracteres de palavra,
      pontos, barras ou hífens

Os padrões são compilados uma única vez e são seguros para leitura
concorrente.
"""

from __future__ import annotations

import re

from syncplan.core.config.errors import InvalidFormatError, PathTraversalError

REPO_PATTERN = re.compile(r"^[a-zA-Z0-9][\w.-]*/[a-zA-Z0-9][\w.-]*$", re.ASCII)
BRANCH_PATTERN = re.compile(r"^[a-zA-Z0-9][\w./-]*$", re.ASCII)

MAX_REPO_NAME_LENGTH = 200
MAX_BRANCH_NAME_LENGTH = 255


def validate_repo_name(value: str) -> None:
    """
    Valida um nome de repositório no formato `org/repo`.

    Raises:
        InvalidFormatError: Formato, tamanho ou segmento inválido.
        PathTraversalError: Nome contendo `..`.
    """
    if len(value) > MAX_REPO_NAME_LENGTH:
        raise InvalidFormatError(
            f"repository name too long (max {MAX_REPO_NAME_LENGTH} characters): {value}",
            value=value,
        )
    if ".." in value:
        raise PathTraversalError(f"path traversal detected in repository name: {value}", value=value)
    if not REPO_PATTERN.match(value):
        raise InvalidFormatError(f"invalid repository format (expected: org/repo): {value}", value=value)
    if any(segment.endswith(".") for segment in value.split("/")):
        raise InvalidFormatError(
            f"invalid repository format (segment cannot end with '.'): {value}",
            value=value,
        )


def validate_branch_name(value: str, field: str = "branch name") -> None:
    """
    Valida um nome de branch (ou prefixo de branch, via `field`).

    Raises:
        InvalidFormatError: Nome fora do padrão ou com sequência proibida.
    """
    reason = ""
    if len(value) > MAX_BRANCH_NAME_LENGTH:
        reason = f"too long (max {MAX_BRANCH_NAME_LENGTH} characters)"
    elif not BRANCH_PATTERN.match(value):
        reason = "must start with an alphanumeric character and contain only word characters, '.', '/' or '-'"
    elif ".." in value:
        reason = "cannot contain '..'"
    elif "//" in value:
        reason = "cannot contain '//'"
    elif value.endswith("/"):
        reason = "cannot end with '/'"
    elif value.endswith(".lock"):
        reason = "cannot end with '.lock'"

    if reason:
        raise InvalidFormatError(f"invalid {field}: {value} ({reason})", field=field, value=value)


def validate_branch_prefix(value: str) -> None:
    validate_branch_name(value, field="branch prefix")
