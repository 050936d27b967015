# src/syncplan/core/validation/paths.py
"""
Validação de segurança de caminhos relativos ao repositório.

Regras (aplicadas após normalização léxica POSIX):
    - caracteres de controle são rejeitados
    - caminhos absolutos são rejeitados
    - caminhos que escapam da raiz (`..` no início) são rejeitados

`a/../b` normaliza para `b` e é aceito: a verificação ocorre após a
normalização. Qualquer forma normalizada iniciada por `..` é rejeitada,
incluindo nomes como `..hidden`.
"""

from __future__ import annotations

import posixpath

from syncplan.core.config.errors import (
    AbsolutePathError,
    InvalidFormatError,
    PathTraversalError,
)


def _has_control_chars(path: str) -> bool:
    return any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in path)


def normalize_destination(path: str) -> str:
    """Forma canônica usada para comparar destinos (`./a//b/` → `a/b`)."""
    return posixpath.normpath(path)


def check_path(path: str, field: str = "path") -> str:
    """
    Valida um caminho relativo e retorna sua forma normalizada.

    Args:
        path (str): Caminho declarado.
        field (str): Nome do campo, usado na mensagem de erro.

    Returns:
        str: Caminho normalizado.

    Raises:
        InvalidFormatError: Caminho com caracteres de controle.
        AbsolutePathError: Caminho absoluto.
        PathTraversalError: Caminho que escapa da raiz do repositório.
    """
    if _has_control_chars(path):
        raise InvalidFormatError(
            f"invalid {field}: contains control characters: {path!r}",
            field=field,
            value=path,
        )

    normalized = posixpath.normpath(path)

    if posixpath.isabs(normalized):
        raise AbsolutePathError(
            f"absolute path not allowed in {field}: {path}",
            field=field,
            value=path,
        )

    if normalized.startswith(".."):
        raise PathTraversalError(
            f"path traversal detected in {field}: {path}",
            field=field,
            value=path,
        )

    return normalized
