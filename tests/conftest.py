# tests/conftest.py
"""
Fixtures compartilhados para testes do syncplan.

Este módulo define fixtures reutilizáveis que fornecem:
- documentos YAML mínimos e determinísticos (formato canônico e legados)
- um loader de strings YAML sem acesso a filesystem
- contexto de validação controlado (ValidationContext)

Decisões arquiteturais:
    - Documentos são fornecidos como strings para evitar I/O
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture realiza I/O
    - Todas as fixtures são seguras para execução em paralelo
"""

import io

import pytest


# =====================================================
# Documentos YAML
# =====================================================

@pytest.fixture
def minimal_groups_yaml() -> str:
    """
    Documento canônico mínimo: um grupo, uma fonte, um target, um arquivo.

    Nenhum default é declarado, de forma que o cascateamento completo
    (branch, prefixo, labels, enabled) possa ser observado.

    Returns:
        str: Conteúdo YAML válido.
    """
    return """\
version: 1
groups:
  - id: g
    source:
      repo: org/t
    targets:
      - repo: org/s
        files:
          - src: f
            dest: f
"""


@pytest.fixture
def flat_yaml() -> str:
    """Documento no formato legado flat (`source` + `targets`)."""
    return """\
version: 1
source:
  repo: org/template
  branch: develop
defaults:
  branch_prefix: sync/template
  pr_labels: [sync]
targets:
  - repo: org/service-a
    files:
      - src: .github/workflows/ci.yml
        dest: .github/workflows/ci.yml
  - repo: org/service-b
    files:
      - src: Makefile
        dest: Makefile
"""


@pytest.fixture
def mappings_yaml() -> str:
    """Documento no formato legado multi-source (`mappings`)."""
    return """\
version: 1
defaults:
  pr_labels: [from-top]
mappings:
  - source:
      repo: org/templates
      id: templates
    targets:
      - repo: org/service
        files:
          - src: a.txt
            dest: shared.txt
  - source:
      repo: org/security
    defaults:
      branch_prefix: chore/security
    targets:
      - repo: org/service
        files:
          - src: b.txt
            dest: shared.txt
"""


@pytest.fixture
def lists_yaml() -> str:
    """
    Documento com listas reutilizáveis referenciadas por dois targets.

    - file list `L` mapeia README.md
    - directory list `D` não declara preserve_structure nem exclude
    - o primeiro target também declara README.md inline (deve vencer)
    """
    return """\
version: 1
file_lists:
  - id: L
    name: Common files
    files:
      - src: templates/README.md
        dest: README.md
      - src: LICENSE
        dest: LICENSE
directory_lists:
  - id: D
    directories:
      - src: .github/workflows
        dest: .github/workflows
        module:
          type: go
          version: v1.2.0
groups:
  - id: core
    source:
      repo: org/templates
    targets:
      - repo: org/service-a
        file_list_refs: [L]
        directory_list_refs: [D]
        files:
          - src: custom/README.md
            dest: README.md
      - repo: org/service-b
        file_list_refs: [L]
        directory_list_refs: [D]
"""


# =====================================================
# Loader / contexto
# =====================================================

@pytest.fixture
def load_yaml():
    """
    Fixture factory que carrega um documento YAML a partir de uma string.

    Returns:
        Callable[[str], Config]: Função que executa `load_from_reader` sobre
        um stream em memória.
    """
    from syncplan.core.config.loader import load_from_reader

    def _load(text: str):
        return load_from_reader(io.StringIO(text))

    return _load


@pytest.fixture
def validation_ctx():
    """
    Fixture que fornece um ValidationContext determinístico para testes.

    `debug=True` para que eventos de trace também sejam registrados.
    """
    from syncplan.core.validation.context import ValidationContext

    return ValidationContext(
        run_id="run-test-001",
        created_at="2026-01-16T00:00:00+00:00",
        debug=True,
    )
