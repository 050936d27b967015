# src/syncplan/core/config/errors.py
"""
Exceções canônicas da camada de configuração do syncplan.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento, a resolução e a validação da declaração de sincronização.

A hierarquia possui dois ramos explicitamente separados:
    - `ConfigLoadError`       → o documento não é bem-formado
                                (arquivo ausente, YAML inválido, campo desconhecido)
    - `ConfigValidationError` → o documento é bem-formado, mas inválido
                                (versão, formatos, caminhos, grafo de grupos)

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - A primeira violação interrompe o processo (fail-fast)
    - Mensagens são claras e direcionadas ao usuário
    - Contexto posicional é acumulado sem trocar o tipo da exceção

Invariantes:
    - Todas as exceções herdam de `ConfigError`
    - `details` é sempre um dicionário serializável
    - A mensagem final contém o valor ofensivo e a posição na declaração

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não escreve em console
"""

from __future__ import annotations

from typing import Any, Dict


class ConfigError(Exception):
    """
    Exceção base para erros de configuração do syncplan.

    Carrega uma mensagem curta e humana e um dicionário `details` com os
    dados estruturados relevantes para diagnóstico (índices, IDs, valor
    ofensivo).

    Decisões arquiteturais:
        - O contexto posicional é adicionado durante a propagação via
          `with_context`, preservando a classe original da exceção
        - `str(err)` sempre reflete a mensagem com todo o contexto acumulado
    """

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details)

    def with_context(self, location: str, **details: Any) -> "ConfigError":
        """Prefixa a mensagem com a posição e retorna a própria exceção."""
        self.message = f"{location}: {self.message}"
        self.args = (self.message,)
        for key, value in details.items():
            # o detalhe mais interno (mais específico) prevalece
            self.details.setdefault(key, value)
        return self

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Load-time: documento não bem-formado
# ---------------------------------------------------------------------------

class ConfigLoadError(ConfigError):
    """Falha ao ler ou decodificar o documento de configuração."""


class ConfigFileNotFoundError(ConfigLoadError):
    """O arquivo de configuração não pôde ser aberto."""


class ConfigParseError(ConfigLoadError):
    """
    Documento YAML malformado ou estruturalmente incompatível com o schema.

    Cobre:
        - erros de sintaxe YAML
        - documento vazio
        - raiz diferente de mapping
        - tipos incompatíveis (ex.: `files` declarado como string)
        - combinação de formatos canônico e legado no mesmo documento
    """


class UnknownFieldError(ConfigParseError):
    """
    Campo desconhecido encontrado durante a decodificação estrita.

    A decodificação estrita é um contrato: qualquer chave não prevista,
    em qualquer nível, rejeita o documento inteiro para capturar erros de
    digitação cedo.
    """


# ---------------------------------------------------------------------------
# Validação semântica: documento bem-formado, porém inválido
# ---------------------------------------------------------------------------

class ConfigValidationError(ConfigError):
    """Base das violações semânticas detectadas na resolução ou na validação."""


class UnsupportedVersionError(ConfigValidationError):
    """Versão do documento diferente da única versão suportada."""


class MissingRequiredFieldError(ConfigValidationError):
    """Campo obrigatório ausente ou vazio."""


class InvalidFormatError(ConfigValidationError):
    """Valor com formato inválido (repo, branch, glob, estratégia)."""


class PathTraversalError(ConfigValidationError):
    """Caminho que escapa da raiz do repositório via `..`."""


class AbsolutePathError(ConfigValidationError):
    """Caminho absoluto onde apenas caminhos relativos são aceitos."""


class DuplicateListIDError(ConfigValidationError):
    """ID de file_list ou directory_list repetido no documento."""


class ListReferenceNotFoundError(ConfigValidationError):
    """Referência a uma lista inexistente a partir de um target."""


class DuplicateGroupIDError(ConfigValidationError):
    """ID de grupo repetido no documento."""


class DuplicateTargetError(ConfigValidationError):
    """Mesmo repositório declarado duas vezes como target de um grupo."""


class DuplicateDestinationError(ConfigValidationError):
    """Dois mapeamentos do mesmo tipo reivindicam o mesmo destino."""


class FileDirectoryDestinationConflictError(ConfigValidationError):
    """Um arquivo e um diretório reivindicam o mesmo destino."""


class NoMappingsError(ConfigValidationError):
    """Target sem nenhum mapeamento de arquivo ou diretório."""


class EmptyLabelError(ConfigValidationError):
    """Label de PR vazio ou composto apenas por espaços."""


class SelfDependencyError(ConfigValidationError):
    """Grupo que declara dependência de si mesmo."""


class UnknownDependencyError(ConfigValidationError):
    """Grupo que depende de um ID de grupo inexistente."""


class CircularDependencyError(ConfigValidationError):
    """O grafo `depends_on` entre grupos contém um ciclo."""


class ValidationCanceledError(ConfigValidationError):
    """
    Validação abandonada por cancelamento cooperativo.

    A causa do cancelamento é sempre encadeada via `raise ... from cause`.
    """


class SourceConflictError(ConfigValidationError):
    """Mais de uma fonte reivindica o mesmo destino sob a estratégia `error`."""
