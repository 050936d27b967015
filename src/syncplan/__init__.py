# src/syncplan/__init__.py
"""
syncplan — resolução e validação de declarações de sincronização multi-repositório.

Uma declaração YAML descreve quais arquivos e diretórios de um repositório
fonte devem ser mantidos em sincronia em um conjunto de repositórios target.
Este pacote carrega essa declaração, completa seus defaults, expande listas
reutilizáveis e certifica que ela é segura e consistente antes que qualquer
executor aja sobre ela.

Arquitetura em alto nível:
    - core.config     → modelo de dados, carregamento, legado, defaults e listas
    - core.validation → caminhos, nomes, targets e orquestração da validação
    - core.engine     → grafo de dependências entre grupos e conflitos multi-fonte

Limites explícitos:
    - Não transfere arquivos nem abre pull requests
    - Não avalia variáveis de transformação
    - Não escreve em console
"""

from .core.config import Config, load, load_from_reader
from .core.validation import ValidationContext, validate_config

__all__ = ["Config", "ValidationContext", "load", "load_from_reader", "validate_config"]
