# src/syncplan/core/__init__.py
"""
Core do syncplan.

Componentes principais:
    - config     → schema, loader, adaptador legado, defaults e listas
    - validation → validadores puros e o orquestrador `validate_config`
    - engine     → grafo `depends_on` e resolução de conflitos multi-fonte

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Fail-fast: a primeira violação interrompe o processo
    - Nenhum estado compartilhado além de constantes imutáveis
"""
