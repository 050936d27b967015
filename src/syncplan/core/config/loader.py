# src/syncplan/core/config/loader.py
"""
Loader canônico da declaração de sincronização.

Este módulo lê um documento YAML (de um caminho ou de um stream) e produz
um `Config` pronto para validação.

Pipeline de carregamento:
    1. leitura do documento (`yaml.safe_load`)
    2. decodificação estrita (`schema.decode_config`)
    3. adaptação dos formatos legados (`legacy.ensure_groups`)
    4. cascateamento de defaults (`defaults.apply_defaults`)
    5. resolução de referências de listas (`lists.resolve_list_references`)
    6. defaults de diretório sobre as entradas resolvidas

Princípios fundamentais:
    - Erros de carregamento (`ConfigLoadError`) são distintos de erros
      semânticos (`ConfigValidationError`)
    - Nenhuma heurística implícita é aplicada
    - A mesma entrada sempre produz o mesmo `Config`

Limites explícitos:
    - Não valida semântica (ver `Config.validate`)
    - Não realiza retry de leitura
    - Não lê variáveis de ambiente
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Union

import yaml  # PyYAML

from .defaults import apply_defaults, apply_directory_defaults
from .errors import ConfigError, ConfigFileNotFoundError, ConfigParseError
from .legacy import ensure_groups
from .lists import resolve_list_references
from .schema import Config, decode_config


def _parse_yaml(stream: Union[IO[str], IO[bytes]]) -> Any:
    try:
        data = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise ConfigParseError(f"failed to parse YAML: {exc}") from exc

    if data is None:
        raise ConfigParseError("failed to parse YAML: empty document")

    return data


def load_from_reader(stream: Union[IO[str], IO[bytes]]) -> Config:
    """
    Carrega uma configuração a partir de um stream de texto ou bytes.

    Args:
        stream: Stream aberto contendo o documento YAML.

    Returns:
        Config: Configuração decodificada, com defaults e listas resolvidos.

    Raises:
        ConfigParseError: YAML inválido, documento vazio, raiz que não é
            mapping ou tipos incompatíveis.
        UnknownFieldError: Chave desconhecida em qualquer nível.
        DuplicateListIDError: IDs de lista repetidos.
        ListReferenceNotFoundError: Referência a lista inexistente.
    """
    data = _parse_yaml(stream)
    config = decode_config(data)

    ensure_groups(config)
    apply_defaults(config)

    try:
        resolve_list_references(config)
    except ConfigError as err:
        err.with_context("failed to resolve list references")
        raise

    for group in config.groups:
        for target in group.targets:
            for mapping in target.directories:
                apply_directory_defaults(mapping)

    return config


def load(path: Union[str, Path]) -> Config:
    """
    Carrega uma configuração a partir de um arquivo YAML.

    Args:
        path: Caminho do arquivo de configuração.

    Returns:
        Config: Configuração carregada (ainda não validada).

    Raises:
        ConfigFileNotFoundError: Se o arquivo não puder ser aberto.
        ConfigParseError / UnknownFieldError: Ver `load_from_reader`.
    """
    config_path = Path(path)
    try:
        handle = config_path.open("r", encoding="utf-8")
    except OSError as exc:
        raise ConfigFileNotFoundError(
            f"failed to open config file: {config_path}: {exc.strerror or exc}",
            path=str(config_path),
        ) from exc

    with handle:
        return load_from_reader(handle)
