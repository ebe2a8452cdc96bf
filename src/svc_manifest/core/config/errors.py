"""
Erros dos defaults de plataforma (camadas 2, 3 e 4).

Um arquivo de defaults inválido é um problema de instalação, não do
manifest do autor: estes erros são levantados ao construir o orquestrador,
antes de qualquer `validate`/`plan`, e nunca são convertidos em warning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .. import errors as codes
from ..exceptions import ManifestException


@dataclass(frozen=True)
class ConfigError(ManifestException):
    """Base dos erros de defaults de plataforma."""

    code: ClassVar[str] = codes.PLATFORM_DEFAULTS_INVALID


@dataclass(frozen=True)
class DefaultsNotFoundError(ConfigError):
    """Arquivo de defaults obrigatório ausente."""

    code: ClassVar[str] = codes.PLATFORM_DEFAULTS_NOT_FOUND


@dataclass(frozen=True)
class UnsupportedConfigFormatError(ConfigError):
    """Extensão sem leitor registrado (aceitos: .yaml, .yml, .json)."""


@dataclass(frozen=True)
class InvalidConfigRootTypeError(ConfigError):
    """Raiz que não é mapa, seção desconhecida ou seção que não é mapa."""
