"""
Taxonomia de falhas da busca de taxas e o resultado devolvido ao chamador.

Nenhuma dessas exceções escapa de `RateFetcher.fetch()`: elas viajam dentro
de um `FetchResult` e são convertidas em uma única mensagem para o usuário.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Snapshot

ERROR_PREFIX = "Erro ao carregar taxas de câmbio"


class FetchError(Exception):
    """Base de todas as falhas de busca de taxas."""

    @property
    def cause(self) -> str:
        return str(self) or self.__class__.__name__


class TransportError(FetchError):
    """Falha de rede, DNS ou timeout ao acessar a fonte de cotações."""


class UpstreamRejection(FetchError):
    """A fonte respondeu, mas com `result` diferente de "success"."""

    def __init__(self, message: str, error_type: Optional[str] = None) -> None:
        super().__init__(message)
        self.error_type = error_type


class ConfigurationError(FetchError):
    """Chave da API ou URL base ausente."""


class InvalidPayloadError(FetchError):
    """Resposta ilegível ou com taxa ausente/não positiva para uma moeda."""


@dataclass(frozen=True)
class FetchResult:
    snapshot: Optional[Snapshot] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.snapshot is not None

    @classmethod
    def success(cls, snapshot: Snapshot) -> "FetchResult":
        return cls(snapshot=snapshot)

    @classmethod
    def failure(cls, error: FetchError) -> "FetchResult":
        return cls(error=error)


def format_error_message(error: BaseException) -> str:
    """Mensagem única exibida ao usuário para qualquer falha de busca."""
    if isinstance(error, FetchError):
        cause = error.cause
    else:
        cause = str(error) or error.__class__.__name__
    return f"{ERROR_PREFIX}: {cause}"
