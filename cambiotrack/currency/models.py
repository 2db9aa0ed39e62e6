"""
Registros imutáveis usados pelo pipeline de câmbio.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class CurrencyRecord:
    """
    Taxa de uma moeda expressa na moeda base (BRL).

    `rate` é quantos BRL vale 1 unidade de `code`. `change` é sempre 0.0:
    a fonte não fornece um segundo ponto para calcular a variação.
    """

    code: str
    symbol: str
    rate: float
    change: float = 0.0


@dataclass(frozen=True)
class Snapshot:
    """Conjunto validado de taxas, substituído por inteiro a cada busca."""

    records: Tuple[CurrencyRecord, ...]
    observed_at: datetime

    def record_for(self, code: str) -> Optional[CurrencyRecord]:
        code_up = str(code).strip().upper()
        for record in self.records:
            if record.code == code_up:
                return record
        return None

    def rate_for(self, code: str) -> Optional[float]:
        record = self.record_for(code)
        return record.rate if record is not None else None

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(r.code for r in self.records)


@dataclass(frozen=True)
class HistoryPoint:
    label: str
    rate: float


class TimeRange(str, Enum):
    """Intervalos selecionáveis no gráfico de histórico."""

    H24 = "24h"
    D7 = "7d"
    D30 = "30d"
    Y1 = "1y"

    @property
    def buckets(self) -> int:
        """Quantidade N de passos; o histórico tem N + 1 pontos."""
        return _BUCKETS[self]

    @classmethod
    def parse(cls, value) -> "TimeRange":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            validos = ", ".join(r.value for r in cls)
            raise ValueError(
                f"Intervalo inválido: {value!r} (esperado um de: {validos})"
            ) from None


_BUCKETS = {
    TimeRange.H24: 1,
    TimeRange.D7: 7,
    TimeRange.D30: 30,
    TimeRange.Y1: 365,
}
