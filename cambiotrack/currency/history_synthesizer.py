"""
Geração do histórico exibido no gráfico.

O plano gratuito da ExchangeRate-API não possui endpoint de histórico, então
a série é SIMULADA: pontos aleatórios em torno da taxa atual. Os chamadores
dependem apenas de `HistoryProvider`, para que um provedor com dados reais
possa substituir o simulador sem alterações no restante do sistema.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Union

from .models import HistoryPoint, Snapshot, TimeRange

FALLBACK_BASE_RATE = 5.0
MAX_VARIATION = 0.2


def resolve_base_rate(snapshot: Optional[Snapshot], code: str) -> float:
    """Taxa atual de `code` no snapshot, ou 5.0 se não houver correspondência."""
    if snapshot is None:
        return FALLBACK_BASE_RATE
    rate = snapshot.rate_for(code)
    return rate if rate else FALLBACK_BASE_RATE


class HistoryProvider(ABC):
    """Interface de qualquer fonte de histórico para o gráfico."""

    @abstractmethod
    def get_history(
        self,
        base_rate: float,
        time_range: Union[TimeRange, str],
        now: datetime,
    ) -> List[HistoryPoint]:
        """Série ordenada do ponto mais antigo para o mais recente."""


class HistorySynthesizer(HistoryProvider):
    """
    Gera N + 1 pontos (N = 1, 7, 30 ou 365 conforme o intervalo) com
    variação uniforme em [-0.1, +0.1) ao redor de `base_rate`.

    A fonte de aleatoriedade é injetável; sem cache, cada chamada gera uma
    série nova.
    """

    def __init__(self, random_source: Optional[Callable[[], float]] = None) -> None:
        self.random_source = random_source or random.random

    def get_history(self, base_rate, time_range, now):
        return self.synthesize(base_rate, time_range, now)

    def synthesize(
        self,
        base_rate: float,
        time_range: Union[TimeRange, str],
        now: datetime,
    ) -> List[HistoryPoint]:
        time_range = TimeRange.parse(time_range)
        pontos: List[HistoryPoint] = []

        for i in range(time_range.buckets, -1, -1):
            if time_range is TimeRange.H24:
                label = (now - timedelta(hours=i)).strftime("%H:%M")
            else:
                label = (now - timedelta(days=i)).strftime("%d/%m")

            variacao = (self.random_source() - 0.5) * MAX_VARIATION
            pontos.append(HistoryPoint(label=label, rate=round(base_rate + variacao, 2)))

        return pontos
