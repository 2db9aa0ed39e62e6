"""
Utilitários para conversão de valores entre moedas usando o snapshot atual.
"""

from __future__ import annotations

from typing import Optional

from ..utils.normalization import parse_amount
from .models import Snapshot

ZERO_DISPLAY = "0.00"


class ConversionCalculator:
    """
    Converte valores entre moedas suportadas a partir das taxas em BRL:
    - Taxa cruzada entre duas moedas
    - Valor convertido formatado para exibição (2 casas decimais)
    """

    def _rate_or_default(self, snapshot: Optional[Snapshot], code: str) -> float:
        # Moeda ausente (ou sem snapshot) vale 1.0: fallback deliberado.
        if snapshot is None:
            return 1.0
        rate = snapshot.rate_for(code)
        return rate if rate else 1.0

    def cross_rate(
        self, from_code: str, to_code: str, snapshot: Optional[Snapshot]
    ) -> float:
        """Quantas unidades de `to_code` vale 1 unidade de `from_code`."""
        from_rate = self._rate_or_default(snapshot, from_code)
        to_rate = self._rate_or_default(snapshot, to_code)
        return from_rate / to_rate

    def convert(
        self,
        amount,
        from_code: str,
        to_code: str,
        snapshot: Optional[Snapshot],
    ) -> str:
        """
        Converte `amount` de `from_code` para `to_code`.

        Args:
            amount: valor digitado (str, número ou None)
            from_code: moeda de origem (ex.: 'USD')
            to_code: moeda de destino (ex.: 'BRL')
            snapshot: snapshot atual, pode ser None

        Returns:
            Valor convertido com 2 casas decimais. Valores vazios, zero,
            não numéricos ou NaN resultam em "0.00".
        """
        valor = parse_amount(amount)
        if not valor:
            return ZERO_DISPLAY

        from_rate = self._rate_or_default(snapshot, from_code)
        to_rate = self._rate_or_default(snapshot, to_code)
        return f"{(valor * from_rate) / to_rate:.2f}"
