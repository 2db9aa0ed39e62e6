"""
Registro em memória dos alertas de câmbio criados pelo usuário.

Os alertas são apenas armazenados: não existe avaliação contra as taxas
recebidas nem disparo de notificações.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Union

from ..utils.normalization import normalize_code, parse_amount

logger = logging.getLogger(__name__)


class AlertDirection(str, Enum):
    ABOVE = "above"
    BELOW = "below"

    @property
    def label(self) -> str:
        return "acima de" if self is AlertDirection.ABOVE else "abaixo de"


@dataclass(frozen=True)
class AlertRule:
    currency: str
    target_rate: float
    direction: AlertDirection = AlertDirection.ABOVE


class AlertRegistry:
    """
    Lista ordenada (por criação) de regras de alerta.

    Duplicatas são permitidas; a identidade para remoção é o índice.
    """

    def __init__(self) -> None:
        self._rules: List[AlertRule] = []

    def add(self, rule: AlertRule) -> None:
        self._rules.append(rule)
        logger.info(
            f"[ALERTAS] Alerta criado: {rule.currency} {rule.direction.label} "
            f"{rule.target_rate}"
        )

    def submit(
        self,
        currency: str,
        target_rate,
        direction: Union[AlertDirection, str] = AlertDirection.ABOVE,
    ) -> Optional[AlertRule]:
        """
        Cria um alerta a partir dos campos do formulário.

        Um valor alvo vazio (ou não numérico) é ignorado silenciosamente.

        Returns:
            A regra criada, ou None se nada foi adicionado.
        """
        alvo = parse_amount(target_rate)
        if alvo is None:
            return None
        rule = AlertRule(
            currency=normalize_code(currency),
            target_rate=alvo,
            direction=AlertDirection(direction),
        )
        self.add(rule)
        return rule

    def remove(self, index: int) -> None:
        """Remove a regra na posição `index`; índices fora da lista não fazem nada."""
        if 0 <= index < len(self._rules):
            removida = self._rules.pop(index)
            logger.info(f"[ALERTAS] Alerta removido: {removida.currency} (posição {index})")

    def rules(self) -> List[AlertRule]:
        return list(self._rules)

    def __iter__(self) -> Iterator[AlertRule]:
        return iter(list(self._rules))

    def __len__(self) -> int:
        return len(self._rules)
