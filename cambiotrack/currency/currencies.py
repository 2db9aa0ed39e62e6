"""
Moedas suportadas pelo painel e seus símbolos de exibição.

Adicionar uma moeda exige estender tanto `SUPPORTED_CURRENCIES` quanto
`CURRENCY_SYMBOLS`; não existe lista dinâmica de moedas.
"""

from typing import Dict, Tuple

HOME_CURRENCY = "BRL"

SUPPORTED_CURRENCIES: Tuple[str, ...] = ("USD", "EUR", "GBP", "BRL")

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "BRL": "R$",
}
