"""
Módulo de normalização de entradas vindas da interface.
Contém funções para normalizar códigos de moeda e interpretar valores digitados.
"""

import math
import unicodedata
from typing import Optional


def normalize_code(code):
    """
    Normaliza um código de moeda removendo acentos, BOM e espaços.

    Args:
        code: Código digitado ou selecionado (pode ser None)

    Returns:
        Código em maiúsculas, sem espaços. String vazia se o valor for None.

    Exemplos:
        >>> normalize_code(" usd ")
        'USD'
        >>> normalize_code("\ufeffbrl")
        'BRL'
    """
    if code is None:
        return ""
    s = str(code).replace("\ufeff", "")
    s = unicodedata.normalize("NFKD", s).encode("ASCII", "ignore").decode("ASCII")
    return "".join(s.split()).upper()


def parse_amount(value) -> Optional[float]:
    """
    Interpreta um valor numérico vindo de um campo de formulário.

    A política é permissiva: entradas vazias, não numéricas, NaN ou infinitas
    resultam em None em vez de erro, e o chamador decide o valor de fallback.

    Exemplos:
        >>> parse_amount("10")
        10.0
        >>> parse_amount(" 2.5 ")
        2.5
        >>> parse_amount("abc") is None
        True
        >>> parse_amount("") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
