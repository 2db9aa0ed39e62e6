"""
Pacote centralizado para as taxas de câmbio do painel.

Responsável por:
- Buscar o snapshot mais recente na API externa
- Normalizar as taxas para BRL por unidade de moeda estrangeira
- Simular o histórico exibido no gráfico
- Converter valores entre as moedas suportadas
"""

from .conversion_calculator import ConversionCalculator
from .errors import (
    ConfigurationError,
    FetchError,
    FetchResult,
    InvalidPayloadError,
    TransportError,
    UpstreamRejection,
    format_error_message,
)
from .history_synthesizer import HistoryProvider, HistorySynthesizer, resolve_base_rate
from .models import CurrencyRecord, HistoryPoint, Snapshot, TimeRange
from .rate_fetcher import RateFetcher

__all__ = [
    "ConversionCalculator",
    "ConfigurationError",
    "CurrencyRecord",
    "FetchError",
    "FetchResult",
    "HistoryPoint",
    "HistoryProvider",
    "HistorySynthesizer",
    "InvalidPayloadError",
    "RateFetcher",
    "Snapshot",
    "TimeRange",
    "TransportError",
    "UpstreamRejection",
    "format_error_message",
    "resolve_base_rate",
]
