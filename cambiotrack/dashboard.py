"""
Coordenador do painel de câmbio.

Único objeto que altera o estado exibido: recebe as intenções da interface
(selecionar moeda, trocar intervalo, converter, criar/remover alerta,
atualizar) e produz um `DashboardView` serializável para a camada de
apresentação.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Union

from pydantic import BaseModel

from .alerts.alert_registry import AlertDirection, AlertRegistry, AlertRule
from .currency.conversion_calculator import ConversionCalculator
from .currency.currencies import HOME_CURRENCY
from .currency.errors import FetchResult
from .currency.history_synthesizer import (
    HistoryProvider,
    HistorySynthesizer,
    resolve_base_rate,
)
from .currency.models import HistoryPoint, Snapshot, TimeRange
from .currency.rate_fetcher import RateFetcher
from .estado.refresh_scheduler import (
    DEFAULT_INTERVAL_SECONDS,
    RefreshScheduler,
    RefreshState,
)
from .utils.normalization import normalize_code

logger = logging.getLogger(__name__)


# ==================== MODELS ====================


class RateView(BaseModel):
    currency: str
    symbol: str
    rate: float
    change: float


class HistoryPointView(BaseModel):
    date: str
    rate: float


class ConversionView(BaseModel):
    amount: str
    from_code: str
    to_code: str
    result: str


class AlertView(BaseModel):
    currency: str
    target_rate: float
    direction: str
    description: str


class DashboardView(BaseModel):
    rates: List[RateView]
    loading: bool
    error: Optional[str]
    last_update: Optional[datetime]
    selected_currency: str
    time_range: str
    history: List[HistoryPointView]
    conversion: ConversionView
    alerts: List[AlertView]
    dark_mode: bool
    show_converter: bool


# ==================== COORDENADOR ====================


class Dashboard:
    """
    Mantém as seleções do usuário e combina agendador, simulador de
    histórico, conversor e alertas.
    """

    def __init__(
        self,
        fetcher: RateFetcher,
        history_provider: Optional[HistoryProvider] = None,
        calculator: Optional[ConversionCalculator] = None,
        alerts: Optional[AlertRegistry] = None,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.scheduler = RefreshScheduler(fetcher, interval=interval)
        self.history_provider = (
            history_provider if history_provider is not None else HistorySynthesizer()
        )
        self.calculator = calculator if calculator is not None else ConversionCalculator()
        self.alerts = alerts if alerts is not None else AlertRegistry()
        self.clock = clock or datetime.now

        # Valores iniciais da interface
        self.selected_currency = "USD"
        self.time_range = TimeRange.D7
        self.convert_amount = ""
        self.convert_from = "USD"
        self.convert_to = HOME_CURRENCY
        self.conversion_result = "0.00"
        self.dark_mode = False
        self.show_converter = False
        self.history: List[HistoryPoint] = []

        self._snapshot: Optional[Snapshot] = None
        self.scheduler.subscribe(self._on_refresh_state)

    @classmethod
    def from_settings(cls, settings, session=None, **kwargs) -> "Dashboard":
        fetcher = RateFetcher.from_settings(settings, session=session)
        return cls(fetcher, interval=settings.refresh_interval, **kwargs)

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------
    def start(self) -> None:
        self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()

    async def __aenter__(self) -> "Dashboard":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self.scheduler.current

    def _on_refresh_state(self, state: RefreshState) -> None:
        # Histórico e conversão dependem do snapshot; só recalcula quando ele muda.
        if state.current is self._snapshot:
            return
        self._snapshot = state.current
        self._regenerate_history()
        self._recompute_conversion()

    def _regenerate_history(self) -> None:
        snapshot = self.snapshot
        if snapshot is None:
            self.history = []
            return
        base_rate = resolve_base_rate(snapshot, self.selected_currency)
        self.history = self.history_provider.get_history(
            base_rate, self.time_range, self.clock()
        )
        logger.debug(
            f"[DASHBOARD] Histórico {self.selected_currency}/{self.time_range.value} "
            f"gerado com {len(self.history)} ponto(s)"
        )

    def _recompute_conversion(self) -> None:
        self.conversion_result = self.calculator.convert(
            self.convert_amount, self.convert_from, self.convert_to, self.snapshot
        )

    # ------------------------------------------------------------------
    # Intenções da interface
    # ------------------------------------------------------------------
    def select_currency(self, code: str) -> List[HistoryPoint]:
        self.selected_currency = normalize_code(code)
        self._regenerate_history()
        return self.history

    def select_range(self, time_range: Union[TimeRange, str]) -> List[HistoryPoint]:
        self.time_range = TimeRange.parse(time_range)
        self._regenerate_history()
        return self.history

    def submit_conversion(
        self,
        amount,
        from_code: Optional[str] = None,
        to_code: Optional[str] = None,
    ) -> str:
        self.convert_amount = "" if amount is None else str(amount)
        if from_code:
            self.convert_from = normalize_code(from_code)
        if to_code:
            self.convert_to = normalize_code(to_code)
        self._recompute_conversion()
        return self.conversion_result

    def submit_alert(
        self,
        currency: str,
        target_rate,
        direction: Union[AlertDirection, str] = AlertDirection.ABOVE,
    ) -> Optional[AlertRule]:
        return self.alerts.submit(currency, target_rate, direction)

    def remove_alert(self, index: int) -> None:
        self.alerts.remove(index)

    def toggle_theme(self) -> bool:
        self.dark_mode = not self.dark_mode
        return self.dark_mode

    def toggle_converter(self) -> bool:
        self.show_converter = not self.show_converter
        return self.show_converter

    async def manual_refresh(self) -> FetchResult:
        return await self.scheduler.refresh()

    # ------------------------------------------------------------------
    # Estado produzido
    # ------------------------------------------------------------------
    def view(self) -> DashboardView:
        state = self.scheduler.state
        records = state.current.records if state.current is not None else ()
        return DashboardView(
            rates=[
                RateView(currency=r.code, symbol=r.symbol, rate=r.rate, change=r.change)
                for r in records
            ],
            loading=state.loading,
            error=state.error,
            last_update=state.last_update,
            selected_currency=self.selected_currency,
            time_range=self.time_range.value,
            history=[HistoryPointView(date=p.label, rate=p.rate) for p in self.history],
            conversion=ConversionView(
                amount=self.convert_amount,
                from_code=self.convert_from,
                to_code=self.convert_to,
                result=self.conversion_result,
            ),
            alerts=[
                AlertView(
                    currency=a.currency,
                    target_rate=a.target_rate,
                    direction=a.direction.value,
                    description=(
                        f"{a.currency}/{HOME_CURRENCY} {a.direction.label} R$ {a.target_rate:g}"
                    ),
                )
                for a in self.alerts
            ],
            dark_mode=self.dark_mode,
            show_converter=self.show_converter,
        )
