"""
Agendador de atualização das taxas.

Executa `RateFetcher.fetch()` ao iniciar e depois a cada intervalo fixo
(5 minutos por padrão), além de atualizações manuais a qualquer momento.
Todo o estado vive em um único loop asyncio: a chamada bloqueante de rede
roda em uma thread auxiliar e o resultado volta ao loop uma única vez.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional

from ..currency.errors import FetchResult, format_error_message
from ..currency.models import Snapshot
from ..currency.rate_fetcher import RateFetcher

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5 * 60


@dataclass(frozen=True)
class RefreshState:
    current: Optional[Snapshot] = None
    loading: bool = False
    error: Optional[str] = None
    last_update: Optional[datetime] = None


StateListener = Callable[[RefreshState], None]


class RefreshScheduler:
    """
    Mantém o snapshot mais recente e o estado de carregamento/erro.

    Política "desatualizado mas disponível": uma falha registra a mensagem de
    erro sem descartar o snapshot anterior nem `last_update`.
    """

    def __init__(
        self,
        fetcher: RateFetcher,
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self.fetcher = fetcher
        self.interval = interval
        self._state = RefreshState()
        self._in_flight = 0
        self._task: Optional[asyncio.Task] = None
        self._stopped = False
        self._listeners: List[StateListener] = []

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------
    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def current(self) -> Optional[Snapshot]:
        return self._state.current

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _set_state(self, new_state: RefreshState) -> None:
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    # ------------------------------------------------------------------
    # Ciclo de atualização
    # ------------------------------------------------------------------
    async def refresh(self) -> FetchResult:
        """
        Executa um ciclo de busca e aplica o resultado.

        Pode ser chamado a qualquer momento, inclusive com outra busca em
        andamento; o último resultado aplicado é o que vale.
        """
        self._in_flight += 1
        if not self._stopped:
            self._set_state(replace(self._state, loading=True))
        try:
            result = await asyncio.to_thread(self.fetcher.fetch)
        finally:
            self._in_flight -= 1

        if self._stopped:
            logger.info("[REFRESH] Resultado recebido após encerramento; descartado.")
            return result

        self._apply(result)
        return result

    def _apply(self, result: FetchResult) -> None:
        loading = self._in_flight > 0
        if result.ok:
            snapshot = result.snapshot
            self._set_state(
                RefreshState(
                    current=snapshot,
                    loading=loading,
                    error=None,
                    last_update=snapshot.observed_at,
                )
            )
            logger.info(
                f"[REFRESH] Snapshot atualizado ({snapshot.observed_at.isoformat()})"
            )
        else:
            mensagem = format_error_message(result.error)
            self._set_state(replace(self._state, loading=loading, error=mensagem))
            logger.warning(f"[REFRESH] {mensagem}")

    async def _run(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        """Inicia o ciclo periódico no loop em execução (busca imediata)."""
        if self.running:
            return self._task
        self._stopped = False
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"[REFRESH] Agendador iniciado (intervalo={self.interval}s)")
        return self._task

    async def stop(self) -> None:
        """Cancela o ciclo periódico; buscas que terminarem depois são ignoradas."""
        self._stopped = True
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("[REFRESH] Agendador encerrado")
