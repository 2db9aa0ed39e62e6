"""
Módulo responsável por buscar a cotação mais recente na ExchangeRate-API.

Estratégia:
- Uma única requisição GET `<base_url>/<api_key>/latest/BRL`
- A resposta traz quantas unidades de cada moeda valem 1 BRL; a normalização
  inverte esse valor para obter quantos BRL vale 1 unidade da moeda
- Qualquer falha (rede, recusa da API, configuração ausente, taxa inválida)
  é devolvida dentro de um `FetchResult`; `fetch()` nunca propaga exceções

Observação importante:
- `change` é sempre 0.0. O plano gratuito da API não fornece histórico, então
  não existe um segundo ponto para calcular a variação.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .currencies import CURRENCY_SYMBOLS, HOME_CURRENCY, SUPPORTED_CURRENCIES
from .errors import (
    ConfigurationError,
    FetchError,
    FetchResult,
    InvalidPayloadError,
    TransportError,
    UpstreamRejection,
)
from .models import CurrencyRecord, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class LatestRatesResponse(BaseModel):
    """Corpo de `/latest/<base>` da ExchangeRate-API (campos usados)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    result: str
    base_code: Optional[str] = None
    conversion_rates: Dict[str, float] = Field(default_factory=dict)
    time_last_update_unix: Optional[int] = None
    error_type: Optional[str] = Field(default=None, alias="error-type")


class RateFetcher:
    """Responsável exclusivamente por buscar e normalizar o snapshot de taxas."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str],
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.base_url = (base_url or "").strip()
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    @classmethod
    def from_settings(cls, settings, session: Optional[requests.Session] = None):
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.request_timeout,
            session=session,
        )

    def _log(self, msg: str, level: int = logging.INFO) -> None:
        logger.log(level, f"[CAMBIO_API] {msg}")

    def close(self) -> None:
        self.session.close()

    # ------------------------------------------------------------------
    # URL
    # ------------------------------------------------------------------
    def build_url(self, mask_key: bool = False) -> str:
        key = self.api_key
        if mask_key and key:
            key = key[:4] + "***"
        return f"{self.base_url.rstrip('/')}/{key}/latest/{HOME_CURRENCY}"

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------
    def fetch(self) -> FetchResult:
        """
        Busca o snapshot atual.

        Returns:
            FetchResult com `snapshot` preenchido em caso de sucesso, ou com
            `error` (subclasse de FetchError) em caso de falha.
        """
        try:
            snapshot = self._fetch_snapshot()
        except FetchError as e:
            self._log(
                f"Falha ao buscar taxas ({e.__class__.__name__}): {e.cause}",
                logging.WARNING,
            )
            return FetchResult.failure(e)
        except Exception as e:
            logger.exception("[CAMBIO_API] Erro inesperado ao buscar taxas")
            return FetchResult.failure(FetchError(str(e) or e.__class__.__name__))

        self._log(
            "Taxas obtidas: "
            + ", ".join(f"{r.code}={r.rate:.4f}" for r in snapshot.records)
            + f" (atualizado em {snapshot.observed_at.isoformat()})"
        )
        return FetchResult.success(snapshot)

    # ------------------------------------------------------------------
    # Etapas internas
    # ------------------------------------------------------------------
    def _fetch_snapshot(self) -> Snapshot:
        if not self.api_key or not self.base_url:
            faltando = [
                nome
                for nome, valor in (("chave da API", self.api_key), ("URL base", self.base_url))
                if not valor
            ]
            raise ConfigurationError(
                f"configuração ausente: {', '.join(faltando)}"
            )

        self._log(f"Consultando {self.build_url(mask_key=True)}", logging.DEBUG)
        try:
            response = self.session.get(self.build_url(), timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

        payload = self._parse_response(response)
        return self.normalize(payload)

    def _parse_response(self, response) -> LatestRatesResponse:
        status = getattr(response, "status_code", 200)
        try:
            data = response.json()
        except ValueError as e:
            if status >= 400:
                raise TransportError(f"HTTP {status}") from e
            raise InvalidPayloadError("resposta não é um JSON válido") from e

        # A API responde 4xx com corpo {"result": "error", ...}; sem esse
        # corpo o erro é tratado como falha de transporte.
        if not isinstance(data, dict) or "result" not in data:
            if status >= 400:
                raise TransportError(f"HTTP {status}")
            raise InvalidPayloadError("resposta sem o campo 'result'")

        try:
            payload = LatestRatesResponse.model_validate(data)
        except ValidationError as e:
            raise InvalidPayloadError(
                f"resposta em formato inesperado ({e.error_count()} erro(s) de validação)"
            ) from e

        if payload.result != "success":
            detalhe = f" ({payload.error_type})" if payload.error_type else ""
            raise UpstreamRejection(
                f"Falha ao obter taxas de câmbio{detalhe}",
                error_type=payload.error_type,
            )
        return payload

    def normalize(self, payload: LatestRatesResponse) -> Snapshot:
        """
        Converte a resposta da API em um Snapshot com um registro por moeda
        suportada, na ordem fixa de `SUPPORTED_CURRENCIES`.
        """
        if payload.base_code and payload.base_code.upper() != HOME_CURRENCY:
            raise InvalidPayloadError(
                f"moeda base inesperada: {payload.base_code} (esperado {HOME_CURRENCY})"
            )

        records: List[CurrencyRecord] = []
        for code in SUPPORTED_CURRENCIES:
            if code == HOME_CURRENCY:
                rate = 1.0
            else:
                raw = payload.conversion_rates.get(code)
                if raw is None or not math.isfinite(raw) or raw <= 0:
                    raise InvalidPayloadError(
                        f"taxa ausente ou inválida para {code}: {raw!r}"
                    )
                rate = 1.0 / raw
            records.append(
                CurrencyRecord(
                    code=code,
                    symbol=CURRENCY_SYMBOLS[code],
                    rate=rate,
                    change=0.0,
                )
            )

        if payload.time_last_update_unix is not None:
            observed_at = datetime.fromtimestamp(
                payload.time_last_update_unix, tz=timezone.utc
            )
        else:
            observed_at = datetime.now(timezone.utc)
            self._log(
                "Resposta sem time_last_update_unix; usando horário da consulta.",
                logging.WARNING,
            )

        return Snapshot(records=tuple(records), observed_at=observed_at)
