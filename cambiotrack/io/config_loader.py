"""
Módulo para carregar a configuração do painel a partir do ambiente.
Responsável por ler o arquivo .env (via python-dotenv) e montar `Settings`.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from ..currency.rate_fetcher import DEFAULT_TIMEOUT
from ..estado.refresh_scheduler import DEFAULT_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

# Nome principal primeiro; os nomes VITE_* são aceitos como alternativa.
API_KEY_VARS = ("EXCHANGE_RATE_API_KEY", "VITE_EXCHANGE_RATE_API_KEY")
BASE_URL_VARS = ("EXCHANGE_RATE_API_BASE_URL", "VITE_EXCHANGE_RATE_API_BASE_URL")


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    refresh_interval: float = DEFAULT_INTERVAL_SECONDS
    request_timeout: float = DEFAULT_TIMEOUT
    log_file: Optional[str] = None
    log_level: str = "INFO"

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key) and bool(self.base_url)


class ConfigLoader:
    """
    Classe para carregar e validar a configuração.

    Chave da API ou URL base ausentes NÃO interrompem a inicialização: cada
    busca de taxas passa a falhar com ConfigurationError.
    """

    def __init__(self, env_path: Optional[str] = None):
        """
        Inicializa o ConfigLoader.

        Args:
            env_path: Caminho opcional do arquivo .env (padrão: .env no diretório atual)
        """
        self.env_path = Path(env_path) if env_path else Path.cwd() / ".env"

    def load(self, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """
        Carrega as configurações.

        Args:
            environ: Mapeamento de variáveis; se omitido, carrega o .env no
                `os.environ` (sem sobrescrever variáveis já definidas) e usa-o.

        Returns:
            Settings preenchido, com padrões para valores ausentes ou inválidos
        """
        if environ is None:
            if self.env_path.exists():
                load_dotenv(dotenv_path=self.env_path, override=False)
            environ = os.environ

        settings = Settings(
            api_key=self._first(environ, API_KEY_VARS),
            base_url=self._first(environ, BASE_URL_VARS),
            refresh_interval=self._positive_float(
                environ, "CAMBIO_REFRESH_INTERVAL", DEFAULT_INTERVAL_SECONDS
            ),
            request_timeout=self._positive_float(
                environ, "CAMBIO_REQUEST_TIMEOUT", DEFAULT_TIMEOUT
            ),
            log_file=self._first(environ, ("CAMBIO_LOG_FILE",)),
            log_level=(self._first(environ, ("CAMBIO_LOG_LEVEL",)) or "INFO").upper(),
        )

        if not settings.is_complete:
            logger.warning(
                "[CONFIG] Chave da API ou URL base não configurada; "
                "as buscas de taxas irão falhar até que sejam definidas."
            )
        return settings

    def _first(self, environ: Mapping[str, str], names) -> Optional[str]:
        for name in names:
            value = environ.get(name)
            if value is not None and str(value).strip():
                return str(value).strip()
        return None

    def _positive_float(self, environ: Mapping[str, str], name: str, default: float) -> float:
        raw = environ.get(name)
        if raw is None or not str(raw).strip():
            return default
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"[CONFIG] {name}={raw!r} inválido; usando {default}.")
            return default
        if value <= 0:
            logger.warning(f"[CONFIG] {name}={raw!r} deve ser positivo; usando {default}.")
            return default
        return value
