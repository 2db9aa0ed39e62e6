"""
Fixtures compartilhadas: sessões HTTP falsas, fetchers controláveis e
snapshots de exemplo.
"""

import logging
import os
import sys
import threading
from datetime import datetime, timezone

import pytest

# Adicionar o diretório raiz ao path para importar os módulos
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cambiotrack.currency.currencies import CURRENCY_SYMBOLS
from cambiotrack.currency.errors import FetchResult, TransportError
from cambiotrack.currency.models import CurrencyRecord, Snapshot

BASE_URL = "https://v6.exchangerate-api.test/v6/"
API_KEY = "chave-teste"
OBSERVED_UNIX = 1_700_000_000


class FakeResponse:
    def __init__(self, json_data=None, status_code=200, invalid_json=False):
        self._json = json_data
        self.status_code = status_code
        self.invalid_json = invalid_json

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json


class FakeSession:
    """Substitui requests.Session: devolve (ou levanta) o item configurado."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append({"url": url, "timeout": timeout})
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome

    def close(self):
        self.closed = True


class ScriptedFetcher:
    """Fetcher que devolve os resultados na ordem configurada."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = 0
        self._lock = threading.Lock()

    def fetch(self):
        with self._lock:
            self.calls += 1
            if self.results:
                return self.results.pop(0)
        return FetchResult.failure(TransportError("sem resultados configurados"))


class BlockingFetcher:
    """Fetcher cuja N-ésima chamada só termina quando `release(N)` é chamado."""

    def __init__(self, results):
        self.results = list(results)
        self.events = [threading.Event() for _ in self.results]
        self.calls = 0
        self._lock = threading.Lock()

    def fetch(self):
        with self._lock:
            index = self.calls
            self.calls += 1
        self.events[index].wait(timeout=5)
        return self.results[index]

    def release(self, index):
        self.events[index].set()

    def release_all(self):
        for event in self.events:
            event.set()


def build_payload(rates=None, **overrides):
    payload = {
        "result": "success",
        "base_code": "BRL",
        "conversion_rates": rates
        if rates is not None
        else {"BRL": 1, "USD": 0.2, "EUR": 0.16, "GBP": 0.125, "JPY": 29.5},
        "time_last_update_unix": OBSERVED_UNIX,
    }
    payload.update(overrides)
    return payload


def build_snapshot(rates, observed_at=None):
    records = tuple(
        CurrencyRecord(code=code, symbol=CURRENCY_SYMBOLS.get(code, code), rate=rate)
        for code, rate in rates.items()
    )
    return Snapshot(
        records=records,
        observed_at=observed_at or datetime.fromtimestamp(OBSERVED_UNIX, tz=timezone.utc),
    )


@pytest.fixture(autouse=True)
def restaurar_logger_do_pacote():
    """Remove handlers instalados por configure_logging durante o teste."""
    pkg_logger = logging.getLogger("cambiotrack")
    handlers_antes = list(pkg_logger.handlers)
    propagate_antes = pkg_logger.propagate
    yield
    for handler in list(pkg_logger.handlers):
        if handler not in handlers_antes:
            pkg_logger.removeHandler(handler)
            handler.close()
    pkg_logger.propagate = propagate_antes


@pytest.fixture
def payload_factory():
    return build_payload


@pytest.fixture
def session_factory():
    def _factory(json_data=None, status_code=200, invalid_json=False, raises=None):
        if raises is not None:
            return FakeSession(raises)
        return FakeSession(FakeResponse(json_data, status_code, invalid_json))

    return _factory


@pytest.fixture
def snapshot_factory():
    return build_snapshot


@pytest.fixture
def snapshot():
    return build_snapshot({"USD": 5.0, "EUR": 6.25, "GBP": 8.0, "BRL": 1.0})


@pytest.fixture
def scripted_fetcher():
    return ScriptedFetcher


@pytest.fixture
def blocking_fetcher():
    return BlockingFetcher
