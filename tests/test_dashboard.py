"""
Testes do coordenador Dashboard: intenções da interface e estado produzido.
"""

import asyncio
from datetime import datetime

import pytest

from cambiotrack.currency.errors import FetchResult, TransportError
from cambiotrack.currency.history_synthesizer import HistorySynthesizer
from cambiotrack.dashboard import Dashboard, DashboardView
from cambiotrack.io.config_loader import Settings

AGORA = datetime(2024, 3, 10, 15, 30)


def make_dashboard(fetcher):
    return Dashboard(
        fetcher,
        history_provider=HistorySynthesizer(random_source=lambda: 0.5),
        clock=lambda: AGORA,
    )


def test_estado_inicial_sem_snapshot(scripted_fetcher):
    dashboard = make_dashboard(scripted_fetcher([]))

    view = dashboard.view()

    assert isinstance(view, DashboardView)
    assert view.rates == []
    assert view.history == [], "Sem snapshot não há gráfico"
    assert view.selected_currency == "USD"
    assert view.time_range == "7d"
    assert view.conversion.from_code == "USD"
    assert view.conversion.to_code == "BRL"
    assert view.conversion.result == "0.00"
    assert view.loading is False
    assert view.error is None
    assert view.dark_mode is False


def test_refresh_gera_historico_e_taxas(scripted_fetcher, snapshot):
    dashboard = make_dashboard(scripted_fetcher([FetchResult.success(snapshot)]))

    result = asyncio.run(dashboard.manual_refresh())

    assert result.ok
    view = dashboard.view()
    assert [r.currency for r in view.rates] == ["USD", "EUR", "GBP", "BRL"]
    assert view.rates[0].symbol == "$"
    assert view.last_update == snapshot.observed_at
    assert len(view.history) == 8
    assert view.history[0].date == "03/03"
    assert view.history[-1].date == "10/03"
    assert all(p.rate == 5.0 for p in view.history)


def test_selecao_de_moeda_e_intervalo(scripted_fetcher, snapshot):
    dashboard = make_dashboard(scripted_fetcher([FetchResult.success(snapshot)]))
    asyncio.run(dashboard.manual_refresh())

    pontos = dashboard.select_range("24h")
    assert [p.label for p in pontos] == ["14:30", "15:30"]

    pontos = dashboard.select_currency("eur")
    assert dashboard.selected_currency == "EUR"
    assert [p.rate for p in pontos] == [6.25, 6.25]

    pontos = dashboard.select_currency("JPY")
    assert all(p.rate == 5.0 for p in pontos), "Moeda sem taxa usa o valor 5.0"

    pontos = dashboard.select_range("1y")
    assert len(pontos) == 366
    assert dashboard.view().time_range == "1y"


def test_intervalo_invalido_nao_altera_selecao(scripted_fetcher):
    dashboard = make_dashboard(scripted_fetcher([]))
    with pytest.raises(ValueError):
        dashboard.select_range("2w")
    assert dashboard.view().time_range == "7d"


def test_conversao_recalculada_quando_snapshot_chega(scripted_fetcher, snapshot):
    dashboard = make_dashboard(scripted_fetcher([FetchResult.success(snapshot)]))

    assert dashboard.submit_conversion("10", "USD", "BRL") == "10.00"

    asyncio.run(dashboard.manual_refresh())

    assert dashboard.view().conversion.result == "50.00"
    assert dashboard.submit_conversion("abc") == "0.00"
    assert dashboard.submit_conversion("100", to_code="EUR") == "80.00"
    assert dashboard.view().conversion.amount == "100"


def test_alertas_pela_interface(scripted_fetcher):
    dashboard = make_dashboard(scripted_fetcher([]))

    dashboard.submit_alert("USD", "5.5", "above")
    dashboard.submit_alert("EUR", "", "below")
    dashboard.submit_alert("GBP", 7, "below")

    alerts = dashboard.view().alerts
    assert [a.currency for a in alerts] == ["USD", "GBP"]
    assert alerts[0].description == "USD/BRL acima de R$ 5.5"
    assert alerts[1].description == "GBP/BRL abaixo de R$ 7"

    dashboard.remove_alert(0)
    assert [a.currency for a in dashboard.view().alerts] == ["GBP"]


def test_falha_apos_sucesso_mantem_taxas(scripted_fetcher, snapshot):
    dashboard = make_dashboard(
        scripted_fetcher(
            [FetchResult.success(snapshot), FetchResult.failure(TransportError("timeout"))]
        )
    )

    async def cenario():
        await dashboard.manual_refresh()
        historico = list(dashboard.history)
        await dashboard.manual_refresh()
        return historico

    historico = asyncio.run(cenario())

    view = dashboard.view()
    assert len(view.rates) == 4
    assert view.last_update == snapshot.observed_at
    assert view.error == "Erro ao carregar taxas de câmbio: timeout"
    assert dashboard.history == historico, "Falha não regenera o histórico"


def test_alternancias_nao_afetam_dados(scripted_fetcher, snapshot):
    dashboard = make_dashboard(scripted_fetcher([FetchResult.success(snapshot)]))
    asyncio.run(dashboard.manual_refresh())
    antes = dashboard.view()

    assert dashboard.toggle_theme() is True
    assert dashboard.toggle_converter() is True
    assert dashboard.toggle_theme() is False

    depois = dashboard.view()
    assert depois.rates == antes.rates
    assert depois.history == antes.history
    assert depois.show_converter is True


def test_context_manager_inicia_e_encerra(scripted_fetcher, snapshot):
    fetcher = scripted_fetcher([FetchResult.success(snapshot)] * 5)
    dashboard = Dashboard(fetcher, interval=60)

    async def cenario():
        async with dashboard:
            assert dashboard.scheduler.running
            while fetcher.calls < 1 or dashboard.snapshot is None:
                await asyncio.sleep(0.01)
        assert not dashboard.scheduler.running

    asyncio.run(cenario())
    assert dashboard.snapshot is snapshot


def test_from_settings_sem_chave_falha_com_configuracao():
    dashboard = Dashboard.from_settings(Settings(api_key=None, base_url=None))

    result = asyncio.run(dashboard.manual_refresh())

    assert not result.ok
    assert dashboard.view().error.startswith("Erro ao carregar taxas de câmbio: configuração ausente")


def test_view_serializavel(scripted_fetcher, snapshot):
    dashboard = make_dashboard(scripted_fetcher([FetchResult.success(snapshot)]))
    asyncio.run(dashboard.manual_refresh())

    dados = dashboard.view().model_dump(mode="json")

    assert dados["rates"][0] == {"currency": "USD", "symbol": "$", "rate": 5.0, "change": 0.0}
    assert isinstance(dados["last_update"], str)
