"""
Execução do painel CâmbioTrack no terminal.

Uso:
    python cambio_track.py --once          # busca uma vez e imprime as taxas
    python cambio_track.py --range 30d     # atualiza a cada intervalo até Ctrl+C

Configuração via .env (ver cambiotrack/io/config_loader.py).
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from cambiotrack.currency.models import TimeRange
from cambiotrack.dashboard import Dashboard, DashboardView
from cambiotrack.io.config_loader import ConfigLoader
from cambiotrack.utils.logging import configure_logging


def formatar_painel(view: DashboardView) -> str:
    """Monta o texto exibido no terminal a partir do estado do painel."""
    linhas: List[str] = []
    if view.error:
        linhas.append(f"[AVISO] {view.error}")
    if not view.rates:
        linhas.append("Carregando taxas de câmbio...")
        return "\n".join(linhas)

    atualizado = (
        view.last_update.astimezone().strftime("%d/%m/%Y %H:%M:%S")
        if view.last_update
        else "-"
    )
    linhas.append(f"--- CâmbioTrack (última atualização: {atualizado}) ---")
    for rate in view.rates:
        linhas.append(
            f"  {rate.currency}/BRL  R$ {rate.rate:>8.4f}  ({rate.change:+.2f}%)"
        )

    if view.history:
        valores = [p.rate for p in view.history]
        linhas.append(
            f"Histórico simulado {view.selected_currency}/BRL ({view.time_range}): "
            f"{len(valores)} pontos, min={min(valores):.2f} max={max(valores):.2f} "
            f"[{view.history[0].date} .. {view.history[-1].date}]"
        )
    return "\n".join(linhas)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Painel de câmbio em relação ao BRL")
    parser.add_argument("--once", action="store_true", help="Busca uma vez e sai")
    parser.add_argument(
        "--range",
        default=TimeRange.D7.value,
        choices=[r.value for r in TimeRange],
        help="Intervalo do histórico simulado",
    )
    parser.add_argument("--currency", default="USD", help="Moeda do histórico")
    parser.add_argument("--env", default=None, help="Caminho do arquivo .env")
    return parser.parse_args(argv)


async def executar(args: argparse.Namespace) -> int:
    settings = ConfigLoader(args.env).load()
    configure_logging(settings.log_file, settings.log_level)

    dashboard = Dashboard.from_settings(settings)
    dashboard.select_currency(args.currency)
    dashboard.select_range(args.range)

    if args.once:
        result = await dashboard.manual_refresh()
        print(formatar_painel(dashboard.view()))
        return 0 if result.ok else 1

    dashboard.scheduler.subscribe(
        lambda state: None if state.loading else print(formatar_painel(dashboard.view()))
    )
    async with dashboard:
        try:
            while True:
                await asyncio.sleep(3600)
        except asyncio.CancelledError:
            pass
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        return asyncio.run(executar(args))
    except KeyboardInterrupt:
        print("\nEncerrado pelo usuário.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
