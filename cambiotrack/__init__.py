"""
CâmbioTrack: núcleo do painel de cotações em relação ao real (BRL).
"""

from .dashboard import Dashboard, DashboardView

__version__ = "1.0.0"

__all__ = ["Dashboard", "DashboardView", "__version__"]
