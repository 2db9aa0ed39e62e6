from .alert_registry import AlertDirection, AlertRegistry, AlertRule

__all__ = ["AlertDirection", "AlertRegistry", "AlertRule"]
