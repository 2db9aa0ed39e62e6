from .refresh_scheduler import RefreshScheduler, RefreshState

__all__ = ["RefreshScheduler", "RefreshState"]
