from .metrics import Metrics, MetricsSnapshot

__all__ = ["Metrics", "MetricsSnapshot"]
