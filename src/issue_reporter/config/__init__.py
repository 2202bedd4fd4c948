from .reporter_config import ReporterConfig

__all__ = ["ReporterConfig"]
