"""site_mirror.report: Сохранение отчётов о зеркалировании, используется CLI и тестами."""

from .json_report import render_json

__all__ = ["render_json"]
