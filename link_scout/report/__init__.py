"""link_scout.report: JSON- и HTML-отчёты, используемые CLI и тестами."""

from .html_report import render_html
from .json_report import render_json

__all__ = ["render_json", "render_html"]
