# File: address_scout/report/__init__.py
"""address_scout.report: Генерация отчётов (JSON и HTML) для CLI."""

from address_scout.report.html_report import render_html
from address_scout.report.json_report import render_json

__all__ = ["render_json", "render_html"]
