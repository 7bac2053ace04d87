# File: site_mirror/report/__init__.py
"""site_mirror.report: JSON- и HTML-отчёты о запуске, используемые CLI и тестами."""

from site_mirror.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from site_mirror.report.json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
