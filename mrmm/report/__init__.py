"""Markdown rendering of batch reports."""

from mrmm.report.render_md import render_report, write_report

__all__ = ["render_report", "write_report"]
