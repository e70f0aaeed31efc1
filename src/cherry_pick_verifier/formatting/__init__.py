"""
Report Formatting Layer

Renders verification results as GitHub markdown comments.
"""

from .report import render_report, overall_status, summarize

__all__ = ['render_report', 'overall_status', 'summarize']
