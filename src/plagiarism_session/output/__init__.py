"""Output rendering for scan results."""

from .report import render_results, render_stats, render_viewer_status

__all__ = ["render_results", "render_stats", "render_viewer_status"]
