"""Report rendering for govlens."""

from .dashboard import DashboardInputs, DashboardRenderer, bar_width, project_name_for

__all__ = ["DashboardInputs", "DashboardRenderer", "bar_width", "project_name_for"]
