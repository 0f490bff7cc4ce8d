"""
Visualization Package
Terminal rendering of the driver dashboard
"""

from .console_dashboard import (
    ConsoleDashboard,
    render_route_cards,
    render_signal_list,
    render_status,
)

__all__ = [
    "ConsoleDashboard",
    "render_route_cards",
    "render_signal_list",
    "render_status",
]
