"""
Outputs for people outside the tool: hand-off emails and exports.
"""

from .handoff import draft_handoff_email  # noqa: F401
from .export import BOARD_HEADERS, save_analysis_json, write_board_csv  # noqa: F401
