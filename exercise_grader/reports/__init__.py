"""
Report Emitter - CSV, KML and text outputs
"""

from .tables import (
    GRADE_COLUMNS,
    write_grades_csv,
    write_counter_csv,
    write_outbound_csv,
    write_targets_csv,
    write_fields_csv,
    write_edges_csv,
)
from .maps import render_feedback_kml, write_feedback_kml, write_kml, write_text
from .summary import build_summary, write_summary

__all__ = [
    'GRADE_COLUMNS',
    'write_grades_csv',
    'write_counter_csv',
    'write_outbound_csv',
    'write_targets_csv',
    'write_fields_csv',
    'write_edges_csv',
    'render_feedback_kml',
    'write_feedback_kml',
    'write_kml',
    'write_text',
    'build_summary',
    'write_summary',
]
