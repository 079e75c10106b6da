"""
P2P Field/Target Matcher

Main interface:
    from exercise_grader.p2p import build, render_kml, load_targets

    graph = build(load_targets('targets.csv'), messages)
    kml_text = render_kml(graph, 'ETO P2P')
"""

from .graph import DASHES, Edge, Field, P2PGraph, Target, build
from .kml import render_kml, link_count
from .roster import load_fields, load_targets

__all__ = [
    'DASHES',
    'Edge',
    'Field',
    'P2PGraph',
    'Target',
    'build',
    'render_kml',
    'link_count',
    'load_fields',
    'load_targets',
]
