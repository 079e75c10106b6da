"""
KML Reports - Feedback map of graded messages, and P2P map output
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List

from ..p2p.graph import P2PGraph
from ..p2p.kml import KML_NAMESPACE, XML_DECLARATION, render_kml

STYLES = {
    'perfect': "http://maps.google.com/mapfiles/kml/paddle/grn-circle.png",
    'imperfect': "http://maps.google.com/mapfiles/kml/paddle/ylw-circle.png",
    'synthetic': "http://maps.google.com/mapfiles/kml/paddle/wht-blank.png",
}


def write_text(text: str, path: str) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding='utf-8')


def _style_for(grade) -> str:
    if grade.synthetic_location:
        return 'synthetic'
    return 'perfect' if grade.result.is_perfect else 'imperfect'


def _description(grade) -> str:
    lines = [
        f"MessageId: {grade.message_id}",
        f"Grade: {grade.result.score}",
    ]
    if grade.synthetic_location:
        lines.append("Location: not provided, placed approximately")
    lines.append("")
    lines.append(grade.result.explanation)
    return "\n".join(lines)


def render_feedback_kml(grades: List, name: str) -> str:
    """One placemark per graded unit with its explanation as the popup"""
    kml = ET.Element('kml', xmlns=KML_NAMESPACE)
    document = ET.SubElement(kml, 'Document')
    ET.SubElement(document, 'name').text = name
    for style_id, href in STYLES.items():
        style = ET.SubElement(document, 'Style', id=style_id)
        icon = ET.SubElement(ET.SubElement(style, 'IconStyle'), 'Icon')
        ET.SubElement(icon, 'href').text = href

    for grade in grades:
        if not grade.location.is_valid():
            continue
        placemark = ET.SubElement(document, 'Placemark')
        ET.SubElement(placemark, 'name').text = grade.sender
        ET.SubElement(placemark, 'description').text = _description(grade)
        ET.SubElement(placemark, 'styleUrl').text = f"#{_style_for(grade)}"
        point = ET.SubElement(placemark, 'Point')
        ET.SubElement(point, 'coordinates').text = grade.location.kml()

    ET.indent(kml)
    return XML_DECLARATION + ET.tostring(kml, encoding='unicode')


def write_feedback_kml(grades: List, path: str, name: str) -> None:
    write_text(render_feedback_kml(grades, name), path)


def write_kml(graph: P2PGraph, path: str, name: str = "P2P") -> None:
    write_text(render_kml(graph, name), path)
