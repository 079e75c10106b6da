"""
P2P KML - Map of field stations, targets and the links between them
"""

import xml.etree.ElementTree as ET

from .graph import P2PGraph

KML_NAMESPACE = "http://www.opengis.net/kml/2.2"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
STYLES = {
    'fieldpin': "http://maps.google.com/mapfiles/kml/paddle/blu-blank.png",
    'targetpin': "http://maps.google.com/mapfiles/kml/paddle/red-stars.png",
}


def _add_style(document: ET.Element, style_id: str, href: str) -> None:
    style = ET.SubElement(document, 'Style', id=style_id)
    icon_style = ET.SubElement(style, 'IconStyle')
    icon = ET.SubElement(icon_style, 'Icon')
    ET.SubElement(icon, 'href').text = href


def _add_point(parent: ET.Element, name: str, description: str, style: str, coordinates: str) -> None:
    placemark = ET.SubElement(parent, 'Placemark')
    ET.SubElement(placemark, 'name').text = name
    ET.SubElement(placemark, 'description').text = description
    ET.SubElement(placemark, 'styleUrl').text = f"#{style}"
    point = ET.SubElement(placemark, 'Point')
    ET.SubElement(point, 'coordinates').text = coordinates


def render_kml(graph: P2PGraph, name: str = "P2P") -> str:
    """
    KML document for the graph

    One placemark per station with a valid location, and one line per
    distinct field/target pair that exchanged messages.
    """
    kml = ET.Element('kml', xmlns=KML_NAMESPACE)
    document = ET.SubElement(kml, 'Document')
    ET.SubElement(document, 'name').text = name
    for style_id, href in STYLES.items():
        _add_style(document, style_id, href)

    fields_folder = ET.SubElement(document, 'Folder')
    ET.SubElement(fields_folder, 'name').text = "Fields"
    for station in sorted(graph.fields.values(), key=lambda f: f.call):
        if station.location.is_valid():
            _add_point(fields_folder, station.call, graph.field_description(station),
                       'fieldpin', station.location.kml())

    targets_folder = ET.SubElement(document, 'Folder')
    ET.SubElement(targets_folder, 'name').text = "Targets"
    for target in sorted(graph.targets.values(), key=lambda t: t.call):
        if target.location.is_valid():
            _add_point(targets_folder, target.call, graph.target_description(target),
                       'targetpin', target.location.kml())

    links_folder = ET.SubElement(document, 'Folder')
    ET.SubElement(links_folder, 'name').text = "Links"
    drawn = set()
    for edge in graph.edges:
        pair = (edge.from_call, edge.to_call)
        if pair in drawn:
            continue
        drawn.add(pair)
        start = graph.fields[edge.from_call].location
        end = graph.targets[edge.to_call].location
        if not (start.is_valid() and end.is_valid()):
            continue
        placemark = ET.SubElement(links_folder, 'Placemark')
        ET.SubElement(placemark, 'name').text = f"{edge.from_call}-{edge.to_call}"
        line = ET.SubElement(placemark, 'LineString')
        ET.SubElement(line, 'tessellate').text = "1"
        ET.SubElement(line, 'coordinates').text = f"{start.kml()} {end.kml()}"

    ET.indent(kml)
    return XML_DECLARATION + ET.tostring(kml, encoding='unicode')


def link_count(kml_text: str) -> int:
    """Number of LineStrings in a rendered document"""
    root = ET.fromstring(kml_text)
    return len(root.findall(f'.//{{{KML_NAMESPACE}}}LineString'))
