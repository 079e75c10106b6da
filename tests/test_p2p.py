"""
Tests for the P2P field/target matcher

Covers:
- Graph building and edge accounting
- Unresolved targets and off-roster senders
- Node descriptions
- KML output
- Roster loading and table exports
"""

import csv
import xml.etree.ElementTree as ET
from datetime import datetime

import pytest

from exercise_grader.errors import ConfigurationError
from exercise_grader.location import Coordinate
from exercise_grader.messages import ExportedMessage
from exercise_grader.p2p import (
    DASHES, Field, Target, build, link_count, load_fields, load_targets, render_kml,
)
from exercise_grader.p2p.kml import KML_NAMESPACE
from exercise_grader.reports import (
    write_edges_csv, write_fields_csv, write_kml, write_targets_csv,
)


def make_targets():
    return [
        Target(call="AA1AA", band="40m", dial_freq="7101.5", location_name="Olympia",
               location=Coordinate(47.0, -122.0)),
        Target(call="BB2BB", band="40m", dial_freq="7103.5", location_name="Salem",
               location=Coordinate(45.0, -122.0)),
        Target(call="CC3CC", band="80m", location=Coordinate(None, None)),
    ]


def make_messages():
    return [
        ExportedMessage(message_id="M1", sender="F1", to="AA1AA",
                        timestamp=datetime(2022, 12, 8, 10, 5),
                        latitude="46.0", longitude="-122.0", message_type="field_situation"),
        ExportedMessage(message_id="M2", sender="F1", to="bb2bb",
                        timestamp=datetime(2022, 12, 8, 9, 0),
                        latitude="46.0", longitude="-122.0", message_type="field_situation"),
        ExportedMessage(message_id="M3", sender="F2", to="ZZ9ZZ",
                        timestamp=datetime(2022, 12, 8, 11, 0), message_type="field_situation"),
        ExportedMessage(message_id="M4", sender="F2", to="", cc_list=["AA1AA"],
                        timestamp=datetime(2022, 12, 8, 11, 30), message_type="ics_213"),
    ]


@pytest.fixture
def graph():
    return build(make_targets(), make_messages())


class TestBuild:
    """Edges land on both ends or are counted as dropped"""

    def test_edge_accounting(self, graph):
        inbound = sum(len(t.inbound) for t in graph.targets.values())
        outbound = sum(len(f.outbound) for f in graph.fields.values())
        assert graph.resolved_count == 3
        assert inbound == outbound == graph.resolved_count

    def test_unresolved_counted(self, graph):
        assert graph.unresolved_targets.total() == 1
        assert graph.unresolved_targets.get("ZZ9ZZ") == 1
        assert all(e.to_call != "ZZ9ZZ" for e in graph.edges)

    def test_cc_address_resolves(self, graph):
        assert [e.message_id for e in graph.targets["AA1AA"].inbound] == ["M1", "M4"]

    def test_edges_in_time_order(self, graph):
        assert [e.message_id for e in graph.fields["F1"].outbound] == ["M2", "M1"]

    def test_field_nodes_from_senders(self, graph):
        assert set(graph.fields) == {"F1", "F2"}
        assert graph.fields["F1"].location.is_valid()
        assert not graph.fields["F2"].location.is_valid()

    def test_kind_counts(self, graph):
        counts = graph.targets["AA1AA"].kind_counts()
        assert counts.get("field_situation") == 1
        assert counts.get("ics_213") == 1

    def test_missing_targets(self, graph):
        assert [t.call for t in graph.missing_targets()] == ["CC3CC"]

    def test_roster_drops_unknown_senders(self):
        roster = [Field(call="F1", location=Coordinate(46.0, -122.0))]
        graph = build(make_targets(), make_messages(), roster)
        assert graph.resolved_count == 2
        assert graph.unresolved_fields.get("F2") == 1
        assert graph.unresolved_targets.total() == 1
        assert graph.resolved_count + graph.dropped_count == len(make_messages())

    def test_inputs_not_mutated(self):
        targets = make_targets()
        build(targets, make_messages())
        build(targets, make_messages())
        assert all(not t.inbound for t in targets)

    def test_co_located(self):
        targets = [
            Target(call="AA1AA", location=Coordinate(47.0, -122.0)),
            Target(call="AA2AA", location=Coordinate(47.00002, -122.0)),
            Target(call="AA3AA", location=Coordinate(48.0, -122.0)),
        ]
        pairs = build(targets, []).co_located(10)
        assert len(pairs) == 1
        assert pairs[0][0] == "target AA1AA"
        assert pairs[0][1] == "target AA2AA"
        assert pairs[0][2] < 10


class TestDescriptions:
    """Per-node popup text"""

    def test_field_description(self, graph):
        lines = graph.field_description(graph.fields["F1"]).split("\n")
        assert lines[0] == "Outbound messages: 2"
        assert lines[1] == DASHES
        assert lines[2] == "09:00, BB2BB (40m, 69 miles)"
        assert lines[3] == "10:05, AA1AA (40m, 69 miles)"

    def test_target_description(self, graph):
        lines = graph.target_description(graph.targets["AA1AA"]).split("\n")
        assert lines[0] == "7101.5 KHz dial, Olympia"
        assert lines[1] == "band: 40m"
        assert lines[2] == "Inbound messages: 2"
        assert lines[3] == DASHES
        assert lines[4] == "10:05, F1 (69 miles)"
        assert lines[5] == "11:30, F2 (unknown)"


class TestKml:
    """Map output"""

    def test_links_drawn_once_per_pair(self):
        messages = make_messages()
        messages.append(ExportedMessage(message_id="M5", sender="F1", to="AA1AA",
                                        timestamp=datetime(2022, 12, 8, 12, 0)))
        graph = build(make_targets(), messages)
        # F2 has no location, so only F1's two pairs are drawn
        assert link_count(render_kml(graph)) == 2

    def test_placemarks_only_for_valid_locations(self, graph):
        root = ET.fromstring(render_kml(graph, "Test"))
        ns = {"k": KML_NAMESPACE}
        names = [p.find("k:name", ns).text for p in root.iter(f"{{{KML_NAMESPACE}}}Placemark")
                 if p.find("k:Point", ns) is not None]
        assert sorted(names) == ["AA1AA", "BB2BB", "F1"]

    def test_styles_and_coordinates(self, graph):
        text = render_kml(graph)
        assert 'id="fieldpin"' in text
        assert 'id="targetpin"' in text
        assert "-122.0000,47.0000" in text

    def test_write_kml(self, graph, tmp_path):
        path = tmp_path / "out" / "p2p.kml"
        write_kml(graph, str(path), "ETO P2P")
        assert link_count(path.read_text(encoding="utf-8")) == 2


class TestRosters:
    """Target and field CSV loading"""

    def test_load_targets(self, tmp_path):
        path = tmp_path / "targets.csv"
        path.write_text(
            "Active,Call,Band,Center,Dial,Location,Latitude,Longitude,Channel,Region\n"
            "TRUE,aa1aa,,7103,7101.5,Olympia,47.0,-122.0,P2P-1,West\n"
            "FALSE,BB2BB,40m,7105,7103.5,Salem,45.0,-122.0,P2P-2,West\n",
            encoding="utf-8",
        )
        targets = load_targets(str(path))
        assert len(targets) == 1
        target = targets[0]
        assert target.call == "AA1AA"
        assert target.band == "40m"
        assert target.extra == {"Channel": "P2P-1", "Region": "West"}
        assert target.location.is_valid()

    def test_missing_targets_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_targets(str(tmp_path / "nope.csv"))

    def test_header_only_targets_file(self, tmp_path):
        path = tmp_path / "targets.csv"
        path.write_text("Active,Call,Band,Center,Dial,Location,Latitude,Longitude\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_targets(str(path))

    def test_load_fields(self, tmp_path):
        path = tmp_path / "fields.csv"
        path.write_text("Call,Latitude,Longitude\nf1,46.0,-122.0\n", encoding="utf-8")
        fields = load_fields(str(path))
        assert fields[0].call == "F1"


class TestExports:
    """Updated roster tables"""

    def read(self, path):
        with open(path, newline="", encoding="utf-8") as f:
            return list(csv.reader(f))

    def test_targets_csv(self, graph, tmp_path):
        path = tmp_path / "updated-targets.csv"
        write_targets_csv(graph, str(path))
        rows = self.read(path)
        header = rows[0]
        assert "Messages" in header
        messages_col = header.index("Messages")
        # Only targets with messages, busiest first
        assert [r[0] for r in rows[1:]] == ["AA1AA", "BB2BB"]
        assert rows[1][messages_col] == "2"
        assert rows[1][header.index("ics_213")] == "1"

    def test_fields_csv(self, graph, tmp_path):
        path = tmp_path / "updated-fields.csv"
        write_fields_csv(graph, str(path))
        rows = self.read(path)
        assert rows[0][:4] == ["Call", "Latitude", "Longitude", "Messages"]
        assert [r[0] for r in rows[1:]] == ["F1", "F2"]

    def test_edges_csv(self, graph, tmp_path):
        path = tmp_path / "p2p-entries.csv"
        write_edges_csv(graph, str(path))
        rows = self.read(path)
        assert len(rows) == 1 + graph.resolved_count
        assert rows[1][:3] == ["F1", "BB2BB", "M2"]
