"""
P2P Graph - Field operators, target stations and the messages between them

build() makes a single pass over the messages. Every message whose
destination resolves to a known target becomes an Edge on both ends;
anything that can't be resolved is counted, never guessed. The graph is
read-only afterwards.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from ..counter import Counter
from ..location import Coordinate, INVALID, distance_miles, haversine_m

DASHES = "-" * 60
DEFAULT_CO_LOCATION_METERS = 10


@dataclass(frozen=True)
class Edge:
    """One message from a field station to a target station"""
    from_call: str
    to_call: str
    message_id: str
    timestamp: Optional[datetime]
    message_kind: str = ""

    @property
    def time_text(self) -> str:
        return self.timestamp.strftime("%H:%M") if self.timestamp else "--:--"


def _edge_order(edge: Edge):
    return (edge.timestamp is None, edge.timestamp or datetime.min, edge.message_id)


def _kind_counts(edges: Iterable[Edge]) -> Counter:
    counter = Counter('message_kind')
    for edge in edges:
        counter.increment(edge.message_kind)
    return counter


@dataclass
class Target:
    """Relay/gateway station that field operators send to"""
    call: str
    band: str = ""
    center_freq: str = ""
    dial_freq: str = ""
    location: Coordinate = INVALID
    location_name: str = ""
    extra: Dict[str, str] = field(default_factory=dict)
    inbound: List[Edge] = field(default_factory=list)

    def kind_counts(self) -> Counter:
        return _kind_counts(self.inbound)


@dataclass
class Field:
    """Field operator station"""
    call: str
    location: Coordinate = INVALID
    outbound: List[Edge] = field(default_factory=list)

    def kind_counts(self) -> Counter:
        return _kind_counts(self.outbound)


@dataclass
class P2PGraph:
    targets: Dict[str, Target] = field(default_factory=dict)
    fields: Dict[str, Field] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    unresolved_targets: Counter = field(default_factory=lambda: Counter('unresolved_targets'))
    unresolved_fields: Counter = field(default_factory=lambda: Counter('unresolved_fields'))

    @property
    def resolved_count(self) -> int:
        return len(self.edges)

    @property
    def dropped_count(self) -> int:
        return self.unresolved_targets.total() + self.unresolved_fields.total()

    def missing_targets(self) -> List[Target]:
        """Targets that heard nothing, by call sign"""
        return sorted((t for t in self.targets.values() if not t.inbound), key=lambda t: t.call)

    def active_fields(self) -> List[Field]:
        return [f for f in self.fields.values() if f.outbound]

    def co_located(self, threshold_meters: float = DEFAULT_CO_LOCATION_METERS) -> List[Tuple[str, str, float]]:
        """
        Pairs of stations closer than threshold_meters

        Usually a sign of a copy/paste location; returns (call, call, meters).
        """
        nodes = [(f"field {f.call}", f.location) for f in self.fields.values()]
        nodes += [(f"target {t.call}", t.location) for t in self.targets.values()]
        nodes = [(name, loc) for name, loc in nodes if loc.is_valid()]
        if len(nodes) < 2:
            return []

        lats = np.array([loc.lat for _, loc in nodes])
        lons = np.array([loc.lon for _, loc in nodes])
        distances = haversine_m(lats[:, None], lons[:, None], lats[None, :], lons[None, :])

        pairs = []
        for i, j in zip(*np.triu_indices(len(nodes), k=1)):
            if distances[i, j] <= threshold_meters:
                pairs.append((nodes[i][0], nodes[j][0], float(distances[i, j])))
        return pairs

    def field_description(self, station: Field) -> str:
        """'Outbound messages: N' then one line per message, oldest first"""
        lines = [f"Outbound messages: {len(station.outbound)}", DASHES]
        for edge in station.outbound:
            target = self.targets[edge.to_call]
            lines.append(
                f"{edge.time_text}, {target.call} ({target.band}, {_miles(station.location, target.location)})"
            )
        return "\n".join(lines)

    def target_description(self, target: Target) -> str:
        """Station details, then 'Inbound messages: N' and one line per message"""
        lines = []
        if target.dial_freq:
            header = f"{target.dial_freq} KHz dial"
            if target.location_name:
                header += f", {target.location_name}"
            lines.append(header)
        details = [f"band: {target.band}"] if target.band else []
        details += [f"{key}: {value}" for key, value in target.extra.items() if value]
        if details:
            lines.append(", ".join(details))

        lines.append(f"Inbound messages: {len(target.inbound)}")
        lines.append(DASHES)
        for edge in target.inbound:
            station = self.fields[edge.from_call]
            lines.append(f"{edge.time_text}, {station.call} ({_miles(station.location, target.location)})")
        return "\n".join(lines)


def _miles(a: Coordinate, b: Coordinate) -> str:
    if not (a.is_valid() and b.is_valid()):
        return "unknown"
    return f"{distance_miles(a, b)} miles"


def _resolve_target(message, targets: Dict[str, Target]) -> Optional[Target]:
    for address in message.addresses:
        if address in targets:
            return targets[address]
    return None


def build(
    targets: Iterable[Target],
    messages: Iterable,
    fields: Optional[Iterable[Field]] = None,
) -> P2PGraph:
    """
    Build the field/target graph from a set of messages

    Args:
        targets: Known target stations
        messages: Exported messages (need sender, addresses, location, timestamp)
        fields: Optional roster of field stations; without one, field nodes
            are created from message senders

    Returns:
        P2PGraph with time-ordered edge lists on every node
    """
    graph = P2PGraph()
    for target in targets:
        graph.targets[target.call.upper()] = replace(target, inbound=[])

    roster = fields is not None
    if roster:
        for station in fields:
            graph.fields[station.call.upper()] = replace(station, outbound=[])

    for message in messages:
        target = _resolve_target(message, graph.targets)
        if target is None:
            graph.unresolved_targets.increment(message.to or None)
            continue

        sender = (message.sender or "").upper()
        station = graph.fields.get(sender)
        if station is None:
            if roster:
                graph.unresolved_fields.increment(sender or None)
                continue
            station = Field(call=sender, location=message.location)
            graph.fields[sender] = station
        elif not station.location.is_valid() and message.location.is_valid():
            station.location = message.location

        edge = Edge(
            from_call=sender,
            to_call=target.call.upper(),
            message_id=message.message_id,
            timestamp=message.timestamp,
            message_kind=message.message_type,
        )
        graph.edges.append(edge)
        target.inbound.append(edge)
        station.outbound.append(edge)

    graph.edges.sort(key=_edge_order)
    for target in graph.targets.values():
        target.inbound.sort(key=_edge_order)
    for station in graph.fields.values():
        station.outbound.sort(key=_edge_order)

    return graph
