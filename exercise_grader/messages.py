"""
Exported Messages - Typed view of messages pulled from the mail client

Parsing the raw messages happens upstream; this module reads the exported
JSON (one object per message) into ExportedMessage instances the grader
can query by field name.
"""

import base64
import binascii
import json
from dataclasses import dataclass, field, fields as dataclass_fields
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .errors import ConfigurationError
from .evaluators.fieldtest.specs import format_datetime, parse_datetime
from .location import Coordinate, from_grid


@dataclass
class ExportedMessage:
    """One exported message with its typed form fields"""
    message_id: str
    sender: str
    to: str = ""
    source: str = ""
    to_list: List[str] = field(default_factory=list)
    cc_list: List[str] = field(default_factory=list)
    subject: str = ""
    timestamp: Optional[datetime] = None
    message_type: str = ""
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    grid: Optional[str] = None
    fields: Dict[str, Optional[str]] = field(default_factory=dict)
    attachments: Dict[str, bytes] = field(default_factory=dict)

    @property
    def location(self) -> Coordinate:
        """Reported lat/lon, else the center of the reported grid square"""
        coordinate = Coordinate(self.latitude, self.longitude)
        if coordinate.is_valid():
            return coordinate
        if self.grid:
            from_square = from_grid(self.grid)
            if from_square is not None:
                return from_square
        return coordinate

    @property
    def addresses(self) -> List[str]:
        """Primary 'to' first, then the to and cc lists, without repeats"""
        seen = []
        for address in [self.to] + list(self.to_list) + list(self.cc_list):
            address = (address or "").strip().upper()
            if address and address not in seen:
                seen.append(address)
        return seen

    def get(self, name: str):
        """
        Look up a value by name

        Message attributes win over form fields; the timestamp comes back
        formatted so it can be tested like any other date field.
        """
        if name in ('timestamp', 'date_time'):
            return format_datetime(self.timestamp) if self.timestamp else None
        if name == 'from':
            return self.sender
        if name in _ATTRIBUTE_NAMES and name not in ('fields', 'attachments'):
            return getattr(self, name)
        return self.fields.get(name)


_ATTRIBUTE_NAMES = {f.name for f in dataclass_fields(ExportedMessage)}


def _split_addresses(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.replace(';', ',').split(',') if part.strip()]
    return [str(part).strip() for part in value if str(part).strip()]


def _decode_attachments(data: Dict[str, str], message_id: str) -> Dict[str, bytes]:
    attachments = {}
    for name, encoded in (data or {}).items():
        try:
            attachments[name] = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError, TypeError):
            # A bad attachment is a per-message problem, not a setup one
            print(f"  ⚠ {message_id}: attachment '{name}' is not valid base64, skipped")
    return attachments


def message_from_dict(data: dict) -> ExportedMessage:
    """Build an ExportedMessage from one exported JSON object"""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Message is not an object: {data!r}")
    message_id = str(data.get('message_id') or data.get('messageId') or '')
    sender = str(data.get('from') or data.get('sender') or '').strip().upper()
    if not message_id or not sender:
        raise ConfigurationError(f"Message needs 'message_id' and 'from': {data}")

    timestamp = data.get('timestamp') or data.get('date_time')
    parsed = parse_datetime(timestamp)
    if timestamp and parsed is None:
        print(f"  ⚠ {message_id}: unparsable timestamp '{timestamp}'")

    to_list = _split_addresses(data.get('to_list'))
    to = str(data.get('to') or (to_list[0] if to_list else '')).strip().upper()

    return ExportedMessage(
        message_id=message_id,
        sender=sender,
        to=to,
        source=str(data.get('source', '')),
        to_list=[a.upper() for a in to_list],
        cc_list=[a.upper() for a in _split_addresses(data.get('cc_list'))],
        subject=str(data.get('subject', '')),
        timestamp=parsed,
        message_type=str(data.get('message_type', '')),
        latitude=data.get('latitude'),
        longitude=data.get('longitude'),
        grid=data.get('grid'),
        fields={k: (None if v is None else str(v)) for k, v in (data.get('fields') or {}).items()},
        attachments=_decode_attachments(data.get('attachments'), message_id),
    )


def load_messages(path: str) -> List[ExportedMessage]:
    """
    Load exported messages from a JSON file

    The file holds a list of message objects (or {"messages": [...]}).
    A missing, unreadable or empty file is fatal. Messages that can't be
    read are skipped with a warning.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Messages file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Messages file {path} is not valid JSON: {e}")

    if isinstance(data, dict):
        data = data.get('messages', [])
    if not data:
        raise ConfigurationError(f"No messages in {path}")

    messages = []
    skipped = 0
    for index, item in enumerate(data, start=1):
        try:
            messages.append(message_from_dict(item))
        except (ValueError, TypeError, AttributeError) as e:
            skipped += 1
            print(f"  ⚠ Message {index} skipped: {e}")

    if skipped:
        print(f"  ⚠ {skipped} of {len(data)} messages skipped")
    if not messages:
        raise ConfigurationError(f"No usable messages in {path}")

    return messages
