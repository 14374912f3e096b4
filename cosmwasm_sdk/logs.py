"""
Parsing of raw transaction execution logs.

A successful transaction's raw log is a JSON array with one entry per
message:

    [{"msg_index": 0, "log": "", "events": [
        {"type": "message", "attributes": [{"key": "code_id", "value": "42"}]}
    ]}]
"""
import json
import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .exceptions import AttributeNotFoundError, MalformedLogError

logger = logging.getLogger(__name__)


class Attribute(BaseModel):
    """A single key/value pair of an event"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str
    value: str = ""


class Event(BaseModel):
    """A typed event emitted during message execution"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    attributes: List[Attribute] = []


class Log(BaseModel):
    """Execution log of one message, index-aligned with the transaction's messages"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    msg_index: Optional[int] = None
    log: str = ""
    events: List[Event]


ParsedLog = List[Log]

_logs_adapter = TypeAdapter(List[Log])


def parse_raw_log(raw_log: Optional[str]) -> ParsedLog:
    """
    Parse a raw log string into typed log entries.

    Args:
        raw_log: The raw_log field of a successful transaction result

    Returns:
        One Log per message, in message order

    Raises:
        MalformedLogError: If the input is empty, not JSON, or not shaped like a log array
    """
    if not raw_log:
        raise MalformedLogError("Raw log is empty")

    try:
        data = json.loads(raw_log)
    except ValueError as e:
        raise MalformedLogError(f"Raw log is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedLogError(f"Raw log must be a JSON array, got {type(data).__name__}")

    try:
        logs = _logs_adapter.validate_python(data)
    except ValidationError as e:
        raise MalformedLogError(f"Raw log has an unexpected shape: {e}") from e

    # Older chains omit msg_index; entries are index-aligned with messages
    return [
        entry if entry.msg_index is not None else entry.model_copy(update={"msg_index": index})
        for index, entry in enumerate(logs)
    ]


def find_event(logs: Sequence[Log], event_type: str) -> Optional[Event]:
    """Return the first event of the given type across all log entries, if any."""
    for entry in logs:
        for event in entry.events:
            if event.type == event_type:
                return event
    return None


def find_attribute(logs: Sequence[Log], event_type: str, key: str) -> str:
    """
    Search all entries and events in order for the first matching attribute.

    Event types and keys are compared by exact, case-sensitive equality.

    Args:
        logs: Parsed log entries
        event_type: Event type, e.g. "message"
        key: Attribute key, e.g. "code_id"

    Returns:
        The attribute value

    Raises:
        AttributeNotFoundError: If no event of that type carries the key
    """
    for entry in logs:
        for event in entry.events:
            if event.type != event_type:
                continue
            for attribute in event.attributes:
                if attribute.key == key:
                    return attribute.value
    logger.debug(f"Attribute {key} not found in events of type {event_type}")
    raise AttributeNotFoundError(event_type, key)
