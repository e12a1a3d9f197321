"""
Tool-call event normalization.

The voice vendor embeds the agent's function calls in the call transcript in
more than one encoding. This module flattens all of them into a single
ordered list of ToolEvent so nothing downstream needs to know about vendor
payload quirks.

Accepted transcript entries:

    # Nested invocation
    {"tool_call_invocation": {"name": "add_to_order", "arguments": "{...}"}}

    # Flat invocation (live vendor format)
    {"role": "tool_call_invocation", "name": "add_to_order", "arguments": "{...}"}

    # Conversation turn carrying a tool_calls array
    {"role": "agent", "tool_calls": [
        {"function_name": "set_order_type", "arguments": {"order_type": "pickup"}},
        {"function": {"name": "add_to_order", "arguments": "{...}"}},
    ]}

Arguments may be a JSON string or an already-decoded mapping. An entry whose
arguments cannot be decoded to a mapping is skipped on its own; the rest of
the transcript is still processed.
"""

import json
import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ValidationError

from .models import TOOL_ARG_SCHEMAS, ToolEvent

logger = logging.getLogger(__name__)


class ToolArgumentsError(ValueError):
    """Raised when a tool call's arguments cannot be decoded to a mapping."""


def decode_arguments(raw: Any) -> dict[str, Any]:
    """
    Decode tool-call arguments to a dict.

    Args:
        raw: JSON string, mapping, or None (no arguments)

    Raises:
        ToolArgumentsError: malformed JSON, or JSON that is not an object
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (str, bytes)):
        try:
            decoded = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ToolArgumentsError(f"Malformed tool arguments: {e}") from e
        if not isinstance(decoded, dict):
            raise ToolArgumentsError("Tool arguments are not a JSON object")
        return decoded
    raise ToolArgumentsError(f"Unsupported tool arguments type: {type(raw).__name__}")


def _event_from(name: Any, raw_args: Any) -> Optional[ToolEvent]:
    if not isinstance(name, str) or not name:
        return None
    try:
        args = decode_arguments(raw_args)
    except ToolArgumentsError as e:
        logger.warning("Skipping tool call %s: %s", name, e)
        return None
    return ToolEvent(name=name, args=args)


def _events_from_tool_calls(tool_calls: Iterable[Any]) -> list[ToolEvent]:
    events = []
    for call in tool_calls:
        if not isinstance(call, dict):
            continue
        function = call.get("function") if isinstance(call.get("function"), dict) else {}

        name = call.get("function_name") or function.get("name")
        # Flat arguments win over nested ones, matching the flat name key
        raw_args = call.get("arguments")
        if raw_args is None:
            raw_args = function.get("arguments")

        event = _event_from(name, raw_args)
        if event:
            events.append(event)
    return events


def extract_tool_events(transcript: Optional[list[Any]]) -> list[ToolEvent]:
    """
    Flatten a transcript-with-tool-calls array into ordered tool events.

    Transcript array order is taken as chronological order; events keep that
    order across all encodings.

    Args:
        transcript: The `transcript_with_tool_calls` array from call_ended

    Returns:
        List of ToolEvent, possibly empty
    """
    if not transcript:
        return []

    events: list[ToolEvent] = []
    for entry in transcript:
        if not isinstance(entry, dict):
            continue

        invocation = entry.get("tool_call_invocation")
        if isinstance(invocation, dict):
            event = _event_from(invocation.get("name"), invocation.get("arguments"))
            if event:
                events.append(event)
            continue

        if entry.get("role") == "tool_call_invocation":
            event = _event_from(entry.get("name"), entry.get("arguments"))
            if event:
                events.append(event)
            continue

        tool_calls = entry.get("tool_calls")
        if isinstance(tool_calls, list):
            events.extend(_events_from_tool_calls(tool_calls))

    logger.debug("Extracted %d tool events from %d transcript entries", len(events), len(transcript))
    return events


def parse_tool_args(event: ToolEvent) -> Optional[BaseModel]:
    """
    Validate an event's arguments against its tool's schema.

    Returns:
        The typed arguments, or None for unknown tools and invalid arguments
        (the event is then ignored by the reducer).
    """
    schema = TOOL_ARG_SCHEMAS.get(event.name)
    if schema is None:
        return None
    try:
        return schema.model_validate(event.args)
    except ValidationError as e:
        logger.warning(
            "Ignoring %s with invalid arguments (%d error(s))",
            event.name,
            e.error_count(),
        )
        return None
