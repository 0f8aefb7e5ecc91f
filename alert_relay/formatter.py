"""
Alert message formatting

Turns a loosely structured alert payload into the Markdown text posted to the
chat webhook. Every field is optional; anything missing renders as "N/A".
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .models import AlertRecord, Rule

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
NO_RULES = "No rules violated."
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

def get_path(data: Any, *keys: str) -> Optional[Any]:
    """
    Walk nested dictionaries along ``keys``

    Returns None as soon as a step is missing or the current value is not a
    dictionary.
    """
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current

def display(value: Any) -> str:
    """Render a single field, falling back to N/A"""
    if value is None:
        return NOT_AVAILABLE
    return str(value)

def extract_rules(raw_rules: Any) -> List[Rule]:
    if not isinstance(raw_rules, list):
        return []
    rules = []
    for item in raw_rules:
        if isinstance(item, dict):
            rules.append(Rule.model_validate(item))
        else:
            logger.debug(f"Ignoring non-object rule entry: {item!r}")
            rules.append(Rule())
    return rules

def extract_record(payload: Any) -> AlertRecord:
    """
    Build an AlertRecord from a parsed payload

    Args:
        payload: Any decoded JSON value

    Returns:
        AlertRecord with None for every field that is absent
    """
    record = get_path(payload, "record")
    if not isinstance(record, dict):
        record = {}

    return AlertRecord(
        timestamp=get_path(record, "@timestamp"),
        request_id=get_path(record, "request_id"),
        message=get_path(record, "msg"),
        source_ip=get_path(record, "source", "ip"),
        source_port=get_path(record, "source", "port_num"),
        destination_ip=get_path(record, "destination", "ip"),
        destination_port=get_path(record, "destination", "port_num"),
        path=get_path(record, "path"),
        rules=extract_rules(get_path(record, "rules")),
    )

def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning None when it cannot be read"""
    if not value or not isinstance(value, str) or value.strip() == "":
        return None

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    except (ValueError, OverflowError):
        logger.debug(f"Could not parse timestamp: {value}")
        return None

    return parsed

def format_timestamp(value: Any) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return NOT_AVAILABLE
    return parsed.strftime(TIMESTAMP_FORMAT)

def format_rule(rule: Rule) -> str:
    return f" - Rule {display(rule.id)}: {display(rule.message)} (Severity: {display(rule.severity)})"

def format_rules(rules: List[Rule]) -> str:
    """One line per rule in input order, or the no-rules literal"""
    if not rules:
        return NO_RULES
    return "\n".join(format_rule(rule) for rule in rules)

def format_endpoint(ip: Any, port: Any) -> str:
    return f"{display(ip)}:{display(port)}"

def build_message(payload: Any, record: Optional[AlertRecord] = None) -> str:
    """
    Compose the Markdown chat message for an alert payload

    Args:
        payload: The decoded request body
        record: Fields already extracted from payload, if available

    Returns:
        The Markdown text, ending with the full payload as a json code block
    """
    if record is None:
        record = extract_record(payload)
    pretty_payload = json.dumps(payload, indent=2, ensure_ascii=False)

    lines = [
        f"### 🚨 Security Alert: {display(record.message)}",
        f"**Timestamp**: {format_timestamp(record.timestamp)}",
        f"**Request ID**: {display(record.request_id)}",
        f"**Source IP/Port**: {format_endpoint(record.source_ip, record.source_port)}",
        f"**Destination IP/Port**: {format_endpoint(record.destination_ip, record.destination_port)}",
        "**Rules Violated**:",
        format_rules(record.rules),
        f"**Path**: {display(record.path)}",
        "---",
        "**Full JSON Payload**:",
        "```json",
        pretty_payload,
        "```",
    ]
    return "\n".join(lines)

def summarize(record: AlertRecord) -> Dict[str, Any]:
    """Short dictionary of the identifying fields, used for log lines"""
    return {
        "request_id": display(record.request_id),
        "message": display(record.message),
        "rule_count": len(record.rules),
    }
