"""
Decoders for terraform command output.

- JSON objects from `output -json` and `show -json`
- Newline separated resource addresses from `state list`
- The HCL-like block printed by `state show`
"""

import json
import logging
import re
from typing import Any, Dict, List, Union

import hcl2

from .errors import MalformedOutputError

logger = logging.getLogger(__name__)

# CSI and OSC escape sequences
ANSI_CODES = re.compile(
    r"[\u001B\u009B][\[\]()#;?]*"
    r"(?:(?:(?:[a-zA-Z\d]*(?:;[a-zA-Z\d]*)*)?\u0007)"
    r"|(?:(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PRZcf-ntqry=><~]))"
)

RawOutput = Union[bytes, str]


def _to_text(raw: RawOutput) -> str:
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedOutputError(f"Output is not valid UTF-8: {e}") from e
    return raw


def strip_ansi(text: str) -> str:
    """Remove ANSI styling from text."""
    return ANSI_CODES.sub("", text)


def sanitize_hcl(text: str) -> str:
    """
    Prepare `state show` output for the HCL parser.

    Drops blank lines and the leading "# address:" banner, then strips
    ANSI styling.
    """
    lines = [line for line in text.split("\n") if line]
    return strip_ansi("\n".join(lines[1:]))


def decode_json(raw: RawOutput) -> Dict[str, Any]:
    """
    Decode a JSON object.

    Raises:
        MalformedOutputError: If raw is not a JSON object
    """
    text = _to_text(raw)
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(f"Invalid JSON output: {e}") from e

    if not isinstance(decoded, dict):
        raise MalformedOutputError(
            f"Expected a JSON object, got {type(decoded).__name__}"
        )

    return decoded


def decode_resource_list(raw: RawOutput) -> List[str]:
    """Split `state list` output into resource addresses, keeping order."""
    text = _to_text(raw)
    return [line.strip() for line in text.split("\n") if line.strip()]


def decode_resource(raw: RawOutput) -> Dict[str, Any]:
    """
    Decode the block printed by `terraform state show <address>`.

    Returns:
        Parsed HCL, e.g. {"resource": [{"aws_instance": {"web": {...}}}]}

    Raises:
        MalformedOutputError: If there is nothing to parse or HCL parsing fails
    """
    text = sanitize_hcl(_to_text(raw))
    if not text.strip():
        raise MalformedOutputError("No resource block found in output")

    try:
        parsed = hcl2.loads(text + "\n")
    except Exception as e:
        logger.error(f"HCL parse error in state output: {e}")
        raise MalformedOutputError(f"Invalid resource output: {e}") from e

    return _unquote(parsed)


def _is_metadata_key(key: Any) -> bool:
    # e.g. __is_block__, __start_line__
    return isinstance(key, str) and len(key) > 4 and key.startswith("__") and key.endswith("__")


def _unquote(value: Any) -> Any:
    """
    Normalize hcl2 output across releases.

    Strips the double quotes some releases keep on labels and strings,
    and drops their __dunder__ metadata keys.
    """
    if isinstance(value, dict):
        return {
            _unquote(k): _unquote(v)
            for k, v in value.items()
            if not _is_metadata_key(k)
        }
    if isinstance(value, list):
        return [_unquote(v) for v in value]
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value
