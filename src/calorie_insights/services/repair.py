"""Best-effort repair of near-JSON model output."""

import json
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from calorie_insights.errors import ResponseParseError

_logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```[\w+-]*")
_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_ADJACENT_OBJECTS = re.compile(r"}\s*{")
_TRAILING_COMMA = re.compile(r",[\s,]*}")
_BARE_KEY = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)\s*:")


@dataclass(frozen=True)
class RepairRule:
    """A single named text transformation."""

    name: str
    apply: Callable[[str], str]


def _outside_strings(
    pattern: re.Pattern[str], replacement: str
) -> Callable[[str], str]:
    """Build a substitution that leaves JSON string literals untouched."""

    def apply(text: str) -> str:
        pieces: list[str] = []
        position = 0
        for literal in _STRING_LITERAL.finditer(text):
            pieces.append(pattern.sub(replacement, text[position : literal.start()]))
            pieces.append(literal.group(0))
            position = literal.end()
        pieces.append(pattern.sub(replacement, text[position:]))
        return "".join(pieces)

    return apply


def strip_code_fences(text: str) -> str:
    """Remove Markdown fence markers, with or without a language tag."""
    return _FENCE.sub("", text)


def trim_to_braces(text: str) -> str:
    """Drop prose before the first '{' and after the last '}'."""
    start = text.find("{")
    if start > 0:
        text = text[start:]
    end = text.rfind("}")
    if end != -1:
        text = text[: end + 1]
    text = text.strip()
    if "{" not in text and "}" not in text:
        return ""
    return text


REPAIR_RULES: tuple[RepairRule, ...] = (
    RepairRule("strip_code_fences", strip_code_fences),
    RepairRule("trim_to_braces", trim_to_braces),
    RepairRule(
        "separate_adjacent_objects", _outside_strings(_ADJACENT_OBJECTS, "},{")
    ),
    RepairRule("drop_trailing_commas", _outside_strings(_TRAILING_COMMA, "}")),
    RepairRule("quote_bare_keys", _outside_strings(_BARE_KEY, r'\1"\2":')),
)


def repair(text: str, rules: Sequence[RepairRule] = REPAIR_RULES) -> str:
    """Apply the repair rules in order. Never raises."""
    repaired = text
    applied: list[str] = []
    for rule in rules:
        updated = rule.apply(repaired)
        if updated != repaired:
            applied.append(rule.name)
        repaired = updated
    if applied:
        _logger.debug("Repaired model output with rules: %s", ", ".join(applied))
    return repaired


def parse_model_json(text: str) -> object:
    """Repair model text and decode the first JSON value in it.

    Concatenated objects are separated by the repair rules; only the first
    one is returned.
    """
    repaired = repair(text)
    try:
        value, _ = json.JSONDecoder().raw_decode(repaired)
    except json.JSONDecodeError as exc:
        raise ResponseParseError(
            f"Model output is not valid JSON: {exc.msg}", text=text
        ) from exc
    except (ValueError, RecursionError) as exc:
        # Integer literals past the interpreter digit limit, or runaway nesting.
        raise ResponseParseError(
            f"Model output is not valid JSON: {exc}", text=text
        ) from exc
    return value
