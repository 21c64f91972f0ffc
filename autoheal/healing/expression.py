from __future__ import annotations

import re
from dataclasses import dataclass

_QUOTED = r"""(?P<quote>['"])(?P<value>.*?)(?P=quote)"""

TEXT_PATTERN = re.compile(r"text\(\)\s*=\s*" + _QUOTED, re.IGNORECASE)
ID_PATTERN = re.compile(r"@id\s*=\s*" + _QUOTED, re.IGNORECASE)
CLASS_PATTERN = re.compile(r"@class\s*=\s*" + _QUOTED, re.IGNORECASE)
NAME_PATTERN = re.compile(r"@name\s*=\s*" + _QUOTED, re.IGNORECASE)
TAG_PATTERN = re.compile(r"^[A-Za-z_][\w.:-]*$")

PATH_PREFIXES = ("/", "(", "./")


@dataclass(frozen=True, slots=True)
class ExtractedSignals:
    id: str | None = None
    name: str | None = None
    class_name: str | None = None
    text: str | None = None
    tag_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return not any((self.id, self.name, self.class_name, self.text, self.tag_name))

    def as_dict(self) -> dict[str, str | None]:
        return {
            "id": self.id,
            "name": self.name,
            "class_name": self.class_name,
            "text": self.text,
            "tag_name": self.tag_name,
        }


def is_path_expression(expression) -> bool:
    if not isinstance(expression, str):
        return False
    return expression.strip().startswith(PATH_PREFIXES)


def extract_signals(expression: str) -> ExtractedSignals:
    """Pulls matching hints out of a locator that no longer resolves.

    Every rule runs on its own; a rule that finds nothing leaves its field
    unset, so a malformed expression simply produces empty signals.
    """

    if not isinstance(expression, str):
        return ExtractedSignals()
    return ExtractedSignals(
        id=_first_value(ID_PATTERN, expression),
        name=_first_value(NAME_PATTERN, expression),
        class_name=_first_value(CLASS_PATTERN, expression),
        text=_first_value(TEXT_PATTERN, expression),
        tag_name=_final_step_tag(expression),
    )


def split_steps(expression: str) -> list[str]:
    """Splits on `/` outside of predicates and string literals."""

    steps: list[str] = []
    current: list[str] = []
    depth = 0
    quote = ""
    for char in expression:
        if quote:
            current.append(char)
            if char == quote:
                quote = ""
            continue
        if char in ("'", '"'):
            quote = char
        elif char in ("[", "("):
            depth += 1
        elif char in ("]", ")"):
            depth = max(depth - 1, 0)
        elif char == "/" and depth == 0:
            steps.append("".join(current))
            current = []
            continue
        current.append(char)
    steps.append("".join(current))
    return [step.strip() for step in steps]


def _first_value(pattern: re.Pattern[str], expression: str) -> str | None:
    match = pattern.search(expression)
    if match is None:
        return None
    return match.group("value")


def _final_step_tag(expression: str) -> str | None:
    steps = [step for step in split_steps(expression.strip()) if step]
    if not steps:
        return None
    last_step = steps[-1]
    if "@" in last_step or "text()" in last_step.lower():
        return None
    tag = last_step.split("[", 1)[0].strip()
    if not TAG_PATTERN.match(tag) or "::" in tag:
        return None
    return tag.lower()
