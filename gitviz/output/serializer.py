"""
Output serialization for gitviz.

Two encodings are supported:

* JSON, which keeps the nested shape of the sections map unchanged.
* Flattened text, one ``key: value`` line per leaf, meant for grep and
  shell pipelines. It is lossy beyond one level of nesting and is not
  meant to be parsed back.
"""

from typing import Any, Dict, List, Mapping, Optional

import orjson

META_FIELDS = ("repo", "since", "until", "repoAgeDays", "generated")


def to_json(sections: Mapping[str, Any], meta: Optional[Mapping[str, Any]] = None) -> str:
    """
    Encode the sections map as indented JSON.

    Args:
        sections: Sections map
        meta: Optional meta block, appended under the "meta" key

    Returns:
        JSON document
    """
    document = dict(sections)
    if meta is not None:
        document["meta"] = dict(meta)
    return orjson.dumps(document, option=orjson.OPT_INDENT_2).decode("utf-8")


def format_scalar(value: Any) -> str:
    """Render a leaf value the way the text output prints it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (list, tuple, dict))


class _Flattener:
    """Accumulates flattened lines for one sections map."""

    def __init__(self):
        self.lines: List[str] = []

    def push(self, key: str, value: Any) -> None:
        self.lines.append(f"{key}: {format_scalar(value)}")

    def emit(self, key: str, value: Any, depth: int = 1) -> None:
        if isinstance(value, (list, tuple)):
            self._emit_list(key, value, depth)
        elif isinstance(value, dict):
            self._emit_dict(key, value, depth)
        else:
            self.push(key, value)

    def _emit_list(self, key: str, value: Any, depth: int) -> None:
        if not value:
            self.lines.append(f"{key}: []")
            return

        if key == "authorList" and all(isinstance(item, str) for item in value):
            for identity in value:
                self.lines.append(f"author: {identity}")
            return

        last = len(value) - 1
        for idx, item in enumerate(value):
            base = f"{key}[{idx}]"
            if isinstance(item, dict):
                if not item:
                    self.lines.append(f"{base}: {{}}")
                else:
                    for field, field_value in item.items():
                        self.emit(field, field_value, depth + 1)
                if idx != last:
                    self.lines.append("")
            elif isinstance(item, (list, tuple)):
                if not item:
                    self.lines.append(f"{base}: []")
                for inner_idx, inner in enumerate(item):
                    self.emit(f"{base}[{inner_idx}]", inner, depth + 1)
            else:
                self.push(base, item)

    def _emit_dict(self, key: str, value: Dict[str, Any], depth: int) -> None:
        if (
            key == "commitFrequencyByAuthor"
            and depth == 1
            and value
            and all(isinstance(dates, dict) for dates in value.values())
        ):
            self._emit_author_blocks(value)
            return

        if not value:
            self.lines.append(f"{key}: {{}}")
            return

        # A top-level mapping of scalars drops its section prefix.
        if depth == 1 and all(_is_scalar(item) for item in value.values()):
            for sub_key, item in value.items():
                self.push(sub_key, item)
            return

        for sub_key, item in value.items():
            self.emit(f"{key}.{sub_key}", item, depth + 1)

    def _emit_author_blocks(self, value: Dict[str, Dict[str, Any]]) -> None:
        authors = list(value)
        for idx, author in enumerate(authors):
            self.lines.append(f"author: {author}")
            dates = value[author]
            for day in sorted(dates):
                self.push(day, dates[day])
            if idx != len(authors) - 1:
                self.lines.append("")


def flatten(sections: Mapping[str, Any]) -> List[str]:
    """
    Flatten a sections map into text lines.

    Args:
        sections: Sections map

    Returns:
        List of lines without trailing newlines
    """
    flattener = _Flattener()
    for key, value in sections.items():
        flattener.emit(key, value)
    return flattener.lines


def meta_lines(meta: Mapping[str, Any]) -> List[str]:
    """Meta block as text lines, in a fixed field order."""
    return [f"{field}: {format_scalar(meta.get(field))}" for field in META_FIELDS]


def to_text(sections: Mapping[str, Any], meta: Optional[Mapping[str, Any]] = None) -> str:
    """
    Encode the sections map as flattened text.

    Args:
        sections: Sections map
        meta: Optional meta block, printed first

    Returns:
        Text document without a trailing newline
    """
    lines = []
    if meta is not None:
        lines.extend(meta_lines(meta))
        if sections:
            lines.append("")
    lines.extend(flatten(sections))
    return "\n".join(lines)


def serialize(
    sections: Mapping[str, Any],
    output_format: str = "text",
    meta: Optional[Mapping[str, Any]] = None,
) -> str:
    """Encode sections in the requested format ("json" or "text")."""
    if output_format == "json":
        return to_json(sections, meta)
    if output_format == "text":
        return to_text(sections, meta)
    raise ValueError(f"Unknown output format: {output_format}")
