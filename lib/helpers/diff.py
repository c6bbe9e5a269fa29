import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from deepdiff import DeepDiff

from utils.code_block import clean_code_block, escape_newlines
from utils.truncate import truncate

UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}\b-[0-9a-fA-F]{4}\b-[0-9a-fA-F]{4}\b-[0-9a-fA-F]{4}\b-[0-9a-fA-F]{12}"
)

# Timestamps set on creation never carry a meaningful change, at any depth
IGNORED_PATHS = ("createdAt", "created_at")

FIELD_VALUE_LIMIT = 1024
FENCE_OPEN = "```diff\n"
FENCE_CLOSE = "\n```"


@dataclass
class DiffEntry:
    path: str
    before: Any = None
    after: Any = None


@dataclass
class DiffField:
    name: str
    value: str
    inline: bool = True


def exists(value: Any) -> bool:
    if isinstance(value, str):
        return len(value) > 0
    return value is not None


def _record_id(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("id")
    return getattr(record, "id", None)


def normalize_keyed_collections(snapshot: Mapping[str, Any]) -> dict[str, Any]:
    """Turn top-level lists of records with an ``id`` into mappings keyed by id.

    Only the first element is checked, so empty lists and lists whose first
    record has no id are kept as they are. The input is not modified.
    """
    normalized = {}

    for key, value in snapshot.items():
        if isinstance(value, (list, tuple)) and value and _record_id(value[0]):
            normalized[key] = {str(_record_id(record)): record for record in value}
        else:
            normalized[key] = value

    return normalized


def _flatten(snapshot: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat = {}

    for key, value in snapshot.items():
        path = f"{prefix}.{key}" if prefix else str(key)

        if isinstance(value, Mapping) and value:
            flat.update(_flatten(value, path))
        else:
            flat[path] = value

    return flat


def is_ignored(path: str) -> bool:
    return path.rsplit(".", 1)[-1] in IGNORED_PATHS


def _changed_paths(before: dict[str, Any], after: dict[str, Any]) -> set[str]:
    # A zero threshold keeps changes reported per flat key
    diff = DeepDiff(before, after, view="tree", threshold_to_diff_deeper=0)

    changed = set()
    for levels in diff.values():
        for level in levels:
            path = level.path(output_format="list")

            if not path:
                return {
                    key
                    for key in before.keys() | after.keys()
                    if key not in before or key not in after or before[key] != after[key]
                }

            changed.add(path[0])

    return changed


def compute_diff(original: Mapping[str, Any], updated: Mapping[str, Any]) -> list[DiffEntry]:
    """Compare two snapshots and return one entry per changed leaf path.

    Entries follow the order paths appear in ``original``, then paths only
    present in ``updated``. Creation timestamps are skipped wherever they sit.
    """
    before = {
        path: value
        for path, value in _flatten(normalize_keyed_collections(original)).items()
        if not is_ignored(path)
    }
    after = {
        path: value
        for path, value in _flatten(normalize_keyed_collections(updated)).items()
        if not is_ignored(path)
    }

    changed = _changed_paths(before, after)
    ordered = list(before) + [path for path in after if path not in before]

    entries = []
    for path in ordered:
        if path not in changed:
            continue

        entry = DiffEntry(path=path, before=before.get(path), after=after.get(path))
        if not exists(entry.before) and not exists(entry.after):
            continue

        entries.append(entry)

    return entries


def shorten_uuids(path: str) -> str:
    return UUID_PATTERN.sub(lambda match: match.group(0).split("-")[0], path)


def _diff_line(prefix: str, value: Any) -> str:
    if not exists(value):
        return ""
    return f"{prefix} {escape_newlines(str(value))}\n"


def format_entry(entry: DiffEntry) -> DiffField:
    content = clean_code_block(_diff_line("-", entry.before) + _diff_line("+", entry.after))
    content = truncate(content, FIELD_VALUE_LIMIT - len(FENCE_OPEN) - len(FENCE_CLOSE))

    return DiffField(
        name=shorten_uuids(entry.path),
        value=f"{FENCE_OPEN}{content}{FENCE_CLOSE}",
    )


def compute_diff_fields(
    original: Mapping[str, Any], updated: Mapping[str, Any]
) -> list[DiffField]:
    return [format_entry(entry) for entry in compute_diff(original, updated)]
