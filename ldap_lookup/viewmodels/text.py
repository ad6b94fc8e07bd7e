from __future__ import annotations

from typing import Iterable


def _render_item(item: dict, width: int) -> list[str]:
    label = f"{item['label']}:".ljust(width + 2)
    if not item.get("is_list"):
        return [f"{label}{item['value']}"]
    values = list(item["value"])
    lines = [f"{label}{values[0]}"]
    pad = " " * (width + 2)
    lines.extend(f"{pad}{v}" for v in values[1:])
    return lines


def render_users(users: Iterable[dict]) -> str:
    """Plain-text blocks, one per user, separated by blank lines."""
    blocks: list[str] = []
    for u in users:
        items = u.get("items") or []
        if not items:
            blocks.append(u.get("dn", ""))
            continue
        width = max(len(str(it["label"])) for it in items)
        lines: list[str] = []
        for it in items:
            lines.extend(_render_item(it, width))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + ("\n" if blocks else "")


def render_group(group_name: str, members: list[str], recursive: bool) -> str:
    mode = "recursive" if recursive else "direct"
    noun = "member" if len(members) == 1 else "members"
    header = f"{group_name} ({len(members)} {noun}, {mode})"
    return "\n".join([header, "-" * len(header), *members]) + "\n"
