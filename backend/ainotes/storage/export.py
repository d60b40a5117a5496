from __future__ import annotations
import json
from datetime import datetime, timezone
from typing import List
from ..models import Note

def to_markdown(notes: List[Note], *, exported_at: datetime | None = None) -> str:
    exported_at = exported_at or datetime.now(timezone.utc)
    lines = []
    lines.append("# My Notes Export")
    lines.append("")
    lines.append(f"*Exported on: {exported_at.date().isoformat()}*")
    lines.append("")
    for n in notes:
        lines.append(f"## {n.title}")
        lines.append("")
        lines.append(f"**Created:** {n.created_at.date().isoformat()}")
        lines.append(f"**Tags:** {', '.join(n.tags)}")
        lines.append("")
        lines.append(n.content)
        lines.append("")
        if n.summary:
            lines.append("### AI Summary")
            lines.append("")
            for point in n.summary:
                lines.append(f"- {point}")
            lines.append("")
        lines.append("---")
        lines.append("")
    return "\n".join(lines)

def to_json(notes: List[Note], *, exported_at: datetime | None = None) -> str:
    exported_at = exported_at or datetime.now(timezone.utc)
    data = {
        "exportDate": exported_at.isoformat(),
        "notesCount": len(notes),
        "notes": [
            {
                "id": n.id,
                "title": n.title,
                "content": n.content,
                "tags": n.tags,
                "summary": n.summary,
                "createdAt": n.created_at.isoformat(),
                "updatedAt": n.updated_at.isoformat(),
            }
            for n in notes
        ],
    }
    return json.dumps(data, ensure_ascii=False, indent=2)
