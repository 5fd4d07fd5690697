"""
Serialization helpers for livepoll objects.

Provides explicit dict/JSON/YAML conversion for the data that crosses the
package boundary:
    - synthesis records (cached on the question document in the store)
    - layout snapshots (id -> card geometry for the renderer)
    - question results (plain data for the renderer)

parse_synthesis_payload() is deliberately tolerant: it accepts whatever
the synthesis collaborator returned and fills in defaults.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

import yaml

from livepoll.model import (
    SynthesisGroup,
    SynthesisRecord,
    TextCard,
)


def group_to_dict(g: SynthesisGroup) -> Dict[str, Any]:
    return {"theme": g.theme, "summary": g.summary, "contributions": list(g.contributions)}


def group_from_payload(d: Any) -> SynthesisGroup:
    if not isinstance(d, Mapping):
        d = {}
    theme = d.get("theme")
    summary = d.get("summary")
    contributions = d.get("contributions")
    return SynthesisGroup(
        theme=theme if isinstance(theme, str) else "Theme",
        summary=summary if isinstance(summary, str) else "",
        contributions=[c for c in contributions if isinstance(c, str)] if isinstance(contributions, list) else [],
    )


def parse_synthesis_payload(data: Any, source_count: Optional[int] = None) -> SynthesisRecord:
    """Normalize a raw collaborator response into a SynthesisRecord."""
    if not isinstance(data, Mapping):
        data = {}
    groups = data.get("groups")
    overall = data.get("overall_summary")
    return SynthesisRecord(
        groups=[group_from_payload(g) for g in groups] if isinstance(groups, list) else [],
        overall_summary=overall if isinstance(overall, str) else None,
        source_count=source_count,
    )


def synthesis_to_dict(r: SynthesisRecord) -> Dict[str, Any]:
    return {
        "overall_summary": r.overall_summary,
        "groups": [group_to_dict(g) for g in r.groups],
        "synthesized_count": r.source_count,
    }


def synthesis_from_dict(d: Dict[str, Any]) -> SynthesisRecord:
    count = d.get("synthesized_count")
    if isinstance(count, bool) or not isinstance(count, int):
        count = None
    return parse_synthesis_payload(d, source_count=count)


def synthesis_to_json(r: SynthesisRecord) -> str:
    return json.dumps(synthesis_to_dict(r), sort_keys=True)


def synthesis_from_json(s: str) -> SynthesisRecord:
    return synthesis_from_dict(json.loads(s))


def synthesis_to_yaml(r: SynthesisRecord) -> str:
    return yaml.safe_dump(synthesis_to_dict(r))


def synthesis_from_yaml(s: str) -> SynthesisRecord:
    return synthesis_from_dict(yaml.safe_load(s) or {})


def card_to_dict(c: TextCard) -> Dict[str, Any]:
    return {"text": c.text, "x": c.x, "y": c.y, "width": c.width, "height": c.height}


def card_from_dict(card_id: str, d: Dict[str, Any]) -> TextCard:
    return TextCard(
        id=card_id,
        text=d.get("text", ""),
        x=int(d["x"]),
        y=int(d["y"]),
        width=int(d["width"]),
        height=int(d["height"]),
    )


def layout_to_dict(positions: Mapping[str, TextCard]) -> Dict[str, Dict[str, Any]]:
    return {card_id: card_to_dict(card) for card_id, card in positions.items()}


def layout_from_dict(d: Mapping[str, Dict[str, Any]]) -> Dict[str, TextCard]:
    return {card_id: card_from_dict(card_id, card) for card_id, card in d.items()}


def layout_to_yaml(positions: Mapping[str, TextCard]) -> str:
    return yaml.safe_dump(layout_to_dict(positions))


def layout_from_yaml(s: str) -> Dict[str, TextCard]:
    return layout_from_dict(yaml.safe_load(s) or {})


def results_to_dict(results) -> Dict[str, Any]:
    """Flatten a QuestionResults into plain data for the renderer."""
    out: Dict[str, Any] = {
        "question_id": results.question_id,
        "type": results.question_type.value,
        "response_count": results.response_count,
        "synthesis_eligible_count": results.synthesis_eligible_count,
        "warnings": list(results.warnings),
    }
    if results.numeric is not None:
        s = results.numeric
        out["numeric"] = {
            "bins": [{"label": b.label, "count": b.count} for b in s.bins],
            "mean": s.mean,
            "median": s.median,
            "n": s.n,
            "parsed_count": s.parsed_count,
            "min": s.min,
            "max": s.max,
        }
    if results.category_totals is not None:
        out["category_totals"] = [{"category": t.category, "total": t.total} for t in results.category_totals]
    if results.terms is not None:
        out["terms"] = [{"term": t.term, "weight": t.weight} for t in results.terms]
    if results.text_items is not None:
        out["text_items"] = [{"id": i.id, "text": i.text} for i in results.text_items]
    return out


def results_to_json(results) -> str:
    return json.dumps(results_to_dict(results), sort_keys=True)
