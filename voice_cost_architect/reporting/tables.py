from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..charge_models.types import CostBreakdown, CostPoint
from ..config import CURRENCY


def _md_escape(v: Any) -> str:
    s = "" if v is None else str(v)
    # Escape pipes so Markdown tables don't break
    return s.replace("|", "\\|").replace("\n", " ").strip()


def _money(v: float) -> str:
    return f"{v:,.2f}"


def render_detail_table(breakdown: CostBreakdown, currency: str = CURRENCY) -> str:
    """One row per line item, in computation order."""
    out: List[str] = [
        f"| Category | Item | Formula | Amount ({currency}) | Source |",
        "|---|---|---|---:|---|",
    ]
    for d in breakdown.details:
        source = f"[link]({d.source_url})" if d.source_url else ""
        out.append(
            "| "
            + " | ".join(
                [
                    _md_escape(d.category),
                    _md_escape(d.label),
                    _md_escape(d.formula),
                    _money(d.amount),
                    source,
                ]
            )
            + " |"
        )
    return "\n".join(out)


def render_series_table(series: Dict[str, Sequence[CostPoint]], currency: str = CURRENCY) -> str:
    """Volumes as rows, stacks as columns.

    Every series is expected to share the same volumes (e.g. ``chart_ticks``).
    Unsupported points render as ``n/a``.
    """
    if not series:
        return ""
    labels = list(series.keys())
    volumes: List[int] = sorted({p.volume for points in series.values() for p in points})
    by_label = {label: {p.volume: p for p in points} for label, points in series.items()}

    out: List[str] = [
        "| Minutes/mo | " + " | ".join(_md_escape(l) for l in labels) + " |",
        "|---:|" + "---:|" * len(labels),
    ]
    for v in volumes:
        cells: List[str] = []
        for label in labels:
            p = by_label[label].get(v)
            if p is None or not p.supported:
                cells.append("n/a")
            else:
                cells.append(_money(p.total))
        out.append(f"| {v:,} | " + " | ".join(cells) + " |")
    out.append("")
    out.append(f"_Monthly totals in {currency}._")
    return "\n".join(out)
