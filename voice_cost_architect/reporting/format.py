from typing import Dict, List, Optional, Sequence

from ..charge_models.capacity import HostingRecommendation
from ..charge_models.types import CATEGORY_FIELDS, CostBreakdown
from ..config import CURRENCY
from ..pricing.engine import Delta, StackSummary
from .tables import _md_escape, render_detail_table

_CATEGORY_LABELS = {
    "platform": "Platform",
    "transport": "Transport",
    "noise_cancellation": "Noise Cancellation",
    "stt": "STT",
    "llm": "LLM / S2S",
    "tts": "TTS",
    "recording": "Recording",
}


def _format_currency(value: float, currency: str) -> str:
    return f"{value:,.2f} {currency}"


def _format_per_minute(value: float, currency: str) -> str:
    return f"{value:.4f} {currency}/min"


def _format_delta(delta: Optional[Delta], currency: str) -> str:
    if delta is None:
        return "-"
    if delta.absolute == 0:
        return "cheapest"
    return f"{delta.absolute:+,.2f} {currency} ({delta.percent:+.1f}%)"


def render_totals_table(summaries: Sequence[StackSummary], minutes: int, currency: str = CURRENCY) -> str:
    rows = [
        f"| Stack | Supported? | Monthly total ({minutes:,} min) | Per minute | Δ vs cheapest |",
        "|---|---|---:|---:|---|",
    ]
    for s in summaries:
        if not s.supported:
            rows.append(
                "| {name} | ⚠️ | n/a | n/a | {reason} |".format(
                    name=_md_escape(s.label or s.stack_id),
                    reason=_md_escape(f"not supported: {s.unsupported_reason}"),
                )
            )
            continue
        rows.append(
            "| {name} | ✅ | {total} | {pm} | {delta} |".format(
                name=_md_escape(s.label or s.stack_id),
                total=_format_currency(s.total, currency),
                pm=_format_per_minute(s.per_minute, currency),
                delta=_format_delta(s.delta_vs_cheapest, currency),
            )
        )
    return "\n".join(rows)


def render_category_table(breakdown: CostBreakdown, currency: str = CURRENCY) -> str:
    rows: List[str] = [
        "| Category | Monthly | Share |",
        "|---|---:|---:|",
    ]
    for name in CATEGORY_FIELDS:
        value = getattr(breakdown, name)
        share = (value / breakdown.total * 100.0) if breakdown.total else 0.0
        rows.append(f"| {_CATEGORY_LABELS[name]} | {_format_currency(value, currency)} | {share:.1f}% |")
    rows.append(f"| **Total** | **{_format_currency(breakdown.total, currency)}** | 100.0% |")
    return "\n".join(rows)


def render_best_plans(breakdown: CostBreakdown) -> str:
    if not breakdown.best_plans:
        return ""
    return "\n".join(f"- **{cat}**: {_md_escape(plan)}" for cat, plan in breakdown.best_plans.items())


def render_recommendation(rec: Optional[HostingRecommendation], minutes: int, currency: str = CURRENCY) -> str:
    if rec is None:
        return "_No self-hosting profile available._"
    return "\n".join(
        [
            f"**{_md_escape(rec.profile.label)}** at {minutes:,} min/mo "
            f"(~{_format_currency(rec.monthly_cost, currency)} with headroom, ops complexity: {rec.profile.ops_complexity})",
            "",
            f"- {_md_escape(rec.reason)}",
            f"- {_md_escape(rec.alternative_when)}",
        ]
    )


def render_report(
    breakdowns: Dict[str, CostBreakdown],
    summaries: Sequence[StackSummary],
    minutes: int,
    *,
    currency: str = CURRENCY,
    include_details: bool = False,
) -> str:
    """Markdown comparison report: totals, then one section per supported stack."""
    if not summaries:
        return ""

    sections: List[str] = ["## Stack totals", render_totals_table(summaries, minutes, currency), ""]
    sections.append("## Category rollups")
    for s in summaries:
        b = breakdowns.get(s.stack_id)
        if b is None or not b.supported:
            continue
        sections.append(f"### {_md_escape(s.label or s.stack_id)}")
        sections.append(render_category_table(b, currency))
        plans = render_best_plans(b)
        if plans:
            sections.append("")
            sections.append("**Selected plans**")
            sections.append("")
            sections.append(plans)
        if b.warnings:
            sections.append("")
            sections.append("**Warnings**")
            sections.append("")
            sections.extend(f"- ⚠️ {_md_escape(w)}" for w in b.warnings)
        if b.notes:
            sections.append("")
            sections.extend(f"> {_md_escape(n)}" for n in b.notes)
        if include_details:
            sections.append("")
            sections.append("**Line items**")
            sections.append("")
            sections.append(render_detail_table(b, currency))
        sections.append("")

    rates_version = next((b.rates_version for b in breakdowns.values() if b.rates_version), "")
    if rates_version:
        sections.append(f"_Rates verified {rates_version}. Estimates exclude tax and currency conversion._")
    return "\n".join(sections).strip()
