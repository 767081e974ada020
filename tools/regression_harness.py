"""Voice Cost Architect regression harness (lightweight).

Designed to run locally or in CI, without pytest.

Usage:
  python tools/regression_harness.py [max_minutes]

Checks, for every preset stack in both pipelines over the chart ticks:
  1) The preset is supported and priced without warnings.
  2) Each category's detail lines add up to that category's subtotal.
  3) The total equals the sum of subtotals; no subtotal is negative.
  4) Totals never decrease as the volume grows.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from voice_cost_architect.charge_models.types import CATEGORY_FIELDS, SUBTOTAL_FIELDS  # noqa: E402
from voice_cost_architect.pricing.engine import chart_ticks, compute  # noqa: E402
from voice_cost_architect.stacks import default_stacks  # noqa: E402

TOLERANCE = 1e-6


def _fail(msg: str) -> None:
    print(f"FAIL: {msg}")
    raise SystemExit(2)


def main() -> None:
    if len(sys.argv) > 2:
        print("Usage: python tools/regression_harness.py [max_minutes]")
        raise SystemExit(1)
    max_minutes = int(sys.argv[1]) if len(sys.argv) == 2 else 100_000

    stacks = []
    for stack in default_stacks():
        stacks.append(stack)
        stacks.append(stack.with_changes(id=f"{stack.id}-s2s", pipeline="speech-to-speech"))

    ticks = chart_ticks(max_minutes)
    checked = 0
    for stack in stacks:
        previous = None
        for minutes in ticks:
            b = compute(stack, minutes)
            where = f"{stack.label} ({stack.pipeline}) @ {minutes} min"

            # 1) Presets only use known models
            if not b.supported:
                _fail(f"{where}: unsupported ({b.unsupported_reason})")
            if b.warnings:
                _fail(f"{where}: unexpected warnings {b.warnings}")

            # 2) Detail lines reconcile with subtotals
            sums = {name: 0.0 for name in CATEGORY_FIELDS}
            for d in b.details:
                sums[SUBTOTAL_FIELDS[d.category]] += d.amount
            for name in CATEGORY_FIELDS:
                subtotal = getattr(b, name)
                if abs(sums[name] - subtotal) > TOLERANCE:
                    _fail(f"{where}: {name} details sum to {sums[name]:.6f}, subtotal is {subtotal:.6f}")
                if subtotal < -TOLERANCE:
                    _fail(f"{where}: negative {name} subtotal {subtotal:.6f}")

            # 3) Total is the sum of subtotals
            if abs(sum(b.by_category().values()) - b.total) > TOLERANCE:
                _fail(f"{where}: total {b.total:.6f} differs from sum of subtotals")

            # 4) Monotone in volume
            if previous is not None and b.total + TOLERANCE < previous:
                _fail(f"{where}: total {b.total:.2f} dropped below {previous:.2f}")
            previous = b.total
            checked += 1

    print(f"OK ({checked} breakdowns checked)")


if __name__ == "__main__":
    main()
