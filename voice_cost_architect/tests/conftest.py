import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1].parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def ids():
    from voice_cost_architect.stacks import StackIdGenerator

    return StackIdGenerator()


@pytest.fixture
def presets(ids):
    from voice_cost_architect.stacks import default_stacks

    return {s.label: s for s in default_stacks(ids)}
