"""Pytest configuration for Life RPG backend tests."""
import sys
from pathlib import Path

import pytest

# Ensure the backend package is importable
backend_root = Path(__file__).resolve().parent.parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

from app.schemas.attribute import Attribute, AffectedAttribute, AttributeStrength  # noqa: E402
from app.schemas.quest import Quest  # noqa: E402


@pytest.fixture
def attributes():
    return [
        Attribute(name="Discipline", order=0),
        Attribute(name="Vitality", order=1),
        Attribute(name="Intelligence", order=2),
    ]


@pytest.fixture
def make_quest():
    def _make(name, value=0, order=0, affected=("Discipline",), strength=AttributeStrength.NORMAL):
        return Quest(
            name=name,
            affected_attributes=[AffectedAttribute(name=a, strength=strength) for a in affected],
            order=order,
            experience_point_value=value,
        )

    return _make
