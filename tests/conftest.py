import os
import sys
from pathlib import Path

import pytest

# Ensure src/ and the test helpers are importable when running pytest without installation
_ROOT = Path(__file__).resolve().parents[1]
for _p in (_ROOT / "src", _ROOT / "tests"):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))
os.environ.setdefault("HEADLESS", "true")

from fakes import FakeElement, FakeSession  # noqa: E402


@pytest.fixture
def session():
    """Empty fake session; tests add elements as needed."""
    return FakeSession()


@pytest.fixture
def heading_session():
    """Fake session whose page has <h1>Hello</h1>."""
    return FakeSession(elements={"h1": [FakeElement(text="Hello")]})
