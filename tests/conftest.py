from __future__ import annotations

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    # CLI tests point structlog at the runner's stderr, which is gone afterwards
    yield
    structlog.reset_defaults()
