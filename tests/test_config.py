"""Tests for DetectorConfig."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from phaserlock.config import DetectorConfig
from phaserlock.constants import MAX_SNAPSHOT_TASKS


class TestDetectorConfig:
    """Construction and validation."""

    def test_defaults(self) -> None:
        """Defaults dedup edges, verify witnesses and use the task bound constant."""
        config = DetectorConfig()
        assert config.dedup_edges is True
        assert config.verify_witness is True
        assert config.max_tasks == MAX_SNAPSHOT_TASKS

    @pytest.mark.parametrize("max_tasks", [0, -1])
    def test_rejects_non_positive_limit(self, max_tasks: int) -> None:
        """The task bound must be positive."""
        with pytest.raises(ValueError, match="max_tasks must be positive"):
            DetectorConfig(max_tasks=max_tasks)

    @given(max_tasks=st.integers(min_value=1, max_value=10**9))
    def test_accepts_positive_limit(self, max_tasks: int) -> None:
        """PROPERTY: any positive bound is accepted unchanged."""
        assert DetectorConfig(max_tasks=max_tasks).max_tasks == max_tasks

    def test_frozen(self) -> None:
        """Configs are immutable and hashable."""
        config = DetectorConfig()
        with pytest.raises(AttributeError):
            config.dedup_edges = False  # type: ignore[misc]
        assert hash(config) == hash(DetectorConfig())
