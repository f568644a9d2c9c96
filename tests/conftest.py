"""Shared fixtures"""

import pytest

from adroi.store import CampaignStore


@pytest.fixture
def store(tmp_path):
    return CampaignStore(str(tmp_path / "data"))


@pytest.fixture
def spring_inputs():
    """Reference campaign: $10,000 at $8 CPM, 2.5% CTR, 3% CR, $150 check"""
    return dict(budget=10000.0, cpm=8.0, ctr=2.5, cr=3.0, avg_check=150.0)
