"""
Local persistence of saved campaigns and comparison scenarios
"""

from .campaign_store import CampaignRecord, CampaignStore, ScenarioRecord

__all__ = [
    'CampaignStore',
    'CampaignRecord',
    'ScenarioRecord',
]
