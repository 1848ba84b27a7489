from mediabuy.models.campaign_record import CampaignRecord
from mediabuy.models.network_cap import NetworkCap

__all__ = [
    "CampaignRecord",
    "NetworkCap",
]
