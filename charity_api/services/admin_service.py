from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

from charity_api.models.stats import (
    total_raised,
    total_donors,
    total_campaigns,
    total_donations,
    list_all_donations,
)
from charity_api.utils.serializers import money, serialize_donation


def platform_stats() -> Dict[str, Any]:
    """
    Four independent counters fetched in parallel. Each is its own snapshot, so
    they are not guaranteed consistent with each other under concurrent writes.
    """
    with ThreadPoolExecutor(max_workers=4) as pool:
        raised = pool.submit(total_raised)
        donors = pool.submit(total_donors)
        campaigns = pool.submit(total_campaigns)
        donations = pool.submit(total_donations)
        return {
            "totalRaised": money(raised.result()),
            "totalDonors": donors.result(),
            "totalCampaigns": campaigns.result(),
            "totalDonations": donations.result(),
        }


def all_donations() -> List[Dict[str, Any]]:
    return [serialize_donation(r) for r in list_all_donations()]
