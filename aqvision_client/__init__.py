"""
AQ-Vision Insight Client

Merges live data from the aggregation proxy into a prompt and renders the
language model's answer.
"""

from aqvision_client.insight_client import InsightClient, RequestState
from aqvision_client.prompts import InsightType
from aqvision_client.render import InsightPanel

__all__ = ["InsightClient", "InsightPanel", "InsightType", "RequestState"]
