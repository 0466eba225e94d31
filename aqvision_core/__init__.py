"""
AQ-Vision shared core

Configuration, logging, exception taxonomy and the domain models shared by
the aggregation proxy (aqvision_api) and the insight client (aqvision_client).
"""

__version__ = "1.0.0"
__author__ = "AQ-Vision Team"
