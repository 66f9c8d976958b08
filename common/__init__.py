"""
SentinelCore Common Module
==========================

Configuration, structured logging, console output and the async HTTP
client shared by every Sentinel component.
"""

from common.config import SentinelConfig, get_config

__all__ = ["SentinelConfig", "get_config"]
