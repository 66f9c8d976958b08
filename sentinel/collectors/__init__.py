"""
Sentinel Collectors
====================

Packet sources feeding the pipeline.
"""

from sentinel.collectors.traffic_simulator import TrafficSimulator

__all__ = ["TrafficSimulator"]
