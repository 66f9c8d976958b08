"""
Sentinel Rules
===============

Stateless heuristic detection rules:

- ``network``  -- port scan and SYN flood
- ``auth``     -- SSH brute force
- ``payload``  -- SQL-injection signatures
- ``ruleset``  -- the collection the engine runs per source group
"""

from sentinel.rules.auth import BruteForceRule
from sentinel.rules.base import DetectionRule
from sentinel.rules.network import PortScanRule, SynFloodRule
from sentinel.rules.payload import SqlInjectionRule
from sentinel.rules.ruleset import RuleSet

__all__ = [
    "DetectionRule",
    "PortScanRule",
    "SynFloodRule",
    "BruteForceRule",
    "SqlInjectionRule",
    "RuleSet",
]
