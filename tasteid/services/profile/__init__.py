"""
TasteID engine.

One module per component, each a pure function of its inputs:
signal extraction, network mapping, archetype classification, pattern
detection, polarity scoring, consolidation tracking and compatibility.
"""

from tasteid.services.profile.archetypes import ArchetypeClassifier
from tasteid.services.profile.compatibility import CompatibilityMatcher
from tasteid.services.profile.consolidation import ConsolidationTracker
from tasteid.services.profile.evidence import EvidenceCalculator
from tasteid.services.profile.extractor import SignalExtractor
from tasteid.services.profile.networks import NetworkMapper
from tasteid.services.profile.patterns import PatternDetector
from tasteid.services.profile.polarity import PolarityScorer
from tasteid.services.profile.service import TasteIDService

__all__ = [
    "ArchetypeClassifier",
    "CompatibilityMatcher",
    "ConsolidationTracker",
    "EvidenceCalculator",
    "NetworkMapper",
    "PatternDetector",
    "PolarityScorer",
    "SignalExtractor",
    "TasteIDService",
]
