"""모루 합성 Core: 순수 Python, 호스트 무관"""

from .conflict import CategoryGroup, ConflictGroup, ConflictManager
from .extraction import authorize_extraction, resolve_destination
from .models import (
    Agent,
    CombinationMode,
    ConflictType,
    CostDisplay,
    ExtractionDecision,
    ExtractionGesture,
    ExtractionResult,
    Item,
    Outcome,
    SlotDestination,
    SlotType,
    Workbench,
)
from .orchestrator import preview_combination, select_mode
from .registry import TagInfo, TagRegistry
from .repair import UnitRepairTable
from .rules import AnvilOptions, AnvilRules

__all__ = [
    "CategoryGroup",
    "ConflictGroup",
    "ConflictManager",
    "authorize_extraction",
    "resolve_destination",
    "Agent",
    "CombinationMode",
    "ConflictType",
    "CostDisplay",
    "ExtractionDecision",
    "ExtractionGesture",
    "ExtractionResult",
    "Item",
    "Outcome",
    "SlotDestination",
    "SlotType",
    "Workbench",
    "preview_combination",
    "select_mode",
    "TagInfo",
    "TagRegistry",
    "UnitRepairTable",
    "AnvilOptions",
    "AnvilRules",
]
