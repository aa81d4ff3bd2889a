"""Shared test fixtures."""

from pathlib import Path

import pytest

from src.core.anvil.conflict import CategoryGroup, ConflictGroup, ConflictManager
from src.core.anvil.models import Agent
from src.core.anvil.registry import TagInfo, TagRegistry
from src.core.anvil.repair import UnitRepairTable
from src.core.anvil.rules import AnvilOptions, AnvilRules

DATA_DIR = Path(__file__).resolve().parents[1] / "src" / "data"

UNSAFE = AnvilOptions().unsafe_permission

SWORDS = frozenset({"diamond_sword", "iron_sword", "enchanted_book"})


def build_rules(options: AnvilOptions | None = None) -> AnvilRules:
    """Small in-memory rule set shared by the core tests."""
    tags = TagRegistry(default_value=1)
    for info in (
        TagInfo("sharpness", max_level=5, item_value=1, book_value=1),
        TagInfo("smite", max_level=5, item_value=2, book_value=1),
        TagInfo("unbreaking", max_level=3, item_value=2, book_value=1),
        TagInfo("protection", max_level=4, item_value=1, book_value=1),
        TagInfo("fire_protection", max_level=4, item_value=2, book_value=1),
        TagInfo("mending", max_level=1, item_value=4, book_value=2),
    ):
        tags.register(info)

    melee = ConflictGroup("melee_damage", min_before_block=1)
    for tag in ("sharpness", "smite", "bane_of_arthropods"):
        melee.add_tag(tag)

    armor = ConflictGroup("protection_types", min_before_block=1)
    for tag in ("protection", "fire_protection"):
        armor.add_tag(tag)

    restriction = ConflictGroup(
        "restriction_sharpness",
        exempt=CategoryGroup("swords", SWORDS),
        min_before_block=0,
    )
    restriction.add_tag("sharpness")

    unit_repair = UnitRepairTable()
    unit_repair.register("diamond", "diamond_sword", 0.25)

    return AnvilRules(
        options=options or AnvilOptions(),
        conflicts=ConflictManager([melee, armor, restriction]),
        tags=tags,
        unit_repair=unit_repair,
    )


@pytest.fixture()
def rules() -> AnvilRules:
    return build_rules()


@pytest.fixture()
def make_rules():
    """Factory for rule sets with custom options."""
    return build_rules


@pytest.fixture()
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture()
def agent() -> Agent:
    """Survival player with the unsafe permission and 30 levels."""
    return Agent(agent_id="p1", level=30, permissions={UNSAFE})
