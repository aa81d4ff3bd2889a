"""요청 단위 규칙 묶음: 비용 상수 + 충돌/가치/수리 테이블"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .conflict import ConflictManager
from .registry import TagRegistry
from .repair import UnitRepairTable

if TYPE_CHECKING:
    from src.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnvilOptions:
    """비용 관련 조정값. 기본값은 Settings 기본값과 같다."""

    item_rename_cost: int = 1
    unit_repair_cost: int = 1
    sacrifice_illegal_cost: int = 1
    item_repair_cost: int = 2
    limit_repair_cost: bool = False
    limit_repair_value: int = 39
    remove_repair_limit: bool = False

    unsafe_permission: str = "ca.affected"
    bypass_level_permission: str = "ca.bypass.level"
    bypass_fuse_permission: str = "ca.bypass.fuse"

    @classmethod
    def from_settings(cls, settings: Settings) -> AnvilOptions:
        return cls(
            item_rename_cost=settings.ANVIL_ITEM_RENAME_COST,
            unit_repair_cost=settings.ANVIL_UNIT_REPAIR_COST,
            sacrifice_illegal_cost=settings.ANVIL_SACRIFICE_ILLEGAL_COST,
            item_repair_cost=settings.ANVIL_ITEM_REPAIR_COST,
            limit_repair_cost=settings.ANVIL_LIMIT_REPAIR_COST,
            limit_repair_value=settings.ANVIL_LIMIT_REPAIR_VALUE,
            remove_repair_limit=settings.ANVIL_REMOVE_REPAIR_LIMIT,
            unsafe_permission=settings.ANVIL_UNSAFE_PERMISSION,
            bypass_level_permission=settings.ANVIL_BYPASS_LEVEL_PERMISSION,
            bypass_fuse_permission=settings.ANVIL_BYPASS_FUSE_PERMISSION,
        )


@dataclass(frozen=True)
class AnvilRules:
    """
    오케스트레이터에 주입되는 규칙 스냅샷.
    전역 레지스트리 대신 호출자가 명시적으로 넘긴다.
    """

    options: AnvilOptions = field(default_factory=AnvilOptions)
    conflicts: ConflictManager = field(default_factory=ConflictManager)
    tags: TagRegistry = field(default_factory=TagRegistry)
    unit_repair: UnitRepairTable = field(default_factory=UnitRepairTable)

    @classmethod
    def from_settings(cls, settings: Settings) -> AnvilRules:
        """Settings의 경로에서 테이블을 읽어 규칙 구성.
        파일이 없으면 경고 후 빈 테이블.
        """
        tags = TagRegistry(default_value=settings.ANVIL_DEFAULT_ENCHANT_VALUE)
        conflicts = ConflictManager()
        unit_repair = UnitRepairTable()

        sources = [
            (tags, settings.ANVIL_ENCHANT_TABLE_PATH),
            (conflicts, settings.ANVIL_CONFLICT_TABLE_PATH),
            (unit_repair, settings.ANVIL_UNIT_REPAIR_TABLE_PATH),
        ]
        for table, path in sources:
            if path is None:
                continue
            if not Path(path).exists():
                logger.warning("Anvil table not found: %s", path)
                continue
            table.load_from_json(path)

        return cls(
            options=AnvilOptions.from_settings(settings),
            conflicts=conflicts,
            tags=tags,
            unit_repair=unit_repair,
        )

    def snapshot(self) -> AnvilRules:
        """충돌 그룹을 고정한 복사본 (요청 중 외부 변경 차단)"""
        return AnvilRules(
            options=self.options,
            conflicts=self.conflicts.snapshot(),
            tags=self.tags,
            unit_repair=self.unit_repair,
        )
