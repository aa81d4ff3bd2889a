"""내구도 수리: 동종 합성 수리 + 재료 단위 수리"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Optional

from .models import Item

logger = logging.getLogger(__name__)

REPAIR_BONUS_PERCENT = 12  # 합성 수리 보너스 (최대 내구도 대비 %)


def repair_from(result: Item, left: Item, right: Item) -> bool:
    """두 동종 아이템의 남은 내구도 + 보너스로 result 수리.

    result는 left의 복제본이라고 가정한다.
    반환: left보다 손상이 줄었는지 여부.
    """
    max_durability = result.max_durability
    if max_durability <= 0 or left.damage <= 0:
        return False

    left_remaining = max_durability - left.damage
    right_remaining = max(0, right.max_durability - right.damage)
    bonus = max_durability * REPAIR_BONUS_PERCENT // 100

    combined = min(max_durability, left_remaining + right_remaining + bonus)
    new_damage = max(0, max_durability - combined)
    if new_damage >= left.damage:
        return False

    result.damage = new_damage
    return True


def unit_repair(item: Item, available_units: int, fraction: float) -> int:
    """재료 단위 수리. item을 직접 수정한다.

    단위당 회복량 = ceil(max_durability * fraction)
    반환: 소비한 단위 수 (최대 available_units, 완전 수리 상태면 0)
    """
    if item.max_durability <= 0 or item.damage <= 0 or available_units <= 0:
        return 0

    per_unit = math.ceil(item.max_durability * fraction)
    if per_unit <= 0:
        return 0

    needed = math.ceil(item.damage / per_unit)
    used = min(available_units, needed)
    item.damage = max(0, item.damage - per_unit * used)
    return used


class UnitRepairTable:
    """
    수리 재료 → (대상 category → 단위 회복 비율).
    unit_repair.json 로드.
    """

    def __init__(self) -> None:
        self._table: dict[str, dict[str, float]] = {}

    def load_from_json(self, path: str | Path) -> int:
        """형식: {"diamond": {"diamond_sword": 0.25, ...}}
        반환: 로드된 (재료, 대상) 쌍의 수.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw: dict[str, dict] = json.load(f)

        count = 0
        for material, targets in raw.items():
            try:
                for category, fraction in targets.items():
                    self.register(material, category, float(fraction))
                    count += 1
            except (AttributeError, ValueError, TypeError) as e:
                logger.warning("Failed to load unit repair: %s: %s", material, e)

        logger.info("Loaded %d unit repair entries from %s", count, path)
        return count

    def register(self, material: str, category: str, fraction: float) -> None:
        if fraction <= 0:
            raise ValueError(f"Unit repair fraction must be positive: {fraction}")
        self._table.setdefault(material, {})[category] = fraction

    def get_repair(self, left: Item, right: Optional[Item]) -> Optional[float]:
        """right가 left의 수리 재료면 단위 회복 비율, 아니면 None."""
        if right is None:
            return None
        targets = self._table.get(right.category)
        if targets is None:
            return None
        return targets.get(left.category)

    def materials(self) -> list[str]:
        return list(self._table.keys())
