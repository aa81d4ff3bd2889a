"""인챈트 충돌 그룹: 태그 동시 보유 제한"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .models import ConflictType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryGroup:
    """아이템 category 집합. 충돌 예외 판정용."""

    name: str
    categories: frozenset[str] = frozenset()

    def contains(self, category: str) -> bool:
        return category in self.categories


EMPTY_GROUP = CategoryGroup("empty")


class ConflictGroup:
    """
    이름 있는 태그 집합 + 허용 개수.
    멤버 태그가 min_before_block 개를 초과해 함께 존재하면 차단.
    exempt에 속한 category는 항상 허용.
    """

    def __init__(
        self,
        name: str,
        exempt: CategoryGroup = EMPTY_GROUP,
        min_before_block: int = 1,
    ) -> None:
        self.name = name
        self._exempt = exempt
        self._min_before_block = min_before_block
        self._tags: set[str] = set()

    def add_tag(self, tag: str) -> None:
        self._tags.add(tag)

    def remove_tag(self, tag: str) -> None:
        self._tags.discard(tag)

    @property
    def tags(self) -> frozenset[str]:
        return frozenset(self._tags)

    @property
    def min_before_block(self) -> int:
        return self._min_before_block

    def allowed(self, tags: Iterable[str], category: str) -> bool:
        """tags 집합에 이 그룹이 허용하는 개수 이하의 멤버만 있는지"""
        if len(self._tags) < self._min_before_block:
            return True

        if self._exempt.contains(category):
            return True

        count = 0
        for tag in tags:
            if tag not in self._tags:
                continue
            count += 1
            if count > self._min_before_block:
                return False
        return True

    def copy(self) -> ConflictGroup:
        clone = ConflictGroup(self.name, self._exempt, self._min_before_block)
        clone._tags = set(self._tags)
        return clone

    def __repr__(self) -> str:
        return (
            f"ConflictGroup(name={self.name!r}, tags={sorted(self._tags)}, "
            f"min_before_block={self._min_before_block})"
        )


class ConflictManager:
    """
    ConflictGroup 모음.
    후보 태그가 기존 태그 집합에 추가될 때의 충돌 유형을 분류한다.
    """

    def __init__(self, groups: Iterable[ConflictGroup] = ()) -> None:
        self._groups: list[ConflictGroup] = []
        self._by_tag: dict[str, list[ConflictGroup]] = defaultdict(list)
        for group in groups:
            self.add_group(group)

    def add_group(self, group: ConflictGroup) -> None:
        """그룹 등록. 멤버 인덱스는 등록 시점 기준."""
        self._groups.append(group)
        for tag in group.tags:
            self._by_tag[tag].append(group)

    def load_from_json(self, path: str | Path) -> int:
        """충돌 그룹 파일 로드. 반환: 로드된 그룹 수.

        형식: {"melee_damage": {"tags": [...], "exempt": [...], "max": 1}}
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw: dict[str, dict] = json.load(f)

        count = 0
        for name, info in raw.items():
            try:
                exempt = CategoryGroup(
                    f"{name}_exempt", frozenset(info.get("exempt", []))
                )
                group = ConflictGroup(name, exempt, int(info.get("max", 1)))
                for tag in info["tags"]:
                    group.add_tag(tag)
                self.add_group(group)
                count += 1
            except (KeyError, ValueError, TypeError) as e:
                logger.warning("Failed to load conflict group: %s: %s", name, e)

        logger.info("Loaded %d conflict groups from %s", count, path)
        return count

    def classify(
        self,
        existing: Iterable[str],
        category: str,
        candidate: str,
    ) -> ConflictType:
        """candidate를 existing에 더했을 때의 충돌 유형.

        멤버가 하나뿐인 그룹은 category 제한으로 보고 SMALL_CONFLICT,
        그 외 그룹이 막으면 즉시 BIG_CONFLICT.
        """
        groups = self._by_tag.get(candidate)
        if not groups:
            return ConflictType.NO_CONFLICT

        working = set(existing)
        working.add(candidate)

        result = ConflictType.NO_CONFLICT
        for group in groups:
            if group.allowed(working, category):
                continue
            if len(group.tags) <= 1:
                result = ConflictType.SMALL_CONFLICT
            else:
                return ConflictType.BIG_CONFLICT
        return result

    def snapshot(self) -> ConflictManager:
        """요청 단위로 고정된 복사본"""
        return ConflictManager(group.copy() for group in self._groups)

    @property
    def groups(self) -> list[ConflictGroup]:
        return list(self._groups)
