"""인챈트 정보 저장소: 최대 레벨, 가치 배수, 표시 이름"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_LEVEL = 1


@dataclass(frozen=True)
class TagInfo:
    """태그(인챈트) 원형: 불변."""

    tag: str  # "sharpness"
    max_level: int  # 자연 최대 레벨
    item_value: int  # 일반 아이템에서 올 때 레벨당 비용
    book_value: int  # 운반체(책)에서 올 때 레벨당 비용
    limit: Optional[int] = None  # 설정된 레벨 상한 (None = max_level)
    display_name: str = ""


class TagRegistry:
    """
    태그 원형 저장소.
    enchant_values.json 로드 + 동적 등록.
    """

    def __init__(self, default_value: int = 1) -> None:
        self._tags: dict[str, TagInfo] = {}
        self._default_value = default_value

    def load_from_json(self, path: str | Path) -> int:
        """enchant_values.json 로드. 반환: 로드된 수량.

        형식: {"sharpness": {"max_level": 5, "item": 1, "book": 1, "limit": 5}}
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw: dict[str, dict] = json.load(f)

        count = 0
        for tag, info in raw.items():
            try:
                limit = info.get("limit")
                self._tags[tag] = TagInfo(
                    tag=tag,
                    max_level=int(info["max_level"]),
                    item_value=int(info.get("item", self._default_value)),
                    book_value=int(info.get("book", self._default_value)),
                    limit=int(limit) if limit is not None else None,
                    display_name=info.get("name", ""),
                )
                count += 1
            except (KeyError, ValueError, TypeError) as e:
                logger.warning("Failed to load enchant value: %s: %s", tag, e)

        logger.info("Loaded %d enchant values from %s", count, path)
        return count

    def register(self, info: TagInfo) -> None:
        """이미 존재하면 경고 로그 후 덮어쓴다."""
        if info.tag in self._tags:
            logger.warning("Overwriting existing enchant value: %s", info.tag)
        self._tags[info.tag] = info

    def get(self, tag: str) -> Optional[TagInfo]:
        return self._tags.get(tag)

    def max_level(self, tag: str) -> int:
        """설정 상한 우선, 없으면 자연 최대 레벨."""
        info = self._tags.get(tag)
        if info is None:
            return DEFAULT_MAX_LEVEL
        return info.limit if info.limit is not None else info.max_level

    def value(self, tag: str, from_carrier: bool) -> int:
        """레벨당 비용 배수. 미등록 태그는 기본 배수."""
        info = self._tags.get(tag)
        if info is None:
            return self._default_value
        return info.book_value if from_carrier else info.item_value

    def display_name(self, tag: str) -> str:
        """진단 로그용 이름. "fire_aspect" → "Fire Aspect" """
        info = self._tags.get(tag)
        if info is not None and info.display_name:
            return info.display_name
        return tag.replace("_", " ").title()

    def count(self) -> int:
        return len(self._tags)
