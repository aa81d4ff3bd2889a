"""인챈트 병합: 레벨 결합, 충돌 처리, 오른쪽 태그 가치 계산"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .models import Agent, ConflictType, Item
from .rules import AnvilRules

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    tags: dict[str, int]
    cost: int


def combine_level(existing: int, incoming: int, max_level: Optional[int]) -> int:
    """같은 태그 레벨 결합.

    같은 레벨 → +1 (max_level 상한), 다르면 높은 쪽.
    상한 때문에 입력 중 높은 레벨보다 낮아지지는 않는다.
    """
    higher = max(existing, incoming)
    if existing != incoming:
        return higher
    combined = existing + 1
    if max_level is not None:
        combined = min(combined, max_level)
    return max(combined, higher)


def merge_tags(
    left: dict[str, int],
    right: dict[str, int],
    category: str,
    agent: Agent,
    rules: AnvilRules,
) -> dict[str, int]:
    """right 태그를 순서대로 left에 병합한 새 dict.

    충돌 판정은 매번 현재까지의 결과 집합 + 후보로 다시 계산한다.
    BIG_CONFLICT만 제외하고 SMALL_CONFLICT는 그대로 추가.
    """
    options = rules.options
    bypass_level = agent.has_permission(options.bypass_level_permission)
    bypass_fuse = agent.has_permission(options.bypass_fuse_permission)

    merged = dict(left)
    for tag, level in right.items():
        if tag in merged:
            max_level = None if bypass_level else rules.tags.max_level(tag)
            merged[tag] = combine_level(merged[tag], level, max_level)
            continue

        if not bypass_fuse:
            conflict = rules.conflicts.classify(merged.keys(), category, tag)
            if conflict == ConflictType.BIG_CONFLICT:
                logger.debug("Dropped conflicting enchant %s on %s", tag, category)
                continue
        merged[tag] = level
    return merged


def value_right_tags(
    right: dict[str, int],
    result: dict[str, int],
    category: str,
    from_carrier: bool,
    rules: AnvilRules,
) -> int:
    """오른쪽 태그의 비용 합계.

    결과에 있는 태그: 결과 레벨 × 가치 배수
    결과에 없고 BIG_CONFLICT인 태그: 불법 인챈트 희생 비용
    """
    right_value = 0
    illegal_penalty = 0
    result_keys = set(result.keys())

    for tag, level in right.items():
        if tag not in result_keys:
            conflict = rules.conflicts.classify(result_keys, category, tag)
            if conflict == ConflictType.BIG_CONFLICT:
                illegal_penalty += rules.options.sacrifice_illegal_cost
            continue

        value = result[tag] * rules.tags.value(tag, from_carrier)
        logger.debug(
            "Value for %s level %d is %d", rules.tags.display_name(tag), level, value
        )
        right_value += value

    logger.debug(
        "Calculated right values: rightValue=%d, illegalPenalty=%d",
        right_value,
        illegal_penalty,
    )
    return right_value + illegal_penalty


def merge(left: Item, right: Item, agent: Agent, rules: AnvilRules) -> MergeResult:
    """병합 태그와 태그 비용을 함께 반환."""
    tags = merge_tags(left.tags, right.tags, left.category, agent, rules)
    cost = value_right_tags(
        right.tags, tags, left.category, right.is_tag_carrier, rules
    )
    return MergeResult(tags=tags, cost=cost)
