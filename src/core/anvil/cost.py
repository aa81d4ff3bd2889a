"""비용 계산: 작업 페널티, 이름 변경, 최종 표시 비용"""

from __future__ import annotations

import logging
from typing import Optional

from .models import CostDisplay, Item
from .rules import AnvilRules

logger = logging.getLogger(__name__)


def calculate_penalty(left: Item, right: Optional[Item], result: Item) -> int:
    """작업 페널티 비용 계산 + result 페널티 갱신.

    result 페널티 = left 페널티 * 2 + 1 (페널티 필드가 있는 경우만)
    반환: left 페널티 + right 페널티
    """
    left_penalty = left.stored_penalty
    right_penalty = right.stored_penalty if right is not None else 0

    if result.penalty is not None:
        result.penalty = left_penalty * 2 + 1

    logger.debug(
        "Calculated penalty: leftPenalty=%d, rightPenalty=%d, resultPenalty=%s",
        left_penalty,
        right_penalty,
        result.penalty if result.penalty is not None else "none",
    )
    return left_penalty + right_penalty


def apply_rename(result: Item, rename_text: Optional[str], rules: AnvilRules) -> int:
    """표시 이름이 rename_text와 다르면 적용하고 이름 변경 비용 반환.

    rename_text None = 이름 변경 요청 없음. 빈 문자열은 이름 제거.
    """
    if rename_text is None:
        return 0

    new_label = rename_text or None
    if result.label == new_label:
        return 0

    result.label = new_label
    return rules.options.item_rename_cost


def build_display(cost: int, rules: AnvilRules) -> CostDisplay:
    """호스트 기본 표시 이후 덮어쓸 비용 표시값."""
    options = rules.options
    shown = cost
    if options.limit_repair_cost:
        shown = min(cost, options.limit_repair_value)

    return CostDisplay(
        repair_cost=shown,
        raw_cost=cost,
        remove_repair_limit=options.remove_repair_limit,
    )
