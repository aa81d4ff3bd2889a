"""모루 미리보기: 모드 선택 + 결과/비용 계산

매 입력 변경마다 호출된다. 입력 아이템은 수정하지 않으므로
같은 입력으로 다시 호출하면 같은 결과가 나온다.

모드 우선순위:
1. 이름 변경 (오른쪽 비어 있음)
2. 병합 (같은 category, 또는 오른쪽이 인챈트 책)
3. 재료 단위 수리
4. 결과 없음
"""

from __future__ import annotations

import logging
from typing import Optional

from .cost import apply_rename, build_display, calculate_penalty
from .merge import merge
from .models import Agent, CombinationMode, Item, Outcome, Workbench
from .repair import repair_from, unit_repair
from .rules import AnvilRules

logger = logging.getLogger(__name__)


def can_merge(left: Item, right: Optional[Item]) -> bool:
    if right is None:
        return False
    return left.category == right.category or right.is_tag_carrier


def select_mode(
    left: Optional[Item], right: Optional[Item], rules: AnvilRules
) -> CombinationMode:
    """입력 조합으로 가능한 모드. 권한 검사는 하지 않는다."""
    if left is None:
        return CombinationMode.NONE
    if right is None:
        return CombinationMode.RENAME
    if can_merge(left, right):
        return CombinationMode.MERGE
    if rules.unit_repair.get_repair(left, right) is not None:
        return CombinationMode.UNIT_REPAIR
    return CombinationMode.NONE


def preview_combination(
    workbench: Workbench, agent: Agent, rules: AnvilRules
) -> Outcome:
    """현재 모루 상태의 결과 미리보기.

    반환된 Outcome.display는 호스트 기본 비용 표시가 끝난 뒤 적용해야 한다.
    """
    left = workbench.left
    right = workbench.right
    if left is None:
        return Outcome(CombinationMode.NONE)

    if not agent.has_permission(rules.options.unsafe_permission):
        return Outcome(CombinationMode.DEFER)

    mode = select_mode(left, right, rules)
    if mode == CombinationMode.RENAME:
        return _preview_rename(left, workbench.rename_text, rules)
    if mode == CombinationMode.MERGE:
        return _preview_merge(left, right, workbench.rename_text, agent, rules)
    if mode == CombinationMode.UNIT_REPAIR:
        return _preview_unit_repair(left, right, workbench.rename_text, rules)
    return Outcome(CombinationMode.NONE)


def _preview_rename(
    left: Item, rename_text: Optional[str], rules: AnvilRules
) -> Outcome:
    result = left.clone()
    cost = apply_rename(result, rename_text, rules)

    if result == left:
        return Outcome(CombinationMode.NONE)

    cost += calculate_penalty(left, None, result)
    return _emit(CombinationMode.RENAME, result, cost, rules)


def _preview_merge(
    left: Item,
    right: Item,
    rename_text: Optional[str],
    agent: Agent,
    rules: AnvilRules,
) -> Outcome:
    merged = merge(left, right, agent, rules)
    result = left.clone()
    result.tags = merged.tags
    cost = merged.cost

    # 책이 끼면 내구도 수리 없음
    if not left.is_tag_carrier and not right.is_tag_carrier:
        if repair_from(result, left, right):
            cost += rules.options.item_repair_cost

    # 페널티 계산이 result를 바꾸므로 동등 비교가 먼저
    if result == left:
        return Outcome(CombinationMode.NONE)

    cost += calculate_penalty(left, right, result)
    cost += apply_rename(result, rename_text, rules)
    return _emit(CombinationMode.MERGE, result, cost, rules)


def _preview_unit_repair(
    left: Item,
    right: Item,
    rename_text: Optional[str],
    rules: AnvilRules,
) -> Outcome:
    fraction = rules.unit_repair.get_repair(left, right)
    result = left.clone()
    cost = apply_rename(result, rename_text, rules)

    units = unit_repair(result, right.count, fraction)
    cost += units * rules.options.unit_repair_cost

    if result == left:
        return Outcome(CombinationMode.NONE)

    # 단위 수리는 오른쪽 페널티를 보지 않는다
    cost += calculate_penalty(left, None, result)
    return _emit(CombinationMode.UNIT_REPAIR, result, cost, rules)


def _emit(
    mode: CombinationMode, result: Item, cost: int, rules: AnvilRules
) -> Outcome:
    display = build_display(cost, rules)
    logger.debug(
        "Anvil preview: mode=%s, cost=%d, shown=%d",
        mode.value,
        cost,
        display.repair_cost,
    )
    return Outcome(mode=mode, result=result, cost=display.repair_cost, display=display)
