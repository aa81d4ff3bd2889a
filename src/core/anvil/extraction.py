"""결과 꺼내기 판정: 단위 수리 결과 직접 지급

이름 변경/병합은 호스트 기본 동작(허용/거부)에 맡기고,
단위 수리만 기본 동작을 취소한 뒤 직접 재료를 소비하고 결과를 지급한다.
거부 시에는 어떤 슬롯/레벨도 바꾸지 않는다.
"""

from __future__ import annotations

import logging

from .cost import calculate_penalty
from .models import (
    CURSOR_SLOT,
    HOTBAR_SIZE,
    INVENTORY_SIZE,
    NO_SLOT,
    Agent,
    CombinationMode,
    ExtractionDecision,
    ExtractionGesture,
    ExtractionResult,
    Item,
    SlotDestination,
    SlotType,
    Workbench,
)
from .orchestrator import select_mode
from .repair import unit_repair
from .rules import AnvilRules

logger = logging.getLogger(__name__)

OUTPUT_SLOT = 2


def resolve_destination(agent: Agent, gesture: ExtractionGesture) -> SlotDestination:
    """결과를 놓을 위치.

    일반 클릭: 커서가 비어 있으면 커서, 아니면 NO_SLOT
    일괄 이동: 핫바 끝(8)→0, 그다음 메인 저장공간 끝(35)→9 순으로 빈 칸 탐색
    """
    if not gesture.shift_click:
        if agent.cursor is not None:
            return NO_SLOT
        return CURSOR_SLOT

    inventory = agent.inventory
    for index in range(HOTBAR_SIZE - 1, -1, -1):
        if inventory[index] is None:
            return SlotDestination(SlotType.INVENTORY, index)
    for index in range(INVENTORY_SIZE - 1, HOTBAR_SIZE - 1, -1):
        if inventory[index] is None:
            return SlotDestination(SlotType.INVENTORY, index)
    return NO_SLOT


def authorize_extraction(
    workbench: Workbench,
    agent: Agent,
    gesture: ExtractionGesture,
    rules: AnvilRules,
) -> ExtractionResult:
    """출력 슬롯 클릭 처리.

    HANDLED일 때만 workbench/agent가 변경된다.
    """
    if gesture.slot != OUTPUT_SLOT:
        return ExtractionResult(ExtractionDecision.DEFER)
    if not agent.has_permission(rules.options.unsafe_permission):
        return ExtractionResult(ExtractionDecision.DEFER)

    output = workbench.output
    left = workbench.left
    right = workbench.right
    if output is None or left is None:
        return ExtractionResult(ExtractionDecision.DEFER)

    # 미리보기 값을 믿지 않고 현재 슬롯 기준으로 다시 판정
    mode = select_mode(left, right, rules)
    if mode == CombinationMode.NONE or output == left:
        return ExtractionResult(ExtractionDecision.DENY, reason="no_combination")
    if mode in (CombinationMode.RENAME, CombinationMode.MERGE):
        return ExtractionResult(ExtractionDecision.ALLOW)

    return _extract_unit_repair(workbench, agent, gesture, rules)


def _extract_unit_repair(
    workbench: Workbench,
    agent: Agent,
    gesture: ExtractionGesture,
    rules: AnvilRules,
) -> ExtractionResult:
    left: Item = workbench.left
    right: Item = workbench.right
    output: Item = workbench.output
    options = rules.options

    fraction = rules.unit_repair.get_repair(left, right)
    result = left.clone()
    units = unit_repair(result, right.count, fraction)

    destination = resolve_destination(agent, gesture)
    if destination.type == SlotType.NO_SLOT:
        return ExtractionResult(ExtractionDecision.DENY, units=units, reason="no_slot")

    cost = 0
    if output.label != left.label:
        result.label = output.label
        cost += options.item_rename_cost
    # 오른쪽(재료) 페널티는 무시
    cost += calculate_penalty(left, None, result)
    cost += units * options.unit_repair_cost

    if agent.creative:
        cost = 0
    else:
        ceiling = workbench.max_repair_cost
        if (ceiling is not None and ceiling < cost) or agent.level < cost:
            logger.info(
                "Unit repair denied for %s: cost=%d, level=%d, ceiling=%s",
                agent.agent_id,
                cost,
                agent.level,
                ceiling,
            )
            return ExtractionResult(
                ExtractionDecision.DENY,
                destination=destination,
                cost=cost,
                units=units,
                reason="too_expensive",
            )

    if not gesture.no_consume:
        workbench.left = None
        right.count -= units
        workbench.right = right
        workbench.output = None
        agent.level -= cost

    if destination.type == SlotType.CURSOR:
        agent.cursor = result
    else:
        agent.inventory[destination.slot] = result

    logger.info(
        "Unit repair extracted by %s: units=%d, cost=%d, destination=%s",
        agent.agent_id,
        units,
        cost,
        destination.type.value,
    )
    return ExtractionResult(
        ExtractionDecision.HANDLED, destination=destination, cost=cost, units=units
    )
