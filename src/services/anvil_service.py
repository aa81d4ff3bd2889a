"""모루 Service: 호스트 이벤트 ↔ Core 연결, EventBus 통신

호스트 어댑터는 다음 순서로 호출한다:
    1. 입력 슬롯 변경 → prepare()
    2. 호스트 기본 처리 끝 → finish_interaction() (지연 비용 표시 적용)
    3. 출력 슬롯 클릭 → click_output()
"""

from typing import Dict, Tuple

from src.core.anvil.extraction import authorize_extraction
from src.core.anvil.models import (
    Agent,
    CombinationMode,
    CostDisplay,
    ExtractionDecision,
    ExtractionGesture,
    ExtractionResult,
    Outcome,
    Workbench,
)
from src.core.anvil.orchestrator import preview_combination
from src.core.anvil.rules import AnvilRules
from src.core.event_bus import AnvilEvent, EventBus
from src.core.event_types import EventTypes
from src.core.logging import get_logger

logger = get_logger(__name__)

SOURCE = "anvil_service"


class AnvilService:
    """모루 미리보기/꺼내기 처리"""

    def __init__(self, event_bus: EventBus, rules: AnvilRules):
        self._bus = event_bus
        self._rules = rules
        # 작업대별 마지막 미리보기의 비용 표시. 사이클당 한 번만 적용된다.
        self._pending_display: Dict[int, Tuple[Workbench, CostDisplay]] = {}
        self._prepare_seq = 0

    @property
    def rules(self) -> AnvilRules:
        return self._rules

    def reload_rules(self, rules: AnvilRules) -> None:
        """설정 재로드 시 교체. 진행 중인 요청은 이전 스냅샷을 그대로 쓴다."""
        self._rules = rules
        logger.info("Anvil rules reloaded")

    # === 미리보기 ===

    def prepare(self, workbench: Workbench, agent: Agent) -> Outcome:
        """입력 변경 시 결과 계산 + 출력 슬롯 갱신.

        DEFER면 호스트 기본 동작을 건드리지 않는다.
        비용 표시는 run_later로 미뤄 호스트 기본 표시보다 나중에 쓴다.
        한 사이클에 여러 번 호출되면 마지막 미리보기의 표시만 적용된다.
        """
        outcome = preview_combination(workbench, agent, self._rules.snapshot())
        if outcome.mode == CombinationMode.DEFER:
            return outcome

        workbench.output = outcome.result
        key = id(workbench)
        if outcome.display is None:
            self._pending_display.pop(key, None)
        else:
            if key not in self._pending_display:
                self._bus.run_later(lambda: self._apply_display(key))
            self._pending_display[key] = (workbench, outcome.display)

        # 입력이 바뀔 때마다 다시 계산하므로 호출마다 별개 이벤트
        self._prepare_seq += 1
        self._bus.emit(
            AnvilEvent(
                event_type=EventTypes.ANVIL_PREPARED,
                data={
                    "agent_id": agent.agent_id,
                    "mode": outcome.mode.value,
                    "cost": outcome.cost,
                    "has_result": outcome.has_result,
                },
                source=SOURCE,
                cycle_key=f"{SOURCE}:{EventTypes.ANVIL_PREPARED}:{self._prepare_seq}",
            )
        )
        return outcome

    def finish_interaction(self) -> int:
        """현재 상호작용 종료. 반환: 적용된 지연 작업 수."""
        try:
            return self._bus.end_cycle()
        finally:
            self._pending_display.clear()

    def _apply_display(self, key: int) -> None:
        pending = self._pending_display.pop(key, None)
        if pending is None:
            return
        workbench, display = pending

        if display.remove_repair_limit:
            workbench.max_repair_cost = None
        workbench.repair_cost = display.repair_cost

        self._bus.emit(
            AnvilEvent(
                event_type=EventTypes.ANVIL_COST_DISPLAYED,
                data={
                    "repair_cost": display.repair_cost,
                    "raw_cost": display.raw_cost,
                },
                source=SOURCE,
                cycle_key=f"{SOURCE}:{EventTypes.ANVIL_COST_DISPLAYED}:{key}",
            )
        )

    # === 꺼내기 ===

    def click_output(
        self, workbench: Workbench, agent: Agent, gesture: ExtractionGesture
    ) -> ExtractionResult:
        """출력 슬롯 클릭. 결과에 따라 이벤트 발행."""
        result = authorize_extraction(
            workbench, agent, gesture, self._rules.snapshot()
        )

        if result.decision in (ExtractionDecision.HANDLED, ExtractionDecision.ALLOW):
            self._bus.emit(
                AnvilEvent(
                    event_type=EventTypes.ANVIL_EXTRACTED,
                    data={
                        "agent_id": agent.agent_id,
                        "decision": result.decision.value,
                        "cost": result.cost,
                        "units": result.units,
                    },
                    source=SOURCE,
                )
            )
        elif result.decision == ExtractionDecision.DENY:
            self._bus.emit(
                AnvilEvent(
                    event_type=EventTypes.ANVIL_EXTRACTION_DENIED,
                    data={"agent_id": agent.agent_id, "reason": result.reason},
                    source=SOURCE,
                )
            )
        return result
