"""EventBus - 모루 상호작용 단위 동기 이벤트 + 지연 작업 큐

규칙:
- 이벤트는 식별자/요약값만 전달한다
- 전파 깊이 최대 MAX_DEPTH 단계
- 한 상호작용 안에서 동일 source의 동일 이벤트 중복 발행 금지
- run_later로 등록한 작업은 end_cycle()에서 등록 순서대로 실행
  (호스트 기본 처리 뒤에 마지막으로 덮어써야 하는 작업용)
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from src.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5


@dataclass
class AnvilEvent:
    """이벤트 데이터 컨테이너

    Args:
        event_type: 이벤트 유형 (예: "anvil_prepared")
        data: 이벤트 데이터 (ID/숫자 위주)
        source: 발행한 서비스 이름
        cycle_key: 중복 판정 키. 없으면 "source:event_type"
    """

    event_type: str
    data: Dict[str, Any]
    source: str
    cycle_key: Optional[str] = None

    _depth: int = field(default=0, repr=False)


EventHandler = Callable[[AnvilEvent], None]
DeferredTask = Callable[[], None]


class EventBus:
    """동기식 이벤트 버스

    사용 패턴:
        bus = EventBus()
        bus.subscribe("anvil_prepared", handler)
        bus.emit(AnvilEvent(event_type="anvil_prepared", data={...}, source="anvil_service"))
        bus.run_later(lambda: ...)
        bus.end_cycle()  # 지연 작업 실행 + 중복 추적 초기화
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._current_depth: int = 0
        self._emitted_in_cycle: Set[str] = set()
        self._deferred: List[DeferredTask] = []

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug(f"EventBus 구독: {event_type} → {handler.__qualname__}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            logger.debug(f"EventBus 구독 해제: {event_type} → {handler.__qualname__}")
            return
        logger.warning(f"핸들러 미등록: {event_type} → {handler.__qualname__}")

    def emit(self, event: AnvilEvent) -> None:
        """등록된 핸들러를 동기 호출. 핸들러 예외는 로그만 남긴다."""
        if self._current_depth >= MAX_DEPTH:
            logger.warning(
                f"EventBus 전파 깊이 초과 ({MAX_DEPTH}): "
                f"{event.source}:{event.event_type} 무시됨"
            )
            return

        cycle_key = event.cycle_key or f"{event.source}:{event.event_type}"
        if cycle_key in self._emitted_in_cycle:
            logger.warning(f"EventBus 중복 이벤트 차단: {cycle_key}")
            return
        self._emitted_in_cycle.add(cycle_key)
        event._depth = self._current_depth

        handlers = list(self._handlers.get(event.event_type, []))
        if not handlers:
            logger.debug(f"EventBus: {event.event_type} 구독자 없음")
            return

        self._current_depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        f"EventBus 핸들러 에러: {handler.__qualname__} "
                        f"(event={event.event_type})"
                    )
        finally:
            self._current_depth -= 1

    def run_later(self, task: DeferredTask) -> None:
        """현재 처리 단계가 끝난 뒤(end_cycle) 실행할 작업 등록"""
        self._deferred.append(task)

    @property
    def pending(self) -> int:
        return len(self._deferred)

    def end_cycle(self) -> int:
        """지연 작업 실행 후 상호작용 상태 초기화. 반환: 실행한 작업 수.

        실행 중 새로 등록된 작업도 같은 사이클에서 처리한다.
        작업이 예외를 던지면 남은 작업은 버리고 예외를 그대로 올린다.
        어느 경우든 다음 상호작용은 빈 상태에서 시작한다.
        """
        executed = 0
        try:
            while self._deferred:
                task = self._deferred.pop(0)
                task()
                executed += 1
        finally:
            if self._deferred:
                logger.warning(f"EventBus 지연 작업 {len(self._deferred)}개 폐기")
                self._deferred.clear()
            self._emitted_in_cycle.clear()
            self._current_depth = 0
        return executed

    def clear(self) -> None:
        """모든 구독/지연 작업 해제 (테스트용)"""
        self._handlers.clear()
        self._deferred.clear()
        self._emitted_in_cycle.clear()
        self._current_depth = 0

    @property
    def handler_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())
