"""모루(Anvil) 도메인 모델 (호스트 무관)"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

TAG_CARRIER = "enchanted_book"  # 태그 전용 운반체 category

INVENTORY_SIZE = 36  # 0~8 핫바, 9~35 메인 저장공간
HOTBAR_SIZE = 9
DEFAULT_MAX_REPAIR_COST = 40  # 호스트 기본 상한


@dataclass
class Item:
    """모루에 올라가는 아이템 스택. 동등 비교는 속성 전체 기준."""

    category: str  # "diamond_sword", "enchanted_book", ...
    tags: dict[str, int] = field(default_factory=dict)  # {"sharpness": 3}
    damage: int = 0
    max_durability: int = 0  # 0 = 내구도 없음
    label: Optional[str] = None  # 표시 이름
    penalty: Optional[int] = 0  # None = 페널티 필드 없는 타입
    count: int = 1

    @property
    def is_tag_carrier(self) -> bool:
        return self.category == TAG_CARRIER

    @property
    def stored_penalty(self) -> int:
        """필드가 없으면 0."""
        return self.penalty or 0

    def clone(self) -> Item:
        return copy.deepcopy(self)


@dataclass
class Agent:
    """작업하는 플레이어. level이 비용 통화."""

    agent_id: str
    level: int = 0
    creative: bool = False
    permissions: set[str] = field(default_factory=set)
    inventory: list[Optional[Item]] = field(
        default_factory=lambda: [None] * INVENTORY_SIZE
    )
    cursor: Optional[Item] = None

    def has_permission(self, node: str) -> bool:
        return node in self.permissions


@dataclass
class Workbench:
    """모루 인벤토리 상태 (입력 2칸 + 출력 1칸)"""

    left: Optional[Item] = None
    right: Optional[Item] = None
    output: Optional[Item] = None
    rename_text: Optional[str] = None

    # 표시 비용 / 구매 가능 상한 (None = 무제한)
    repair_cost: int = 0
    max_repair_cost: Optional[int] = DEFAULT_MAX_REPAIR_COST


class ConflictType(str, Enum):
    NO_CONFLICT = "no_conflict"
    SMALL_CONFLICT = "small_conflict"  # category 제한 (soft)
    BIG_CONFLICT = "big_conflict"  # 태그 간 충돌 (hard)


class CombinationMode(str, Enum):
    DEFER = "defer"  # 호스트 기본 동작에 맡김
    NONE = "none"
    RENAME = "rename"
    MERGE = "merge"
    UNIT_REPAIR = "unit_repair"


class SlotType(str, Enum):
    NO_SLOT = "no_slot"
    INVENTORY = "inventory"
    CURSOR = "cursor"


@dataclass(frozen=True)
class SlotDestination:
    type: SlotType
    slot: int = 0


NO_SLOT = SlotDestination(SlotType.NO_SLOT)
CURSOR_SLOT = SlotDestination(SlotType.CURSOR)


@dataclass(frozen=True)
class CostDisplay:
    """호스트 기본 표시 로직 이후에 적용할 비용 표시 갱신.

    repair_cost는 상한 적용 값, raw_cost는 상한 적용 전 값.
    """

    repair_cost: int
    raw_cost: int
    remove_repair_limit: bool = False
    apply_after_host_defaults: bool = True


@dataclass
class Outcome:
    """미리보기 계산 결과"""

    mode: CombinationMode
    result: Optional[Item] = None
    cost: int = 0
    display: Optional[CostDisplay] = None

    @property
    def has_result(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class ExtractionGesture:
    """출력 슬롯 클릭 정보"""

    slot: int
    shift_click: bool = False  # 일괄 이동
    no_consume: bool = False  # 크리에이티브 가운데 클릭


class ExtractionDecision(str, Enum):
    DEFER = "defer"
    ALLOW = "allow"
    DENY = "deny"
    HANDLED = "handled"  # 기본 동작 취소 후 직접 지급


@dataclass
class ExtractionResult:
    decision: ExtractionDecision
    destination: SlotDestination = NO_SLOT
    cost: int = 0
    units: int = 0
    reason: str = ""
