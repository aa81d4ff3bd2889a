"""모루 미리보기 테스트: 모드 선택, 비용 합산, 결과 없음 판정"""

from __future__ import annotations

import pytest

from src.core.anvil.models import Agent, CombinationMode, Item, Workbench
from src.core.anvil.orchestrator import can_merge, preview_combination, select_mode
from src.core.anvil.rules import AnvilOptions


def _make_sword(
    tags: dict[str, int] | None = None,
    damage: int = 0,
    penalty: int | None = 0,
    label: str | None = None,
) -> Item:
    return Item(
        "diamond_sword",
        tags=tags or {},
        damage=damage,
        max_durability=1561,
        penalty=penalty,
        label=label,
    )


def _make_book(tags: dict[str, int], penalty: int = 0) -> Item:
    return Item("enchanted_book", tags=tags, penalty=penalty)


class TestSelectMode:
    def test_modes(self, rules) -> None:
        sword = _make_sword()
        assert select_mode(None, sword, rules) == CombinationMode.NONE
        assert select_mode(sword, None, rules) == CombinationMode.RENAME
        assert select_mode(sword, _make_sword(), rules) == CombinationMode.MERGE
        assert select_mode(sword, _make_book({}), rules) == CombinationMode.MERGE
        assert select_mode(sword, Item("diamond"), rules) == CombinationMode.UNIT_REPAIR
        assert select_mode(sword, Item("dirt"), rules) == CombinationMode.NONE

    def test_can_merge(self) -> None:
        assert can_merge(_make_sword(), _make_book({})) is True
        assert can_merge(_make_book({}), _make_sword()) is False
        assert can_merge(_make_sword(), None) is False


class TestRenameOnly:
    def test_no_right_no_rename_is_no_result(self, rules, agent) -> None:
        bench = Workbench(left=_make_sword(label="Blade"), rename_text="Blade")
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.NONE
        assert outcome.has_result is False
        assert outcome.cost == 0
        assert outcome.display is None

    def test_no_rename_text(self, rules, agent) -> None:
        outcome = preview_combination(Workbench(left=_make_sword()), agent, rules)
        assert outcome.mode == CombinationMode.NONE
        assert outcome.cost == 0

    def test_rename(self, rules, agent) -> None:
        bench = Workbench(left=_make_sword(penalty=1), rename_text="Blade")
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.RENAME
        assert outcome.result.label == "Blade"
        assert outcome.result.penalty == 3
        # rename 1 + penalty 1
        assert outcome.cost == 2


class TestFullMerge:
    def test_equal_level_scenario(self, rules, agent) -> None:
        bench = Workbench(
            left=_make_sword({"sharpness": 3}), right=_make_sword({"sharpness": 3})
        )
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.MERGE
        assert outcome.result.tags == {"sharpness": 4}
        # sharpness 4 * item 1, 수리 없음, penalty 0 + 0
        assert outcome.cost == 4
        assert outcome.result.penalty == 1

    def test_book_onto_damaged_tool_scenario(self, rules, agent) -> None:
        left = _make_sword(damage=780, penalty=1)
        bench = Workbench(left=left, right=_make_book({"unbreaking": 1}))
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.MERGE
        assert outcome.result.tags == {"unbreaking": 1}
        assert outcome.result.damage == 780  # 책은 수리하지 않음
        # unbreaking 1 * book 1 + penalty (1 + 0)
        assert outcome.cost == 2
        assert outcome.result.penalty == 3

    def test_same_type_repair(self, rules, agent) -> None:
        bench = Workbench(left=_make_sword(damage=1000), right=_make_sword(damage=1000))
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.MERGE
        assert outcome.result.damage == 252
        assert outcome.cost == rules.options.item_repair_cost

    def test_hard_conflict_sacrificed(self, rules, agent) -> None:
        bench = Workbench(
            left=_make_sword({"sharpness": 2}),
            right=_make_book({"smite": 3, "unbreaking": 2}),
        )
        outcome = preview_combination(bench, agent, rules)
        assert "smite" not in outcome.result.tags
        # 희생 1 + unbreaking 2 * book 1
        assert outcome.cost == 3

    def test_only_conflicting_tags_is_no_change(self, rules, agent) -> None:
        bench = Workbench(left=_make_sword({"sharpness": 2}), right=_make_book({"smite": 3}))
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.NONE
        assert outcome.cost == 0

    def test_identical_undamaged_items_no_result(self, rules, agent) -> None:
        bench = Workbench(left=_make_sword(), right=_make_sword(penalty=5))
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.NONE
        assert outcome.has_result is False

    def test_rename_added_last(self, rules, agent) -> None:
        bench = Workbench(
            left=_make_sword({"sharpness": 3}),
            right=_make_sword({"sharpness": 3}, penalty=2),
            rename_text="Blade",
        )
        outcome = preview_combination(bench, agent, rules)
        # 4 + penalty (0 + 2) + rename 1
        assert outcome.cost == 7
        assert outcome.result.label == "Blade"

    def test_penalty_escalation(self, rules, agent) -> None:
        item = _make_sword()
        for n in range(1, 7):
            bench = Workbench(left=item, right=_make_book({f"custom_{n}": 1}))
            outcome = preview_combination(bench, agent, rules)
            assert outcome.mode == CombinationMode.MERGE
            item = outcome.result
            assert item.penalty == 2**n - 1

    def test_display_capped(self, make_rules, agent) -> None:
        rules = make_rules(AnvilOptions(limit_repair_cost=True, limit_repair_value=3))
        bench = Workbench(
            left=_make_sword({"sharpness": 3}), right=_make_sword({"sharpness": 3})
        )
        outcome = preview_combination(bench, agent, rules)
        assert outcome.cost == 3
        assert outcome.display.raw_cost == 4
        assert outcome.display.repair_cost == 3


class TestUnitRepair:
    def test_unit_repair(self, rules, agent) -> None:
        bench = Workbench(
            left=_make_sword(damage=1000), right=Item("diamond", count=2, penalty=9)
        )
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.UNIT_REPAIR
        assert outcome.result.damage == 218
        # 2 units * 1, 오른쪽 페널티 무시
        assert outcome.cost == 2
        assert outcome.result.penalty == 1

    def test_full_durability_no_result(self, rules, agent) -> None:
        bench = Workbench(left=_make_sword(), right=Item("diamond", count=2))
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.NONE

    def test_rename_only_on_full_durability(self, rules, agent) -> None:
        bench = Workbench(
            left=_make_sword(), right=Item("diamond", count=2), rename_text="Blade"
        )
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.UNIT_REPAIR
        assert outcome.cost == 1


class TestNoCombination:
    def test_unrelated_items(self, rules, agent) -> None:
        bench = Workbench(left=_make_sword(damage=10), right=Item("dirt"))
        outcome = preview_combination(bench, agent, rules)
        assert outcome.mode == CombinationMode.NONE
        assert outcome.cost == 0

    def test_empty_left(self, rules, agent) -> None:
        outcome = preview_combination(Workbench(right=_make_sword()), agent, rules)
        assert outcome.mode == CombinationMode.NONE

    def test_without_permission_defers(self, rules) -> None:
        player = Agent(agent_id="p2", level=30)
        bench = Workbench(left=_make_sword(), rename_text="Blade")
        assert preview_combination(bench, player, rules).mode == CombinationMode.DEFER


class TestIdempotence:
    @pytest.mark.parametrize(
        "right",
        [
            None,
            _make_sword({"sharpness": 3}, damage=400, penalty=2),
            _make_book({"smite": 2, "unbreaking": 3}),
            Item("diamond", count=3),
        ],
    )
    def test_repeat_preview(self, rules, agent, right) -> None:
        left = _make_sword({"sharpness": 3}, damage=900, penalty=1)
        bench = Workbench(left=left, right=right, rename_text="Blade")
        before = left.clone()

        first = preview_combination(bench, agent, rules)
        second = preview_combination(bench, agent, rules)

        assert first == second
        assert bench.left == before
