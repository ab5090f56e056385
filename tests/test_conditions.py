"""Tests for check evaluation."""

from dialogue_engine.engine.conditions import ConditionEvaluator, has_equipped, holds_in_slot
from dialogue_engine.model.types import HasItemCheck, InventorySlot, InventorySnapshot, UnknownCheck


def snapshot(slots=None, **extra):
    return InventorySnapshot(slots=[InventorySlot(item_id=i, count=c) for i, c in (slots or [])], extra=extra)


class TestHasItem:
    def test_item_in_slot(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(HasItemCheck("fish"), snapshot([("fish", 1)])) is True

    def test_zero_count_slot_does_not_count(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(HasItemCheck("fish"), snapshot([("fish", 0)])) is False

    def test_missing_item(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(HasItemCheck("fish"), snapshot([("rock", 3)])) is False

    def test_negate_passes_without_item(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(HasItemCheck("fish", negate=True), snapshot([("rock", 3)])) is True

    def test_negate_fails_with_item(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(HasItemCheck("fish", negate=True), snapshot([("fish", 3)])) is False

    def test_no_snapshot_is_not_found(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(HasItemCheck("fish"), None) is False
        assert evaluator.evaluate(HasItemCheck("fish", negate=True), None) is True


class TestEquipped:
    def test_equipped_key_matches(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(HasItemCheck("basic_rod"), snapshot(equippedRod="basic_rod")) is True

    def test_equipped_key_is_case_insensitive(self):
        assert has_equipped(snapshot(CurrentlyEQUIPPEDHat="cap"), "cap") is True

    def test_other_keys_are_ignored(self):
        assert has_equipped(snapshot(favouriteRod="basic_rod"), "basic_rod") is False

    def test_non_string_values_are_ignored(self):
        assert has_equipped(snapshot(equippedSlots=["basic_rod"]), "basic_rod") is False

    def test_equipped_is_not_a_slot(self):
        assert holds_in_slot(snapshot(equippedRod="basic_rod"), "basic_rod") is False


class TestUnknownChecks:
    def test_unknown_check_fails_closed(self):
        evaluator = ConditionEvaluator()
        check = UnknownCheck(type="hasQuest", data={"type": "hasQuest", "questId": "q1"})
        assert evaluator.evaluate(check, snapshot([("q1", 1)])) is False
