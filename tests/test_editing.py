"""
Tests for bill editing operations
"""

import pytest
from decimal import Decimal

from spliteasy.editing import (
    EXTERNAL_PAYER,
    EXTERNAL_PAYER_NAME,
    BillEditError,
    add_item,
    add_person,
    create_empty_state,
    create_sample_state,
    parse_amount,
    remove_item,
    remove_person,
    rename_person,
    set_overall_tax,
    set_payer,
    toggle_consumer,
    update_item,
)
from spliteasy.models.bill import BillState, Item, Person
from spliteasy.validation import BillStateValidator


@pytest.fixture
def state():
    """Alice paid; Bob shares the pizza with her; the salad is unassigned."""
    return BillState(
        people=[Person(id="p1", name="Alice"), Person(id="p2", name="Bob")],
        payer_id="p1",
        items=[
            Item(id="i1", name="Pizza", price=Decimal("12.00"), consumer_ids=["p1", "p2"]),
            Item(id="i2", name="Salad", price=Decimal("6.00")),
        ],
    )


class TestParseAmount:
    """Tests for parsing user-entered amounts."""

    @pytest.mark.parametrize("value,expected", [
        ("12.345", "12.35"),
        (" 3 ", "3.00"),
        ("0", "0.00"),
        (4.5, "4.50"),
        (7, "7.00"),
        (Decimal("1.005"), "1.01"),
    ])
    def test_valid_amounts(self, value, expected):
        assert parse_amount(value) == Decimal(expected)

    def test_blank(self):
        with pytest.raises(BillEditError, match="Please enter a price"):
            parse_amount("  ")

    @pytest.mark.parametrize("value", ["abc", "-1", "inf", "NaN", True, -0.5])
    def test_invalid_amounts(self, value):
        with pytest.raises(BillEditError, match="Please enter a valid price"):
            parse_amount(value)

    @pytest.mark.parametrize("value", ["1e30", 1e30, "1000000000.01", Decimal("1E+27")])
    def test_amount_above_maximum(self, value):
        """Test that huge amounts are rejected with a user-facing message."""
        with pytest.raises(BillEditError, match="Please enter a valid price"):
            parse_amount(value)

    def test_amount_at_maximum(self):
        assert parse_amount("1000000000") == Decimal("1000000000.00")

    def test_maximum_from_settings(self, monkeypatch):
        monkeypatch.setenv("MAX_AMOUNT", "100")

        assert parse_amount("100") == Decimal("100.00")
        with pytest.raises(BillEditError, match="Please enter a valid price"):
            parse_amount("100.01")


class TestPeople:
    """Tests for adding, renaming and removing people."""

    def test_add_person(self, state):
        updated = add_person(state, "  Cara ")

        assert [p.name for p in updated.people] == ["Alice", "Bob", "Cara"]
        assert updated.people[-1].is_external is False
        assert len(state.people) == 2

    def test_add_person_generates_unique_ids(self, state):
        updated = add_person(add_person(state, "Cara"), "Dan")
        ids = [p.id for p in updated.people]
        assert len(set(ids)) == len(ids)

    def test_add_person_empty_name(self, state):
        with pytest.raises(BillEditError, match="Please enter a name"):
            add_person(state, "   ")

    def test_add_person_duplicate_ignores_case(self, state):
        with pytest.raises(BillEditError, match="This name already exists"):
            add_person(state, "alice")

    def test_add_person_name_too_long(self, state):
        with pytest.raises(BillEditError, match=r"Name is too long \(max 50 characters\)"):
            add_person(state, "x" * 51)

    def test_rename_person(self, state):
        updated = rename_person(state, "p2", "Robert")
        assert updated.find_person("p2").name == "Robert"
        assert state.find_person("p2").name == "Bob"

    def test_rename_person_case_change(self, state):
        """Test that a person may change the case of their own name."""
        updated = rename_person(state, "p1", "ALICE")
        assert updated.find_person("p1").name == "ALICE"

    def test_rename_person_to_existing_name(self, state):
        with pytest.raises(BillEditError, match="This name already exists"):
            rename_person(state, "p2", "Alice")

    def test_rename_person_empty(self, state):
        with pytest.raises(BillEditError, match="Name cannot be empty"):
            rename_person(state, "p2", "")

    def test_rename_unknown_person(self, state):
        with pytest.raises(BillEditError, match="Unknown person: p9"):
            rename_person(state, "p9", "Zed")

    def test_remove_person(self, state):
        state = add_person(state, "Cara")
        cara_id = state.people[-1].id

        updated = remove_person(state, cara_id)
        assert [p.name for p in updated.people] == ["Alice", "Bob"]

    def test_cannot_remove_payer(self, state):
        with pytest.raises(BillEditError, match="Can't remove the person who paid the bill"):
            remove_person(state, "p1")

    def test_cannot_remove_consumer(self, state):
        with pytest.raises(BillEditError, match="Can't remove a person who has items assigned"):
            remove_person(state, "p2")


class TestPayer:
    """Tests for choosing the payer."""

    def test_select_regular_person(self, state):
        assert set_payer(state, "p2").payer_id == "p2"

    def test_select_external_creates_payer(self, state):
        updated = set_payer(state, EXTERNAL_PAYER)
        external = updated.find_person(updated.payer_id)

        assert external.is_external is True
        assert external.name == EXTERNAL_PAYER_NAME
        assert len(updated.people) == 3
        assert len(updated.regular_people) == 2

    def test_select_external_twice_reuses_payer(self, state):
        once = set_payer(state, EXTERNAL_PAYER)
        twice = set_payer(once, EXTERNAL_PAYER)

        assert twice.payer_id == once.payer_id
        assert len(twice.people) == 3

    def test_switching_back_drops_external(self, state):
        updated = set_payer(set_payer(state, EXTERNAL_PAYER), "p2")

        assert updated.payer_id == "p2"
        assert all(not p.is_external for p in updated.people)

    def test_blank_payer(self, state):
        with pytest.raises(BillEditError, match="Please select who paid the bill"):
            set_payer(state, "")

    def test_unknown_payer(self, state):
        with pytest.raises(BillEditError, match="Unknown person"):
            set_payer(state, "nobody")


class TestItems:
    """Tests for item editing."""

    def test_add_item_goes_to_top(self, state):
        updated = add_item(state, " Soda ", "2.499")

        new_item = updated.items[0]
        assert new_item.name == "Soda"
        assert new_item.price == Decimal("2.50")
        assert new_item.consumer_ids == []
        assert [i.name for i in updated.items] == ["Soda", "Pizza", "Salad"]

    def test_add_item_needs_people(self):
        with pytest.raises(BillEditError, match="Add people first before adding items"):
            add_item(create_empty_state(), "Soda", "2")

    def test_add_item_needs_name(self, state):
        with pytest.raises(BillEditError, match="Please enter an item name"):
            add_item(state, " ", "2")

    def test_add_item_duplicate(self, state):
        with pytest.raises(BillEditError, match="This item already exists"):
            add_item(state, "PIZZA", "2")

    def test_add_item_zero_price(self, state):
        with pytest.raises(BillEditError, match="Price must be greater than 0"):
            add_item(state, "Water", "0")

    def test_add_item_blank_price(self, state):
        with pytest.raises(BillEditError, match="Please enter a price"):
            add_item(state, "Water", "")

    def test_update_item_price(self, state):
        updated = update_item(state, "i2", price="7.555")
        assert updated.find_item("i2").price == Decimal("7.56")
        assert state.find_item("i2").price == Decimal("6.00")

    def test_update_item_blank_price_resets_to_zero(self, state):
        updated = update_item(state, "i2", price="")
        assert updated.find_item("i2").price == Decimal("0")

    def test_update_item_name(self, state):
        updated = update_item(state, "i2", name="Caesar Salad")
        assert updated.find_item("i2").name == "Caesar Salad"
        assert updated.find_item("i2").price == Decimal("6.00")

    def test_update_item_duplicate_name(self, state):
        with pytest.raises(BillEditError, match="This item name already exists"):
            update_item(state, "i2", name="pizza")

    def test_remove_item(self, state):
        updated = remove_item(state, "i1")
        assert [i.id for i in updated.items] == ["i2"]

    def test_remove_unknown_item(self, state):
        with pytest.raises(BillEditError, match="Unknown item: nope"):
            remove_item(state, "nope")

    def test_toggle_consumer(self, state):
        added = toggle_consumer(state, "i2", "p2")
        assert added.find_item("i2").consumer_ids == ["p2"]

        removed = toggle_consumer(added, "i2", "p2")
        assert removed.find_item("i2").consumer_ids == []

    def test_toggle_consumer_unknown_person(self, state):
        with pytest.raises(BillEditError, match="Unknown person"):
            toggle_consumer(state, "i1", "ghost")


class TestTax:
    """Tests for set_overall_tax."""

    def test_set_tax(self, state):
        assert set_overall_tax(state, "2.5").overall_tax == Decimal("2.50")

    def test_blank_tax_is_zero(self, state):
        assert set_overall_tax(state, " ").overall_tax == Decimal("0")

    @pytest.mark.parametrize("value", ["-3", "abc", "1e30"])
    def test_invalid_tax(self, state, value):
        with pytest.raises(BillEditError, match="Please enter a valid tax amount"):
            set_overall_tax(state, value)


class TestStartingStates:
    """Tests for the empty and sample bills."""

    def test_empty_state(self):
        state = create_empty_state()
        validator = BillStateValidator()

        assert len(state.people) == 1
        assert state.people[0].is_external is True
        assert state.payer_id == state.people[0].id
        assert state.overall_tax == Decimal("0")
        assert validator.validate(state).is_valid is True
        assert validator.check_completeness(state).is_complete is False

    def test_sample_state(self):
        state = create_sample_state()
        validator = BillStateValidator()

        assert [p.name for p in state.people] == ["Alice", "Bob", "Cara", "Dan (payer)"]
        assert [i.name for i in state.items] == ["Rice", "Milk", "Eggs"]
        assert state.find_person(state.payer_id).name == "Dan (payer)"
        assert state.overall_tax == Decimal("3.72")
        assert validator.check_completeness(state).is_complete is True


class TestImmutability:
    """Edits never share mutable data with their input."""

    def test_edited_state_is_independent(self, state):
        updated = toggle_consumer(state, "i2", "p1")
        updated.items[0].consumer_ids.append("p9")
        updated.people[0].name = "Changed"

        assert state.items[0].consumer_ids == ["p1", "p2"]
        assert state.people[0].name == "Alice"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
