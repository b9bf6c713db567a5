"""
Tests for SplitEasy models

Test strategy:
1. Unit tests for individual components (models, engine, validator, editor)
2. Flow tests with real file storage under tmp_path
3. No network, no shared state between tests
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from spliteasy.models.bill import (
    BillState,
    Item,
    Person,
    StoredSplit,
    ValidationIssue,
    ValidationResult,
)
from spliteasy.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestBillModels:
    """Tests for bill-related Pydantic models."""

    def test_person_creation(self):
        """Test Person model creation."""
        person = Person(id="p1", name="Alice")
        assert person.name == "Alice"
        assert person.is_external is False

    def test_person_requires_id(self):
        """Test that an empty ID is rejected."""
        with pytest.raises(ValueError):
            Person(id="", name="Alice")

    def test_item_price_normalized_to_decimal(self):
        """Test that int, str and float prices all become Decimal."""
        assert Item(id="i1", name="Rice", price=10).price == Decimal("10")
        assert Item(id="i2", name="Milk", price="4.50").price == Decimal("4.50")
        assert Item(id="i3", name="Eggs", price=6.25).price == Decimal("6.25")

    def test_item_rejects_negative_price(self):
        """Test that negative prices are rejected."""
        with pytest.raises(ValueError):
            Item(id="i1", name="Refund", price=Decimal("-1"))

    def test_item_consumers_default_empty(self):
        """Test that an item can be created without consumers."""
        item = Item(id="i1", name="Rice", price=10)
        assert item.consumer_ids == []

    def test_bill_state_defaults(self):
        """Test BillState default tax and lists."""
        state = BillState(payer_id="p1")
        assert state.people == []
        assert state.items == []
        assert state.overall_tax == Decimal("0")

    def test_bill_state_rejects_negative_tax(self):
        """Test that negative tax is rejected."""
        with pytest.raises(ValueError):
            BillState(payer_id="p1", overall_tax=-1)

    def test_bill_state_lookups(self):
        """Test find_person, find_item and regular_people."""
        state = BillState(
            people=[
                Person(id="p1", name="Alice"),
                Person(id="x", name="External Payer", is_external=True),
            ],
            payer_id="x",
            items=[Item(id="i1", name="Rice", price=10, consumer_ids=["p1"])],
        )
        assert state.find_person("p1").name == "Alice"
        assert state.find_person("nobody") is None
        assert state.find_item("i1").name == "Rice"
        assert state.find_item("nope") is None
        assert [p.id for p in state.regular_people] == ["p1"]

    def test_stored_split_strips_whitespace(self):
        """Test that whitespace is stripped from the split name."""
        split = StoredSplit(
            id="s1",
            state=BillState(people=[Person(id="p1", name="A")], payer_id="p1"),
            name="  Dinner  ",
        )
        assert split.name == "Dinner"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.CALCULATION_COMPLETED,
            description="Split calculated",
        )
        assert event.event_type == AuditEventType.CALCULATION_COMPLETED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.SPLIT_SAVED,
            description="Split saved",
            entity_id="abc",
            details={"name": "Dinner"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "split_saved"
        assert log_dict["entity_id"] == "abc"
        assert log_dict["details"]["name"] == "Dinner"
        assert log_dict["correlation_id"] is None

    def test_audit_event_builder_split_saved(self):
        """Test AuditEventBuilder.split_saved."""
        correlation_id = uuid4()

        event = AuditEventBuilder.split_saved(
            split_id="s1",
            name="2 people, 1 items, $10.00 - 2024-12-01",
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.SPLIT_SAVED
        assert event.entity_type == "split"
        assert event.entity_id == "s1"
        assert event.correlation_id == correlation_id

    def test_audit_event_builder_validation_failed(self):
        """Test AuditEventBuilder.validation_failed."""
        event = AuditEventBuilder.validation_failed(
            issues=[{"field": "payer_id", "type": "missing", "message": "Payer ID is required"}],
            correlation_id=None,
        )
        assert event.event_type == AuditEventType.STATE_VALIDATION_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert "1 issues" in event.description

    def test_audit_event_builder_calculation_completed(self):
        """Test AuditEventBuilder.calculation_completed."""
        event = AuditEventBuilder.calculation_completed(
            grand_total="24.22",
            share_count=4,
            pennies_adjusted=1,
            correlation_id=uuid4(),
        )
        assert event.details["pennies_adjusted"] == 1
        assert "$24.22" in event.description


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors, errors and error_count."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=False,
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="payer_id",
                    issue_type="unknown_reference",
                    message="Payer must be selected from people list",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.errors == ["Payer must be selected from people list"]

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="people.0.name",
                    issue_type="too_long",
                    message="Name is long",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.errors == []

    def test_validation_issue_severity_pattern(self):
        """Test that unknown severities are rejected."""
        with pytest.raises(ValueError):
            ValidationIssue(
                field="x",
                issue_type="x",
                message="x",
                severity="fatal",
            )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
