"""Unit tests for ResourceService.

Tests run the core service against the fake record store so they can
assert exactly what was written, and that rejected requests write nothing.
"""

import pytest

from stripemock.core.errors import (
    InvalidRequestError,
    ResourceNotFoundError,
    UnknownResourceTypeError,
)
from stripemock.core.id_generator import IdGenerator
from stripemock.core.models import DeletedRecord, ListResult
from stripemock.core.resource_service import ResourceService
from stripemock.core.schema import default_registry
from stripemock.tests.fakes import FakeRecordStorePort

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def store() -> FakeRecordStorePort:
    return FakeRecordStorePort()


@pytest.fixture
def service(store: FakeRecordStorePort) -> ResourceService:
    return ResourceService(store=store, registry=default_registry())


@pytest.fixture
def product(service: ResourceService) -> dict:
    return service.create("product", {"id": "prod_abc123", "name": "My Product"})


@pytest.fixture
def plan_params() -> dict:
    return {
        "id": "plan_1",
        "product": "prod_abc123",
        "name": "The Mock Plan",
        "amount": 9900,
        "currency": "USD",
        "interval": "month",
        "metadata": {"description": "desc text", "info": "info text"},
        "trial_period_days": 30,
    }


# ============================================================================
# Create
# ============================================================================


class TestCreate:
    """Tests for the create handler."""

    def test_round_trip_preserves_every_field(
        self, service, product, plan_params
    ) -> None:
        service.create("plan", plan_params)
        plan = service.retrieve("plan", "plan_1")

        for key, value in plan_params.items():
            assert plan[key] == value
        assert plan["object"] == "plan"

    def test_create_stores_under_the_given_id(
        self, service, store, product, plan_params
    ) -> None:
        service.create("plan", plan_params)

        assert store.tables["plan"]["plan_1"]["amount"] == 9900
        assert store.lock_calls.count("plan") >= 1

    def test_generated_ids_increase_per_type(
        self, service, product, plan_params
    ) -> None:
        plan_params["id"] = None
        first = service.create("plan", plan_params)
        second = service.create("plan", plan_params)
        other = service.create("product", {"name": "Another"})

        assert first["id"] == "test_plan_1"
        assert second["id"] == "test_plan_2"
        assert other["id"] == "test_product_1"

    def test_generated_id_skips_taken_ids(
        self, service, product, plan_params
    ) -> None:
        plan_params["id"] = "test_plan_1"
        service.create("plan", plan_params)
        del plan_params["id"]

        plan = service.create("plan", plan_params)

        assert plan["id"] == "test_plan_2"

    def test_custom_id_prefix(self, store, plan_params) -> None:
        service = ResourceService(
            store=store,
            registry=default_registry(),
            id_generator=IdGenerator(prefix="acme"),
        )
        product = service.create("product", {"name": "P"})

        assert product["id"] == "acme_product_1"

    def test_amount_is_stored_as_int(self, service, store, product, plan_params) -> None:
        plan_params["amount"] = "1100"
        plan = service.create("plan", plan_params)

        assert plan["amount"] == 1100
        assert isinstance(store.tables["plan"]["plan_1"]["amount"], int)

    def test_duplicate_id_leaves_existing_record(
        self, service, store, product, plan_params
    ) -> None:
        service.create("plan", plan_params)
        puts_before = len(store.put_calls)

        with pytest.raises(InvalidRequestError) as exc_info:
            service.create("plan", {**plan_params, "amount": 1})

        assert exc_info.value.message == "Plan already exists."
        assert exc_info.value.param == "id"
        assert exc_info.value.http_status == 400
        assert len(store.put_calls) == puts_before
        assert service.retrieve("plan", "plan_1")["amount"] == 9900

    def test_fractional_amount_stores_nothing(
        self, service, store, product, plan_params
    ) -> None:
        plan_params["amount"] = 99.99

        with pytest.raises(InvalidRequestError, match=r"^Invalid integer: 99\.99$"):
            service.create("plan", plan_params)

        assert "plan_1" not in store.tables.get("plan", {})

    def test_unknown_product_is_rejected(self, service, plan_params) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            service.create("plan", plan_params)

        assert exc_info.value.message == "No such product: prod_abc123"
        assert exc_info.value.param == "product"

    def test_returned_snapshot_is_detached(
        self, service, product, plan_params
    ) -> None:
        plan = service.create("plan", plan_params)
        plan["amount"] = 1
        plan["metadata"]["description"] = "changed"

        stored = service.retrieve("plan", "plan_1")
        assert stored["amount"] == 9900
        assert stored["metadata"]["description"] == "desc text"

    def test_caller_params_are_not_aliased(
        self, service, product, plan_params
    ) -> None:
        service.create("plan", plan_params)
        plan_params["metadata"]["info"] = "changed"

        assert service.retrieve("plan", "plan_1")["metadata"]["info"] == "info text"

    def test_unknown_resource_type_is_a_programming_error(self, service) -> None:
        with pytest.raises(UnknownResourceTypeError):
            service.create("invoice", {})


# ============================================================================
# Retrieve / Update / Delete
# ============================================================================


class TestRetrieve:
    """Tests for the retrieve handler."""

    def test_missing_id_raises_not_found(self, service) -> None:
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.retrieve("plan", "nope")

        assert exc_info.value.message == "No such plan: nope"
        assert exc_info.value.param == "plan"
        assert exc_info.value.http_status == 404

    def test_not_found_is_an_invalid_request_error(self, service) -> None:
        with pytest.raises(InvalidRequestError):
            service.retrieve("product", "nope")


class TestUpdate:
    """Tests for the update handler."""

    def test_update_overwrites_only_given_fields(
        self, service, product, plan_params
    ) -> None:
        service.create("plan", plan_params)
        updated = service.update("plan", "plan_1", {"amount": 789})

        assert updated["amount"] == 789
        plan = service.retrieve("plan", "plan_1")
        assert plan["amount"] == 789
        for key, value in plan_params.items():
            if key != "amount":
                assert plan[key] == value

    def test_update_missing_id_raises_not_found(self, service) -> None:
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.update("plan", "nope", {"amount": 1})

        assert exc_info.value.param == "plan"
        assert exc_info.value.http_status == 404

    def test_update_rejects_fractional_amount(
        self, service, store, product, plan_params
    ) -> None:
        service.create("plan", plan_params)
        puts_before = len(store.put_calls)

        with pytest.raises(InvalidRequestError, match="Invalid integer: 5.5"):
            service.update("plan", "plan_1", {"amount": 5.5})

        assert len(store.put_calls) == puts_before

    def test_update_cannot_change_id_or_object(
        self, service, product, plan_params
    ) -> None:
        service.create("plan", plan_params)
        updated = service.update("plan", "plan_1", {"id": "other", "object": "x"})

        assert updated["id"] == "plan_1"
        assert updated["object"] == "plan"

    def test_none_removes_optional_attribute(
        self, service, product, plan_params
    ) -> None:
        service.create("plan", plan_params)
        updated = service.update("plan", "plan_1", {"trial_period_days": None})

        assert "trial_period_days" not in updated

    def test_product_reference_is_not_rechecked(
        self, service, product, plan_params
    ) -> None:
        service.create("plan", plan_params)
        updated = service.update("plan", "plan_1", {"product": "prod_elsewhere"})

        assert updated["product"] == "prod_elsewhere"


class TestDelete:
    """Tests for the delete handler."""

    def test_delete_then_retrieve_raises_not_found(
        self, service, product, plan_params
    ) -> None:
        service.create("plan", plan_params)

        deleted = service.delete("plan", "plan_1")

        assert deleted == DeletedRecord(id="plan_1", object="plan", deleted=True)
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.retrieve("plan", "plan_1")
        assert exc_info.value.param == "plan"
        assert exc_info.value.http_status == 404

    def test_delete_missing_id_raises_not_found(self, service) -> None:
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.delete("plan", "nope")

        assert exc_info.value.message == "No such plan: nope"


# ============================================================================
# List / Reset
# ============================================================================


class TestList:
    """Tests for the list handler."""

    def _create_plans(self, service, count: int) -> None:
        for i in range(count):
            service.create(
                "plan",
                {
                    "id": f"Plan {i}",
                    "product": "prod_abc123",
                    "amount": 11,
                    "currency": "usd",
                    "interval": "month",
                },
            )

    def test_limit_caps_count_exactly(self, service, product) -> None:
        self._create_plans(service, 101)

        page = service.list("plan", limit=100)

        assert isinstance(page, ListResult)
        assert len(page) == 100
        assert page.has_more is True
        assert page.data[0]["id"] == "Plan 0"
        assert page.data[-1]["id"] == "Plan 99"

    def test_no_limit_returns_everything(self, service, product) -> None:
        self._create_plans(service, 12)

        page = service.list("plan")

        assert len(page) == 12
        assert page.has_more is False
        assert [p["id"] for p in page] == [f"Plan {i}" for i in range(12)]

    def test_list_shape(self, service) -> None:
        page = service.list("plan")

        assert page.to_dict() == {
            "object": "list",
            "data": [],
            "has_more": False,
            "url": "/v1/plans",
        }

    def test_string_limit_is_accepted(self, service, product) -> None:
        self._create_plans(service, 3)

        assert len(service.list("plan", limit="2")) == 2

    @pytest.mark.parametrize("limit", ["ten", 2.5])
    def test_non_integer_limit_is_rejected(self, service, limit) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            service.list("plan", limit=limit)

        assert exc_info.value.message == f"Invalid integer: {limit}"
        assert exc_info.value.param == "limit"

    def test_zero_limit_is_rejected(self, service) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            service.list("plan", limit=0)

        assert exc_info.value.message == "This value must be greater than or equal to 1."


class TestReset:
    """Tests for clearing state between tests."""

    def test_reset_clears_records_and_counters(self, service, store) -> None:
        service.create("product", {"name": "One"})
        service.create("product", {"name": "Two"})

        service.reset()

        assert store.reset_call_count == 1
        assert len(service.list("product")) == 0
        assert service.create("product", {"name": "Again"})["id"] == "test_product_1"
