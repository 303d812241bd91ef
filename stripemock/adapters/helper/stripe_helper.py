"""Test helper: shortcuts for setting up fake plans and products.

Tests use it to seed the fake with sensible defaults and override only
the attributes they care about:

    helper = StripeHelper(service)
    product = helper.create_product()
    plan = helper.create_plan(amount=1331, product=product["id"])
"""

import logging
from collections.abc import Mapping
from typing import Any

from stripemock.core.errors import ResourceNotFoundError
from stripemock.core.models import DeletedRecord, Record
from stripemock.core.ports import ResourcePort

logger = logging.getLogger(__name__)

DEFAULT_PLAN_ID = "stripe_mock_default_plan_id"
DEFAULT_PRODUCT_ID = "stripe_mock_default_product_id"


class StripeHelper:
    """Creates and removes fake records with default params."""

    def __init__(self, resources: ResourcePort, default_currency: str = "usd"):
        """Initialize the helper.

        Args:
            resources: ResourcePort implementation the records go to.
            default_currency: Currency used when a plan omits one.
        """
        self.resources = resources
        self.default_currency = default_currency

    def create_product_params(self, **overrides: Any) -> dict[str, Any]:
        params: dict[str, Any] = {
            "id": DEFAULT_PRODUCT_ID,
            "name": "Default Product",
            "type": "service",
        }
        params.update(overrides)
        return params

    def create_plan_params(self, **overrides: Any) -> dict[str, Any]:
        """Default plan params, pointing at the default product."""
        params: dict[str, Any] = {
            "id": DEFAULT_PLAN_ID,
            "interval": "month",
            "currency": self.default_currency,
            "product": DEFAULT_PRODUCT_ID,
            "amount": 1337,
        }
        params.update(overrides)
        return params

    def create_product(self, **overrides: Any) -> Record:
        return self.resources.create("product", self.create_product_params(**overrides))

    def create_plan(self, **overrides: Any) -> Record:
        """Create a plan, creating the default product first if it is the target.

        Raises:
            InvalidRequestError: If the resulting params are rejected.
        """
        params = self.create_plan_params(**overrides)
        if params.get("product") == DEFAULT_PRODUCT_ID:
            self._ensure_product(DEFAULT_PRODUCT_ID)
        return self.resources.create("plan", params)

    def delete_plan(self, plan_id: str) -> DeletedRecord | None:
        """Delete a plan if it exists; returns None when it did not."""
        return self._delete_if_present("plan", plan_id)

    def delete_product(self, product_id: str) -> DeletedRecord | None:
        """Delete a product if it exists; returns None when it did not."""
        return self._delete_if_present("product", product_id)

    def data(self, resource_type: str) -> Mapping[str, Record]:
        """Snapshot of the stored records of a type, keyed by id.

        Raises:
            AttributeError: If the resource port exposes no raw data view.
        """
        return self.resources.data(resource_type)  # type: ignore[attr-defined]

    def _ensure_product(self, product_id: str) -> None:
        try:
            self.resources.retrieve("product", product_id)
        except ResourceNotFoundError:
            self.create_product(id=product_id)

    def _delete_if_present(
        self, resource_type: str, resource_id: str
    ) -> DeletedRecord | None:
        try:
            return self.resources.delete(resource_type, resource_id)
        except ResourceNotFoundError:
            logger.debug(
                f"Nothing to delete for {resource_type} {resource_id}",
                extra={"resource_type": resource_type, "resource_id": resource_id},
            )
            return None


__all__ = ["DEFAULT_PLAN_ID", "DEFAULT_PRODUCT_ID", "StripeHelper"]
