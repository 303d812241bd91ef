"""Test helper for seeding the fake with default records."""

from .stripe_helper import DEFAULT_PLAN_ID, DEFAULT_PRODUCT_ID, StripeHelper

__all__ = ["DEFAULT_PLAN_ID", "DEFAULT_PRODUCT_ID", "StripeHelper"]
