"""Integration tests for the composition root.

These tests verify that settings load and validate, and that build()
wires the store, service, dispatcher, transport and helper together.
"""

import json
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from stripemock.config import Settings, load_settings
from stripemock.core.resource_service import ResourceService
from stripemock.main import build


class TestConfigurationLoading:
    """Test configuration loading and validation."""

    def test_load_settings_with_defaults(self) -> None:
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.id_prefix == "test"
        assert settings.schema_path == ""
        assert settings.api_base_url == "https://api.stripe.com"
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"

    def test_load_settings_from_env(self) -> None:
        with patch.dict(
            os.environ,
            {
                "STRIPEMOCK_ID_PREFIX": "ci",
                "STRIPEMOCK_API_BASE_URL": "http://localhost:12111/",
                "STRIPEMOCK_LOG_LEVEL": "DEBUG",
            },
        ):
            settings = load_settings()

        assert settings.id_prefix == "ci"
        assert settings.api_base_url == "http://localhost:12111"
        assert settings.log_level == "DEBUG"

    def test_load_settings_from_env_file(self, tmp_path) -> None:
        env_file = tmp_path / "test.env"
        env_file.write_text("STRIPEMOCK_LOG_FORMAT=json\n", encoding="utf-8")

        assert load_settings(str(env_file)).log_format == "json"

    @pytest.mark.parametrize("prefix", ["", "   ", "has space"])
    def test_id_prefix_validation(self, prefix) -> None:
        with patch.dict(os.environ, {"STRIPEMOCK_ID_PREFIX": prefix}):
            with pytest.raises(ValidationError):
                load_settings()

    def test_api_base_url_validation(self) -> None:
        with patch.dict(os.environ, {"STRIPEMOCK_API_BASE_URL": "api.stripe.com"}):
            with pytest.raises(ValidationError):
                load_settings()


class TestBuild:
    """Test that build() wires every component."""

    def test_components_share_one_service(self) -> None:
        fake = build(Settings(_env_file=None))  # type: ignore[call-arg]

        assert isinstance(fake.service, ResourceService)
        assert fake.dispatcher.resources is fake.service
        assert fake.transport.dispatcher is fake.dispatcher
        assert fake.helper.resources is fake.service

    def test_id_prefix_reaches_generated_ids(self) -> None:
        fake = build(Settings(_env_file=None, id_prefix="ci"))  # type: ignore[call-arg]

        product = fake.service.create("product", {"name": "Gold"})

        assert product["id"] == "ci_product_1"

    def test_client_talks_to_the_fake(self) -> None:
        fake = build(Settings(_env_file=None))  # type: ignore[call-arg]
        fake.helper.create_plan()

        with fake.client() as client:
            response = client.get("/v1/plans/stripe_mock_default_plan_id")

        assert response.status_code == 200
        assert response.json()["amount"] == 1337
        assert len(fake.transport.requests) == 1

    def test_schema_path_is_loaded(self, tmp_path) -> None:
        path = tmp_path / "schemas.json"
        path.write_text(
            json.dumps({"resources": [{"name": "coupon", "plural": "coupons"}]}),
            encoding="utf-8",
        )

        fake = build(Settings(_env_file=None, schema_path=str(path)))  # type: ignore[call-arg]

        assert "coupon" in fake.service.registry
        with fake.client() as client:
            assert client.post("/v1/coupons", data={}).status_code == 200
