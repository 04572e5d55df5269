"""Tests for model resolution and per-role model assignment."""

import pytest

from inksink.agents.factory import resolve_credentials
from inksink.agents.model_registry import (
    LocalModelSettings,
    ModelAssignment,
    ModelCredentials,
    ModelRegistry,
)


class FakeKeyVault:
    def __init__(self):
        self.requested: list[str] = []

    def get_secret(self, name: str) -> str:
        self.requested.append(name)
        return f"key-for-{name}"


def test_registry_reads_each_secret_once():
    akv = FakeKeyVault()

    ModelRegistry(akv)

    assert akv.requested == ["AZURE-OPENAI-API-KEY"]


def test_registry_credentials():
    registry = ModelRegistry(FakeKeyVault())

    credentials = registry.credentials("gpt-4.1-mini")

    assert credentials.deployment_name == "gpt-4.1-mini"
    assert credentials.api_key == "key-for-AZURE-OPENAI-API-KEY"


def test_unknown_model_is_rejected():
    with pytest.raises(ValueError):
        ModelRegistry(FakeKeyVault()).credentials("gpt-2")


@pytest.mark.parametrize(
    "role, expected",
    [
        ("classifier", "gpt-4.1-mini"),
        ("title", "gpt-4.1-nano"),
        ("research", "gpt-4.1"),
        ("writer", "gpt-4.1"),
        ("assistant", "gpt-4.1"),
    ],
)
def test_model_for_role(role, expected):
    models = ModelAssignment(default="gpt-4.1", classifier="gpt-4.1-mini", title="gpt-4.1-nano")

    assert models.model_for(role) == expected


def test_roles_without_override_use_default():
    models = ModelAssignment(default="gpt-4.1-mini")

    assert models.model_for("classifier") == "gpt-4.1-mini"
    assert models.model_for("title") == "gpt-4.1-mini"


def test_local_credentials_come_from_environment():
    credentials = resolve_credentials(None, None)

    assert credentials == LocalModelSettings().credentials()
    assert isinstance(credentials, ModelCredentials)


def test_registry_requires_model_name():
    with pytest.raises(ValueError):
        resolve_credentials(ModelRegistry(FakeKeyVault()), None)
