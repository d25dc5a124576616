"""Tests for secret injection."""
from unittest.mock import MagicMock

import pytest

from shipcat.errors import SecretNotFound
from shipcat.manifest.schema import IN_VAULT, Manifest
from shipcat.pipeline.secrets import inject_secrets


def test_inject_secrets(secret_store):
    """Test that placeholders are read from region/service/key."""
    store = secret_store({"dev-uk/fake-ask/API_KEY": "secret123"})
    mf = Manifest(name="fake-ask", env={"API_KEY": IN_VAULT, "PLAIN": "value"})

    filled = inject_secrets(mf, store, "dev-uk")

    assert store.reads == ["dev-uk/fake-ask/API_KEY"]
    assert filled.env == {"API_KEY": "secret123", "PLAIN": "value"}
    assert filled._decoded_secrets == {"dev-uk/fake-ask/API_KEY": "secret123"}
    # input untouched
    assert mf.env["API_KEY"] == IN_VAULT
    assert mf._decoded_secrets == {}


@pytest.mark.parametrize("value", ["in_vault", "IN_VAULT ", "IN-VAULT", "vault:IN_VAULT", ""])
def test_only_exact_sentinel_is_replaced(value):
    store = MagicMock()
    mf = Manifest(name="fake-ask", env={"KEY": value})
    filled = inject_secrets(mf, store, "dev-uk")
    store.read.assert_not_called()
    assert filled.env["KEY"] == value


def test_vault_options_change_scope(secret_store):
    """Test that services can borrow another service's secrets."""
    store = secret_store({
        "staging-uk/fake-storage/DB_PASSWORD": "pw",
        "dev-uk/fake-storage/TOKEN": "tok",
    })
    other_region = Manifest(name="fake-ask", env={"DB_PASSWORD": IN_VAULT},
                            vault={"name": "fake-storage", "region": "staging-uk"})
    assert inject_secrets(other_region, store, "dev-uk").env["DB_PASSWORD"] == "pw"

    same_region = Manifest(name="fake-ask", env={"TOKEN": IN_VAULT}, vault={"name": "fake-storage"})
    assert inject_secrets(same_region, store, "dev-uk").env["TOKEN"] == "tok"


def test_missing_secret_aborts(secret_store):
    store = secret_store({"dev-uk/fake-ask/A": "a"})
    mf = Manifest(name="fake-ask", env={"A": IN_VAULT, "B": IN_VAULT})
    with pytest.raises(SecretNotFound):
        inject_secrets(mf, store, "dev-uk")
    assert mf.env == {"A": IN_VAULT, "B": IN_VAULT}
