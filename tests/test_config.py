import pytest
from pydantic import ValidationError

from outreach_cms.core.exceptions import ConfigurationError
from tests.conftest import make_settings

NO_STORAGE = {
    "AZURE_STORAGE_CONNECTION_STRING": None,
    "AZURE_STORAGE_ACCOUNT_NAME": None,
    "AZURE_STORAGE_ACCOUNT_KEY": None,
    "AZURE_STORAGE_PUBLIC_BASE_URL": None,
}


def storage_settings(**overrides):
    values = dict(NO_STORAGE)
    values.update(overrides)
    return make_settings(**values)


def test_storage_from_connection_string():
    config = storage_settings(
        AZURE_STORAGE_CONNECTION_STRING=(
            "DefaultEndpointsProtocol=https;AccountName=acme;"
            "AccountKey=c2VjcmV0;EndpointSuffix=core.windows.net"
        ),
        AZURE_STORAGE_ACCOUNT_NAME="ignored",
        AZURE_STORAGE_ACCOUNT_KEY="ignored",
    )
    storage = config.resolve_storage()
    assert storage.source == "connection_string"
    assert storage.account_name == "acme"
    assert storage.account_key == "c2VjcmV0"
    assert storage.blob_endpoint == "https://acme.blob.core.windows.net"
    assert storage.public_base_url == "https://acme.blob.core.windows.net/site-media"


def test_storage_from_account_name_and_key():
    config = storage_settings(AZURE_STORAGE_ACCOUNT_NAME="acme", AZURE_STORAGE_ACCOUNT_KEY="key")
    storage = config.resolve_storage()
    assert storage.source == "account_key"
    assert storage.blob_endpoint == "https://acme.blob.core.windows.net"


def test_public_base_url_override():
    config = storage_settings(
        AZURE_STORAGE_ACCOUNT_NAME="acme",
        AZURE_STORAGE_ACCOUNT_KEY="key",
        AZURE_STORAGE_PUBLIC_BASE_URL="https://cdn.example.org/media/",
    )
    assert config.resolve_storage().public_base_url == "https://cdn.example.org/media"


def test_staging_container_defaults_to_a_separate_private_container():
    storage = storage_settings(AZURE_STORAGE_ACCOUNT_NAME="acme", AZURE_STORAGE_ACCOUNT_KEY="key").resolve_storage()
    assert storage.staging_container == "site-media-staging"
    assert storage.staging_container != storage.container


def test_staging_container_must_differ_from_public_container():
    config = storage_settings(
        AZURE_STORAGE_ACCOUNT_NAME="acme",
        AZURE_STORAGE_ACCOUNT_KEY="key",
        AZURE_STORAGE_STAGING_CONTAINER="site-media",
    )
    with pytest.raises(ConfigurationError) as excinfo:
        config.resolve_storage()
    assert "AZURE_STORAGE_STAGING_CONTAINER" in excinfo.value.message


def test_missing_storage_configuration_fails_fast():
    with pytest.raises(ConfigurationError) as excinfo:
        storage_settings().resolve_storage()
    assert "AZURE_STORAGE_CONNECTION_STRING" in excinfo.value.message


def test_incomplete_connection_string_is_rejected():
    config = storage_settings(AZURE_STORAGE_CONNECTION_STRING="AccountName=acme")
    with pytest.raises(ConfigurationError):
        config.resolve_storage()


def test_bcrypt_cost_below_minimum_is_rejected():
    with pytest.raises(ValidationError):
        make_settings(BCRYPT_ROUNDS=10)


def test_token_lifetime_must_be_finite_and_positive():
    with pytest.raises(ValidationError):
        make_settings(ACCESS_TOKEN_EXPIRE_MINUTES=0)


def test_allowed_origins_list():
    config = make_settings(ALLOWED_ORIGINS="https://a.example, https://b.example,")
    assert config.allowed_origins == ["https://a.example", "https://b.example"]
