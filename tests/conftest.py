"""Shared pytest fixtures and configuration."""

import pytest

from authn_bootstrap.settings import AuthnSettings


@pytest.fixture
def k8s_settings_values():
    """Complete settings for the Kubernetes authenticator."""
    return {
        "CONJUR_AUTHN_URL": "https://conjur.example.com/authn-k8s/cluster",
        "CONJUR_ACCOUNT": "testAccount",
        "CONJUR_AUTHN_LOGIN": "host/myapp",
        "MY_POD_NAME": "testPodName",
        "MY_POD_NAMESPACE": "testNameSpace",
        "CONJUR_CLIENT_CERT_RETRY_COUNT_LIMIT": "7",
        "CONJUR_TOKEN_TIMEOUT": "6m0s",
        "CONTAINER_MODE": "init",
        "CONJUR_SSL_CERTIFICATE": "samplecertificate",
    }


@pytest.fixture
def jwt_settings_values():
    """Complete settings for the JWT authenticator."""
    return {
        "CONJUR_AUTHN_URL": "https://conjur.example.com/authn-jwt/service",
        "CONJUR_ACCOUNT": "testAccount",
        "JWT_TOKEN_PATH": "/tmp/token",
        "CONJUR_CLIENT_CERT_RETRY_COUNT_LIMIT": "7",
        "CONJUR_TOKEN_TIMEOUT": "6m0s",
        "CONTAINER_MODE": "init",
        "CONJUR_SSL_CERTIFICATE": "samplecertificate",
    }


@pytest.fixture
def k8s_settings(k8s_settings_values):
    return AuthnSettings(k8s_settings_values)


@pytest.fixture
def jwt_settings(jwt_settings_values):
    return AuthnSettings(jwt_settings_values)


@pytest.fixture
def successful_read_file():
    """File reader that always succeeds."""

    def read_file(path):
        return b""

    return read_file


@pytest.fixture
def failing_read_file():
    """File reader that always fails as if the file was missing."""

    def read_file(path):
        raise FileNotFoundError(2, "No such file or directory", path)

    return read_file
