"""Tests for authn_bootstrap.config module."""

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from authn_bootstrap.config import Config, build, resolve_certificate
from authn_bootstrap.errors import CertificateUnavailableError
from authn_bootstrap.settings import AuthnSettings
from authn_bootstrap.validation import AuthnMode


class TestBuild:
    """Test cases for building the configuration."""

    def test_build_k8s_config(self, k8s_settings, successful_read_file):
        config = build(k8s_settings, successful_read_file)

        assert config.authn_mode is AuthnMode.KUBERNETES
        assert config.url == "https://conjur.example.com/authn-k8s/cluster"
        assert config.account == "testAccount"
        assert config.username == "host/myapp"
        assert config.pod_name == "testPodName"
        assert config.pod_namespace == "testNameSpace"
        assert config.jwt_token_path is None
        assert config.container_mode == "init"
        assert config.client_cert_retry_count_limit == 7
        assert config.token_timeout == timedelta(minutes=6)
        assert config.ssl_certificate == b"samplecertificate"

    def test_build_jwt_config(self, jwt_settings, successful_read_file):
        config = build(jwt_settings, successful_read_file)

        assert config.authn_mode is AuthnMode.JWT
        assert config.jwt_token_path == Path("/tmp/token")
        assert config.username is None
        assert config.pod_name is None

    def test_defaults_for_absent_settings(self, k8s_settings_values):
        for name in (
            "CONJUR_CLIENT_CERT_RETRY_COUNT_LIMIT",
            "CONJUR_TOKEN_TIMEOUT",
            "CONTAINER_MODE",
        ):
            del k8s_settings_values[name]

        config = build(AuthnSettings(k8s_settings_values))

        assert config.client_cert_retry_count_limit == 10
        assert config.token_timeout == timedelta(minutes=6)
        assert config.conjur_version == "5"
        assert config.container_mode == ""
        assert config.client_cert_path == Path("/etc/conjur/ssl/client.pem")
        assert config.token_file_path == Path("/run/conjur/access-token")

    def test_paths_from_settings(self, k8s_settings_values):
        k8s_settings_values["CONJUR_CLIENT_CERT_PATH"] = "/etc/conjur/ssl/app-client.pem"
        k8s_settings_values["CONJUR_AUTHN_TOKEN_FILE"] = "/run/app/token"

        config = build(AuthnSettings(k8s_settings_values))

        assert config.client_cert_path == Path("/etc/conjur/ssl/app-client.pem")
        assert config.token_file_path == Path("/run/app/token")

    def test_certificate_read_from_file(self, k8s_settings_values):
        del k8s_settings_values["CONJUR_SSL_CERTIFICATE"]
        k8s_settings_values["CONJUR_CERT_FILE"] = "/etc/conjur/ca.pem"
        read_paths = []

        def read_file(path):
            read_paths.append(path)
            return b"-----BEGIN CERTIFICATE-----"

        config = build(AuthnSettings(k8s_settings_values), read_file)

        assert config.ssl_certificate == b"-----BEGIN CERTIFICATE-----"
        assert read_paths == ["/etc/conjur/ca.pem"]

    def test_certificate_file_on_disk(self, k8s_settings_values, tmp_path):
        cert_file = tmp_path / "ca.pem"
        cert_file.write_bytes(b"cert-from-disk")
        del k8s_settings_values["CONJUR_SSL_CERTIFICATE"]
        k8s_settings_values["CONJUR_CERT_FILE"] = str(cert_file)

        config = build(AuthnSettings(k8s_settings_values))

        assert config.ssl_certificate == b"cert-from-disk"

    def test_unreadable_certificate_is_fatal(
        self, k8s_settings_values, failing_read_file
    ):
        del k8s_settings_values["CONJUR_SSL_CERTIFICATE"]
        k8s_settings_values["CONJUR_CERT_FILE"] = "/missing/ca.pem"

        with pytest.raises(CertificateUnavailableError) as exc_info:
            build(AuthnSettings(k8s_settings_values), failing_read_file)

        assert "/missing/ca.pem" in str(exc_info.value)

    @pytest.mark.parametrize(
        "name", ["CONJUR_ACCOUNT", "CONJUR_AUTHN_LOGIN", "MY_POD_NAMESPACE"]
    )
    def test_missing_required_field_fails_hard(
        self, k8s_settings_values, successful_read_file, name
    ):
        """Test that no partially valid Config can be built."""
        del k8s_settings_values[name]

        with pytest.raises(ValidationError):
            build(AuthnSettings(k8s_settings_values), successful_read_file)

    def test_unrecognized_mode_fails_hard(
        self, k8s_settings_values, successful_read_file
    ):
        k8s_settings_values["CONJUR_AUTHN_URL"] = "https://conjur.example.com/authn"

        with pytest.raises(ValidationError) as exc_info:
            build(AuthnSettings(k8s_settings_values), successful_read_file)

        assert "not recognized" in str(exc_info.value)


class TestConfig:
    """Test cases for the Config model."""

    def test_config_immutability(self, k8s_settings, successful_read_file):
        config = build(k8s_settings, successful_read_file)

        with pytest.raises(ValidationError):
            config.account = "other"

    def test_jwt_config_requires_token_path(self):
        with pytest.raises(ValidationError) as exc_info:
            Config(
                authn_mode=AuthnMode.JWT,
                url="authn-jwt",
                account="acc",
                client_cert_retry_count_limit=0,
                token_timeout="1s",
                ssl_certificate=b"cert",
                client_cert_path="/tmp/client.pem",
                token_file_path="/tmp/token",
            )

        assert "jwt_token_path" in str(exc_info.value)

    def test_negative_retry_count_limit_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Config(
                authn_mode=AuthnMode.JWT,
                url="authn-jwt",
                account="acc",
                jwt_token_path="/tmp/jwt",
                client_cert_retry_count_limit=-1,
                token_timeout="1s",
                ssl_certificate=b"cert",
                client_cert_path="/tmp/client.pem",
                token_file_path="/tmp/token",
            )

        assert "greater_than_equal" in str(exc_info.value)

    def test_certificate_hidden_from_repr(self, k8s_settings, successful_read_file):
        config = build(k8s_settings, successful_read_file)

        assert "samplecertificate" not in repr(config)


class TestResolveCertificate:
    """Test cases for certificate resolution."""

    def test_inline_certificate_preferred(self, successful_read_file):
        settings = AuthnSettings(
            {"CONJUR_SSL_CERTIFICATE": "inline", "CONJUR_CERT_FILE": "/etc/ca.pem"}
        )

        assert resolve_certificate(settings, successful_read_file) == b"inline"
