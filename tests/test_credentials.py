"""Tests for fog_credentials resolution."""

import io

import pytest

from attachstore.core.exceptions import ConfigurationError
from attachstore.storage.credentials import find_credentials, parse_credentials


CREDENTIALS_YAML = """\
production:
  provider: AWS
  aws_access_key_id: "{{ env['TEST_AWS_KEY'] }}"
  aws_secret_access_key: prod-secret
development:
  provider: AWS
  aws_access_key_id: dev-key
  aws_secret_access_key: dev-secret
"""


class TestParseCredentialsMapping:
    """Tests for inline credential mappings."""

    def test_mapping_without_environment_section(self):
        """Test a mapping with no section for the environment."""
        creds = {"aws_access_key_id": "key", "aws_secret_access_key": "secret"}

        assert parse_credentials(creds, "production") == creds

    def test_mapping_without_environment(self):
        """Test a mapping when no environment is set."""
        creds = {"production": {"aws_access_key_id": "key"}}

        assert parse_credentials(creds) == creds

    def test_mapping_with_environment_section(self):
        """Test that the environment section is selected."""
        creds = {
            "production": {"aws_access_key_id": "prod"},
            "development": {"aws_access_key_id": "dev"},
        }

        assert parse_credentials(creds, "development") == {"aws_access_key_id": "dev"}

    def test_non_mapping_environment_value_is_ignored(self):
        """Test that a scalar under the environment key is not a section."""
        creds = {"production": "not-a-section", "region": "eu-west-1"}

        assert parse_credentials(creds, "production") == creds

    def test_keys_are_strings(self):
        """Test that resolved keys are strings."""
        assert parse_credentials({1: "one"}) == {"1": "one"}

    def test_returns_copy(self):
        """Test that the caller's mapping is not modified."""
        creds = {"aws_access_key_id": "key"}
        result = parse_credentials(creds)
        result["aws_access_key_id"] = "changed"

        assert creds["aws_access_key_id"] == "key"


class TestParseCredentialsFile:
    """Tests for YAML credential files."""

    @pytest.fixture
    def credentials_file(self, tmp_path, monkeypatch):
        """Write a templated credentials file."""
        monkeypatch.setenv("TEST_AWS_KEY", "from-env")
        path = tmp_path / "s3.yml"
        path.write_text(CREDENTIALS_YAML)
        return path

    def test_path_object(self, credentials_file):
        """Test loading credentials from a Path."""
        creds = parse_credentials(credentials_file, "production")

        assert creds == {
            "provider": "AWS",
            "aws_access_key_id": "from-env",
            "aws_secret_access_key": "prod-secret",
        }

    def test_path_string(self, credentials_file):
        """Test loading credentials from a path string."""
        creds = parse_credentials(str(credentials_file), "development")

        assert creds["aws_access_key_id"] == "dev-key"

    def test_open_text_file(self, credentials_file):
        """Test loading credentials from an open text file."""
        with open(credentials_file) as f:
            creds = parse_credentials(f, "production")

        assert creds["aws_access_key_id"] == "from-env"

    def test_open_binary_file(self, credentials_file):
        """Test loading credentials from an open binary file."""
        with open(credentials_file, "rb") as f:
            creds = parse_credentials(f, "development")

        assert creds["aws_secret_access_key"] == "dev-secret"

    def test_unknown_environment_returns_whole_document(self, credentials_file):
        """Test that an unknown environment returns the whole document."""
        creds = parse_credentials(credentials_file, "staging")

        assert set(creds) == {"production", "development"}

    def test_file_like_object(self):
        """Test loading credentials from a file-like object."""
        creds = parse_credentials(io.StringIO("region: eu-west-1\n"))

        assert creds == {"region": "eu-west-1"}

    def test_file_must_contain_mapping(self):
        """Test that a file without a mapping is rejected."""
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            parse_credentials(io.StringIO("- a\n- b\n"))

    def test_undefined_template_variable_fails(self):
        """Test that undefined template variables fail."""
        import jinja2

        with pytest.raises(jinja2.UndefinedError):
            parse_credentials(io.StringIO("key: {{ missing }}\n"))


class TestInvalidCredentials:
    """Tests for unsupported credential values."""

    @pytest.mark.parametrize("value", [42, 4.2, None, ["a", "b"], ("a",), True])
    def test_rejects_other_types(self, value):
        """Test that unsupported credential types are rejected."""
        with pytest.raises(ConfigurationError, match="not a path, file, or mapping"):
            parse_credentials(value)

    def test_find_credentials_returns_mapping_unchanged(self):
        """Test that find_credentials passes mappings through."""
        creds = {"aws_access_key_id": "key"}
        assert find_credentials(creds) is creds
