"""Tests for secret redaction utility."""


class TestRedactForLogging:

    def test_redacts_sensitive_keys(self):
        from src.utils.redaction import redact_for_logging

        data = {"api_key": "key123", "endpoint": "https://partner.example/edi", "password": "pw"}
        result = redact_for_logging(data)
        assert result["api_key"] == "***REDACTED***"
        assert result["password"] == "***REDACTED***"
        assert result["endpoint"] == "https://partner.example/edi"

    def test_preserves_non_sensitive(self):
        from src.utils.redaction import redact_for_logging

        data = {"method": "API", "endpoint": "van.example", "status": "sent"}
        assert redact_for_logging(data) == data

    def test_handles_nested_dict(self):
        from src.utils.redaction import redact_for_logging

        data = {"odoo": {"session_id": "abc", "db": "odoo"}}
        result = redact_for_logging(data)
        assert result["odoo"]["session_id"] == "***REDACTED***"
        assert result["odoo"]["db"] == "odoo"

    def test_handles_list_of_dicts(self):
        from src.utils.redaction import redact_for_logging

        data = {"partners": [{"apiKey": "leaked", "name": "Acme"}]}
        result = redact_for_logging(data)
        assert result["partners"][0]["apiKey"] == "***REDACTED***"
        assert result["partners"][0]["name"] == "Acme"

    def test_does_not_mutate_input(self):
        from src.utils.redaction import redact_for_logging

        data = {"password": "pw"}
        redact_for_logging(data)
        assert data == {"password": "pw"}

    def test_custom_sensitive_keys(self):
        from src.utils.redaction import redact_for_logging

        data = {"login": "admin", "name": "test"}
        result = redact_for_logging(data, sensitive_patterns=frozenset({"login"}))
        assert result["login"] == "***REDACTED***"
        assert result["name"] == "test"

    def test_case_insensitive_matching(self):
        from src.utils.redaction import redact_for_logging

        data = {"ODOO_PASSWORD": "pw", "Authorization": "Bearer x", "Name": "FloorLink"}
        result = redact_for_logging(data)
        assert result["ODOO_PASSWORD"] == "***REDACTED***"
        assert result["Authorization"] == "***REDACTED***"
        assert result["Name"] == "FloorLink"

    def test_container_keys_are_redacted_whole(self):
        from src.utils.redaction import redact_for_logging

        data = {"credentials": {"username": "edi"}, "headers": ["x"], "method": "AS2"}
        result = redact_for_logging(data)
        assert result["credentials"] == "***REDACTED***"
        assert result["headers"] == "***REDACTED***"
        assert result["method"] == "AS2"


class TestSanitizeErrorMessage:

    def test_none_passes_through(self):
        from src.utils.redaction import sanitize_error_message

        assert sanitize_error_message(None) is None

    def test_key_value(self):
        from src.utils.redaction import sanitize_error_message

        result = sanitize_error_message("Failed with password=hunter2 and api_key=xyz")
        assert "hunter2" not in result
        assert "xyz" not in result

    def test_bearer_token(self):
        from src.utils.redaction import sanitize_error_message

        result = sanitize_error_message("Request failed: Authorization: Bearer abc.def.ghi")
        assert "abc.def.ghi" not in result

    def test_json_style(self):
        from src.utils.redaction import sanitize_error_message

        result = sanitize_error_message('Odoo said: {"session_id": "s3cr3t", "db": "odoo"}')
        assert "s3cr3t" not in result
        assert '"db": "odoo"' in result

    def test_quoted_values(self):
        from src.utils.redaction import sanitize_error_message

        result = sanitize_error_message('Failed: token = "abc 123" in request')
        assert "abc 123" not in result

    def test_plain_message_unchanged(self):
        from src.utils.redaction import sanitize_error_message

        assert sanitize_error_message("API error: 500 Internal Server Error") == (
            "API error: 500 Internal Server Error"
        )

    def test_length_cap(self):
        from src.utils.redaction import sanitize_error_message

        result = sanitize_error_message("x" * 5000, max_length=200)
        assert len(result) == 200
        assert result.endswith("...")
