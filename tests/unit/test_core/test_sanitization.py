"""Unit tests for input sanitization."""
import pytest

from classvote.core.sanitization import (
    sanitize_free_text,
    sanitize_option_text,
    sanitize_text,
    sanitize_vote_title,
    validate_admin_code,
    validate_admin_login_code,
)


@pytest.mark.unit
class TestSanitizeText:

    def test_strips_html_tags(self):
        assert sanitize_text("<b>文化祭</b>の出し物") == "文化祭の出し物"

    def test_normalizes_whitespace(self):
        assert sanitize_text("  a \n\t b  ") == "a b"

    def test_rejects_leftover_angle_brackets(self):
        with pytest.raises(ValueError):
            sanitize_text("a < b")

    def test_enforces_max_length(self):
        with pytest.raises(ValueError, match="maximum length"):
            sanitize_text("x" * 11, max_length=10)

    def test_rejects_non_string(self):
        with pytest.raises(ValueError):
            sanitize_text(123)


@pytest.mark.unit
class TestVoteFields:

    def test_title_minimum_length(self):
        with pytest.raises(ValueError, match="at least 3"):
            sanitize_vote_title("ab")

    def test_title_maximum_length(self):
        with pytest.raises(ValueError):
            sanitize_vote_title("x" * 101)

    def test_blank_option_is_empty_string(self):
        assert sanitize_option_text("   ") == ""

    def test_free_text_keeps_inner_formatting(self):
        """Answers are shown verbatim; only the ends are trimmed."""
        assert sanitize_free_text("  1 < 2\n\nだと思う ") == "1 < 2\n\nだと思う"

    def test_free_text_limit(self):
        assert sanitize_free_text("あ" * 500) == "あ" * 500
        with pytest.raises(ValueError):
            sanitize_free_text("あ" * 501)


@pytest.mark.unit
class TestAdminCodes:

    @pytest.mark.parametrize("code", ["0000", "1234", "9999"])
    def test_valid_admin_code(self, code):
        assert validate_admin_code(code) == code

    @pytest.mark.parametrize("code", ["123", "12345", "abcd", "12 4", ""])
    def test_invalid_admin_code(self, code):
        with pytest.raises(ValueError):
            validate_admin_code(code)

    def test_login_accepts_master_key_shape(self):
        assert validate_admin_login_code("20261019") == "20261019"
        assert validate_admin_login_code("1234") == "1234"

    @pytest.mark.parametrize("code", ["123456", "2026101", "2026-10-19"])
    def test_login_rejects_other_lengths(self, code):
        with pytest.raises(ValueError):
            validate_admin_login_code(code)
