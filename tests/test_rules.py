"""Tests for formation.validation.rules — the built-in check catalog."""

import pytest

from formation.http.forms import FileUpload
from formation.validation.rules import (
    check_length,
    check_match,
    custom,
    in_list,
    in_range,
    is_all_chars,
    is_alnum,
    is_alpha,
    is_boolean,
    is_date,
    is_decimal,
    is_email,
    is_ext,
    is_file,
    is_ip,
    is_numeric,
    is_phone,
    is_time,
    is_website,
    max_filesize,
    min_filesize,
    not_empty,
)

_PUNCTUATION = "~!@#$%^&*()_+-=][}{\\|';\":.,></?"


def _upload(name: str = "photo.png", size: int = 100, error: int = 0, tmp_path: str = "/tmp/php1") -> FileUpload:
    return FileUpload(name=name, tmp_path=tmp_path, size=size, error=error)


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


class TestNotEmpty:
    def test_zero_string_is_not_empty(self) -> None:
        assert not_empty("0")

    def test_number(self) -> None:
        assert not_empty(12345)

    def test_text(self) -> None:
        assert not_empty("foo")

    def test_empty_string(self) -> None:
        assert not not_empty("")

    def test_none(self) -> None:
        assert not not_empty(None)

    def test_lists(self) -> None:
        assert not_empty(["red"])
        assert not not_empty([])


# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------


class TestCharacterClasses:
    def test_all_chars(self) -> None:
        assert is_all_chars("abcdefghijklmnopqrstuvwxyz")
        assert is_all_chars("1234567890")
        assert is_all_chars(_PUNCTUATION)
        assert is_all_chars("0")

    def test_all_chars_rejects_non_ascii(self) -> None:
        assert not is_all_chars("naïve")

    def test_alnum(self) -> None:
        assert is_alnum("abcdefghijklmnopqrstuvwxyz")
        assert is_alnum("1234567890")
        assert not is_alnum(_PUNCTUATION)

    def test_alpha(self) -> None:
        assert is_alpha("abcdefghijklmnopqrstuvwxyz")
        assert is_alpha("Mary Jane")
        assert not is_alpha("1234567890")
        assert not is_alpha(_PUNCTUATION)

    def test_alpha_with_exceptions(self) -> None:
        assert not is_alpha("O'Brien-Smith")
        assert is_alpha("O'Brien-Smith", ["'", "-"])

    def test_exceptions_are_literal(self) -> None:
        # "]" and "^" would break an unescaped character class
        assert is_alnum("a]b^c", "]^")
        assert not is_alnum("a]b^c", "]")

    def test_numeric(self) -> None:
        assert is_numeric(12345)
        assert is_numeric("67890")
        assert is_numeric("1337.00", ".")
        assert not is_numeric("1337.00")
        assert not is_numeric("abcdef")

    def test_empty_string_fails(self) -> None:
        assert not is_alpha("")
        assert not is_numeric("")


# ---------------------------------------------------------------------------
# Length and comparison
# ---------------------------------------------------------------------------


class TestCheckLength:
    def test_too_long(self) -> None:
        assert not check_length("abcdefg", 5, 1)

    def test_within(self) -> None:
        assert check_length("abc", 5, 1)

    def test_bounds_inclusive(self) -> None:
        assert check_length("abcde", 5, 5)

    def test_too_short(self) -> None:
        assert not check_length("", 5, 1)

    def test_counts_characters_not_bytes(self) -> None:
        assert check_length("héllo", 5, 5)
        assert check_length("日本語", 3, 3)

    def test_sentence(self) -> None:
        assert check_length("Lorem ipsum dolor sit amet.", 30, 1)
        assert not check_length("Lorem ipsum dolor sit amet, consectetur adipiscing elit.", 30)


class TestCheckMatch:
    def test_loose(self) -> None:
        assert check_match(1, 1)
        assert check_match(1, "1")

    def test_strict(self) -> None:
        assert not check_match(1, "1", True)
        assert check_match("secret", "secret", True)

    def test_mismatch(self) -> None:
        assert not check_match("secret", "Secret")


class TestCustom:
    def test_match(self) -> None:
        assert custom("foo", r"(foo|bar)")

    def test_no_match(self) -> None:
        assert not custom("baz", r"(foo|bar)")

    def test_must_match_whole_value(self) -> None:
        assert not custom("food", r"(foo|bar)")

    def test_empty_expression_fails(self) -> None:
        assert not custom("foo", "")


class TestInList:
    def test_no_list(self) -> None:
        assert not in_list("foo")

    def test_absent(self) -> None:
        assert not in_list("foo", ["bar"])

    def test_present(self) -> None:
        assert in_list("foo", ["foo", "bar"])

    def test_compares_type(self) -> None:
        assert not in_list(1, ["1"])
        assert in_list(1, [1, 2])


class TestInRange:
    def test_within(self) -> None:
        assert in_range(27, 30, 1)

    def test_above(self) -> None:
        assert not in_range(56, 30)

    def test_inclusive(self) -> None:
        assert in_range(30, 30, 1)
        assert in_range(1, 30, 1)

    def test_numeric_string(self) -> None:
        assert in_range("27", 30, 1)
        assert in_range("2.5", 3, 2)

    def test_non_numeric_fails(self) -> None:
        assert not in_range("abc", 30)
        assert not in_range(None, 30)


class TestIsBoolean:
    @pytest.mark.parametrize("value", [1, 0, "1", "0", True, False])
    def test_accepted(self, value: object) -> None:
        assert is_boolean(value)

    @pytest.mark.parametrize("value", [2, "true", "yes", "", None, 1.0])
    def test_rejected(self, value: object) -> None:
        assert not is_boolean(value)


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------


class TestIsEmail:
    def test_valid(self) -> None:
        assert is_email("foo@bar.com")
        assert is_email("test@domain.co.uk")
        assert is_email("test+plus@domain.me")
        assert is_email("First.Last@Example.ORG")

    def test_invalid(self) -> None:
        assert not is_email("not-an-email")
        assert not is_email("foobar")
        assert not is_email("user@")
        assert not is_email("")


class TestIsWebsite:
    @pytest.mark.parametrize(
        "url",
        [
            "http://milesj.me",
            "http://www.milesj.me",
            "http://www.milesj.me/code/formation",
            "http://sub.sub.milesj.me/some/path.html",
            "http://sub.sub.milesj.co.uk/some/path.html?query=param",
            "https://example.com",
            "ftp://files.example.org/pub",
        ],
    )
    def test_valid(self, url: str) -> None:
        assert is_website(url)

    def test_invalid(self) -> None:
        assert not is_website("milesj.me")
        assert not is_website("mailto:foo@bar.com")
        assert not is_website("http://localhost")


class TestIsIp:
    def test_valid(self) -> None:
        assert is_ip("127.0.0.1")
        assert is_ip("99.199.185.57")

    def test_out_of_range_octet(self) -> None:
        assert not is_ip("71.36.775.181")

    def test_requires_dots(self) -> None:
        assert not is_ip("127x0x0x1")


class TestIsPhone:
    def test_valid(self) -> None:
        assert is_phone("(123) 456-7890")
        assert is_phone("(123) 4567890")

    def test_invalid(self) -> None:
        assert not is_phone("456-7890")
        assert not is_phone("123-456-7890")


class TestIsDate:
    @pytest.mark.parametrize(
        "value",
        ["02/26/1988", "2/26/88", "1988/02/26", "1988-02-26", "February 26th, 1988", "february 26th"],
    )
    def test_valid(self, value: str) -> None:
        assert is_date(value)

    @pytest.mark.parametrize("value", ["26/02/1988", "02/30/1988", "foobar", ""])
    def test_invalid(self, value: str) -> None:
        assert not is_date(value)

    def test_leap_day_without_year(self) -> None:
        assert is_date("February 29")


class TestIsTime:
    @pytest.mark.parametrize("value", ["12:12:12 PM", "05:10 AM", "5:10 am", "23:11", "23:11:59"])
    def test_valid(self, value: str) -> None:
        assert is_time(value)

    @pytest.mark.parametrize("value", ["25:00", "13:00 PM", "noon", ""])
    def test_invalid(self, value: str) -> None:
        assert not is_time(value)


class TestIsDecimal:
    def test_two_places(self) -> None:
        assert is_decimal("10.15")
        assert is_decimal("-10.15")

    def test_wrong_places(self) -> None:
        assert not is_decimal("12.1")

    def test_custom_places(self) -> None:
        assert is_decimal("12.100", 3)

    def test_not_a_number(self) -> None:
        assert not is_decimal("foobar")


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestIsFile:
    def test_uploaded(self) -> None:
        assert is_file(_upload())

    def test_no_temp_path(self) -> None:
        assert not is_file(_upload(tmp_path=""))

    def test_error_code(self) -> None:
        assert not is_file(_upload(error=3))

    def test_not_an_upload(self) -> None:
        assert not is_file("photo.png")

    def test_descriptor_mapping(self) -> None:
        assert is_file({"name": "a.png", "tmp_path": "/tmp/x", "size": 10, "error": 0})
        assert is_file({"name": "a.png", "tmp_name": "/tmp/x", "size": "10", "error": "0"})
        assert not is_file({"name": "a.png", "tmp_name": "", "size": 0, "error": 4})

    def test_plain_mapping_is_not_a_file(self) -> None:
        assert not is_file({"name": "a.png"})


class TestIsExt:
    def test_default_extensions(self) -> None:
        assert is_ext("file.jpg")
        assert not is_ext("file.zip")

    def test_upload_name(self) -> None:
        assert is_ext(_upload(name="holiday.final.JPEG"))

    def test_custom_extensions(self) -> None:
        assert is_ext("file.txt", ["txt"])
        assert not is_ext("file.jpg", ["txt"])

    def test_no_extension(self) -> None:
        assert not is_ext("README")


class TestFilesize:
    def test_min_is_strict(self) -> None:
        assert min_filesize(_upload(size=100), 50)
        assert not min_filesize(_upload(size=100), 100)

    def test_max_default_five_mib(self) -> None:
        assert max_filesize(_upload(size=5 * 1024 * 1024))
        assert not max_filesize(_upload(size=5 * 1024 * 1024 + 1))

    def test_max_custom(self) -> None:
        assert not max_filesize(_upload(size=100), 99)
        assert max_filesize(_upload(size=100), 100)

    def test_invalid_size_uses_default(self) -> None:
        assert max_filesize(_upload(size=100), "lots")
        assert min_filesize(_upload(size=1), None)

    def test_requires_upload(self) -> None:
        assert not max_filesize(_upload(tmp_path=""))
        assert not min_filesize("photo.png")

    def test_descriptor_mapping(self) -> None:
        descriptor = {"name": "a.png", "tmp_path": "/tmp/x", "size": 10, "error": 0}
        assert max_filesize(descriptor, 10)
        assert min_filesize(descriptor, 9)
        assert is_ext(descriptor)
        assert not_empty(descriptor)
