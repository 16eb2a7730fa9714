"""Tests for the commit-mode validation gate."""

import os

import pytest

from file_namer.core.models import (
    CreateRequest,
    FileAlreadyExistsError,
    InvalidDirectoryError,
    InvalidExtensionError,
    MissingAuthorError,
    MissingRequiredFieldsError,
    TemplateParseError,
)
from file_namer.core.validation import (
    check_author,
    check_directory,
    check_extension,
    check_not_exists,
    find_missing_fields,
    is_safe_directory,
    validate_request,
    validate_request_async,
)


def make_request(save_dir, **overrides):
    data = {
        "save_dir": str(save_dir),
        "extension": ".txt",
        "template": "{category}_{project}_{version}",
        "values": {"category": "Design", "project": "Apollo"},
    }
    data.update(overrides)
    return CreateRequest.from_dict(data)


class TestAuthor:
    @pytest.mark.parametrize("author", ["", "   ", None])
    def test_missing_author(self, author):
        with pytest.raises(MissingAuthorError) as exc_info:
            check_author(author)
        assert exc_info.value.code == "MissingAuthor"

    def test_author_present(self):
        assert check_author("Jane") == "Jane"


class TestDirectory:
    """Test save directory checks."""

    @pytest.mark.parametrize("path", [
        "",
        "relative/dir",
        "/tmp/../etc",
        "/tmp/a/..",
    ])
    def test_unsafe_paths(self, path):
        assert is_safe_directory(path) is False

    def test_absolute_path_is_safe(self, save_dir):
        assert is_safe_directory(str(save_dir)) is True

    def test_traversal_rejected_even_if_target_exists(self, save_dir):
        sneaky = os.path.join(str(save_dir), "..", save_dir.name)

        with pytest.raises(InvalidDirectoryError):
            check_directory(sneaky)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(InvalidDirectoryError, match="No write permission"):
            check_directory(str(tmp_path / "missing"))

    def test_not_writable(self, save_dir, mocker):
        mocker.patch("file_namer.core.validation.os.access", return_value=False)

        with pytest.raises(InvalidDirectoryError):
            check_directory(str(save_dir))

    def test_returns_normalized_path(self, save_dir):
        assert check_directory(str(save_dir) + os.sep) == save_dir


class TestExtension:
    @pytest.mark.parametrize("extension", ["", ".t/xt", ".t:xt", "../x", None])
    def test_invalid(self, extension):
        with pytest.raises(InvalidExtensionError):
            check_extension(extension)

    @pytest.mark.parametrize("extension", [".txt", ".tar.gz", "md"])
    def test_valid(self, extension):
        assert check_extension(extension) == extension


class TestRequiredFields:
    """Test detection of empty user-supplied tokens."""

    def test_all_gaps_reported(self):
        missing = find_missing_fields("{client}_{project}_{date}", {"client": ""})
        assert missing == ["{client}", "{project}"]

    def test_derived_and_free_form_exempt(self):
        assert find_missing_fields("{date}_{author}_{free_text}_{freetext}_{version}", {}) == []

    def test_non_string_value_counts_as_missing(self):
        assert find_missing_fields("{client}", {"client": 42}) == ["{client}"]

    def test_error_message_lists_tokens(self, save_dir):
        request = make_request(save_dir, values={"category": "Design"})

        with pytest.raises(MissingRequiredFieldsError) as exc_info:
            validate_request(request, "Jane")

        assert exc_info.value.missing_tokens == ["{project}"]
        assert "{project}" in exc_info.value.message

    def test_values_missing_entirely(self):
        assert find_missing_fields("{client}_{date}", None) == ["{client}"]

    def test_malformed_template(self):
        with pytest.raises(TemplateParseError):
            find_missing_fields("{client", {})


class TestNotExists:
    def test_existing_file(self, save_dir):
        (save_dir / "a.txt").write_text("x")

        with pytest.raises(FileAlreadyExistsError, match="a.txt"):
            check_not_exists(save_dir, "a.txt")

    def test_free_name(self, save_dir):
        check_not_exists(save_dir, "a.txt")


class TestValidateRequest:
    """Test gate ordering."""

    def test_author_checked_first(self):
        request = make_request("relative", extension="", values={})

        with pytest.raises(MissingAuthorError):
            validate_request(request, "")

    def test_directory_before_extension(self):
        request = make_request("relative", extension="")

        with pytest.raises(InvalidDirectoryError):
            validate_request(request, "Jane")

    def test_extension_before_fields(self, save_dir):
        request = make_request(save_dir, extension="", values={})

        with pytest.raises(InvalidExtensionError):
            validate_request(request, "Jane")

    def test_valid_request(self, save_dir):
        assert validate_request(make_request(save_dir), "Jane") == save_dir

    @pytest.mark.asyncio
    async def test_async_variant(self, save_dir):
        assert await validate_request_async(make_request(save_dir), "Jane") == save_dir
