"""Tests for collection:name identifier parsing."""

import pytest

from iconcache.shared.identifiers import IconIdentifier, parse_identifier, split_valid


class TestParseIdentifier:

    def test_valid(self) -> None:
        parsed = parse_identifier("lucide:home")
        assert parsed == IconIdentifier("lucide", "home")
        assert parsed.collection == "lucide"
        assert parsed.name == "home"

    def test_str_gives_back_identifier(self) -> None:
        assert str(parse_identifier("simple-icons:github")) == "simple-icons:github"

    @pytest.mark.parametrize(
        "value",
        ["bogus-identifier", "a:b:c", ":home", "lucide:", ":", ""],
    )
    def test_malformed(self, value: str) -> None:
        assert parse_identifier(value) is None


class TestSplitValid:

    def test_partitions_and_keeps_order(self) -> None:
        valid, malformed = split_valid(["lucide:home", "nope", "simple-icons:github", "x:y:z"])
        assert [str(v) for v in valid] == ["lucide:home", "simple-icons:github"]
        assert malformed == ["nope", "x:y:z"]

    def test_drops_duplicates(self) -> None:
        valid, malformed = split_valid(["lucide:home", "bad", "lucide:home", "bad"])
        assert [str(v) for v in valid] == ["lucide:home"]
        assert malformed == ["bad"]
