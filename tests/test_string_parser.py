"""Tests for the HED string tokenizer and group resolver."""

import pytest

from hedcheck.validation.issues import generate_issue
from hedcheck.validation.string_parser import (
    ParsedHedGroup,
    ParsedHedTag,
    format_hed_tag,
    hed_string_is_a_group,
    parse_hed_string,
    split_hed_string,
)

REACH_STRING = (
    "/Action/Reach/To touch,"
    "(/Attribute/Object side/Left,/Participant/Effect/Body part/Arm),"
    "/Attribute/Location/Screen/Top/70 px,"
    "/Attribute/Location/Screen/Left/23 px"
)


class TestFormatHedTag:
    """Tests for tag formatting."""

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("Event/Label/Test", "event/label/test"),
            ("/Event/Label/Test", "event/label/test"),
            ('"/Event/Duration/3 ms/"', "event/duration/3 ms"),
            ("  Item/Object/Car\n", "item/object/car"),
            ("Event/Description/Two\nlines", "event/description/two lines"),
        ],
    )
    def test_format(self, tag, expected):
        """Quotes, slashes and whitespace are trimmed and the tag lowercased."""
        assert format_hed_tag(tag) == expected

    @pytest.mark.parametrize(
        "tag", ['"/Event/Label/Test/"', "//Item/Object//", ' "Attribute/Color/Red" ']
    )
    def test_format_is_idempotent(self, tag):
        """Formatting a formatted tag changes nothing."""
        formatted = format_hed_tag(tag)
        assert format_hed_tag(formatted) == formatted

    def test_parsed_tag_forms(self):
        """A parsed tag keeps its original text next to both normalized forms."""
        tag = ParsedHedTag("/Item/Object/Vehicle/Train", (0, 26))
        assert tag.original_tag == "/Item/Object/Vehicle/Train"
        assert tag.canonical_tag == "Item/Object/Vehicle/Train"
        assert tag.formatted_tag == "item/object/vehicle/train"


class TestSplitHedString:
    """Tests for the tokenizer."""

    def test_tags_groups_and_tildes(self):
        """Groups are single tokens and tildes are tokens of their own."""
        hed_string = "Event/Label/Test, (Item/Object/Car, Attribute/Color/Red) ~ Action/Reach"
        tokens, issues = split_hed_string(hed_string)

        assert issues == []
        assert [token.original_tag for token in tokens] == [
            "Event/Label/Test",
            "(Item/Object/Car, Attribute/Color/Red)",
            "~",
            "Action/Reach",
        ]
        assert tokens[0].bounds == (0, 16)
        assert tokens[1].bounds == (18, 56)
        assert tokens[2].bounds == (57, 58)
        assert tokens[3].bounds == (59, 71)

    def test_bounds_index_the_original_string(self):
        """Token bounds slice the token back out of the string."""
        tokens, _ = split_hed_string(REACH_STRING)
        for token in tokens:
            start, end = token.bounds
            assert REACH_STRING[start:end] == token.original_tag

    def test_double_quotes_are_elided(self):
        """Double quotes never appear in tokens."""
        tokens, issues = split_hed_string('"Event/Label/Test","Item/Object/Car"')
        assert issues == []
        assert [token.original_tag for token in tokens] == ["Event/Label/Test", "Item/Object/Car"]

    def test_commas_inside_groups_do_not_split(self):
        """Only delimiters outside any group end a token."""
        tokens, _ = split_hed_string("A,(B,(C,D)),E {F,G}")
        assert [token.original_tag for token in tokens] == ["A", "(B,(C,D))", "E {F,G}"]

    def test_subrange(self):
        """Scanning part of a string reports absolute offsets."""
        hed_string = "X,(Item/Object/Car,Action/Reach)"
        tokens, _ = split_hed_string(hed_string, 3, len(hed_string) - 1)
        assert [token.original_tag for token in tokens] == ["Item/Object/Car", "Action/Reach"]
        assert tokens[0].bounds == (3, 18)

    @pytest.mark.parametrize("character", ["[", "]"])
    def test_brackets_are_invalid(self, character):
        """Square brackets are reported and close the current token."""
        hed_string = f"/Attribute/Object side/Left,/Participant/Effect{character}/Body part/Arm"
        tokens, issues = split_hed_string(hed_string)

        assert issues == [
            generate_issue("invalidCharacter", character=character, index=47, string=hed_string)
        ]
        assert [token.original_tag for token in tokens] == [
            "/Attribute/Object side/Left",
            "/Participant/Effect",
            "/Body part/Arm",
        ]

    def test_leading_delimiter(self):
        """A delimiter with nothing before it is an extra delimiter."""
        _, issues = split_hed_string(",Event/Label/Test")
        assert issues == [
            generate_issue("extraDelimiter", character=",", index=0, string=",Event/Label/Test")
        ]

    def test_trailing_delimiters(self):
        """A dangling delimiter at the end of the string is reported."""
        hed_string = "Event/Label/Test,~"
        _, issues = split_hed_string(hed_string)
        assert issues == [
            generate_issue("extraDelimiter", character="~", index=17, string=hed_string),
            generate_issue("extraDelimiter", character=",", index=16, string=hed_string),
        ]

    def test_double_comma(self):
        """Two commas in a row report the second one."""
        hed_string = "Event/Label/Test,,Item/Object/Car"
        tokens, issues = split_hed_string(hed_string)
        assert issues == [
            generate_issue("extraDelimiter", character=",", index=17, string=hed_string)
        ]
        assert len(tokens) == 2


class TestHedStringIsAGroup:
    """Tests for group detection."""

    def test_group(self):
        """A parenthesized token is a group."""
        assert hed_string_is_a_group("(Item/Object/Car, Action/Reach)") is True
        assert hed_string_is_a_group("  (Item/Object/Car)  ") is True

    def test_not_group(self):
        """Plain and attribute group tokens are not groups."""
        assert hed_string_is_a_group("Item/Object/Car") is False
        assert hed_string_is_a_group("Item/Object/Car {Color/Red}") is False


class TestParseHedString:
    """Tests for the group resolver."""

    def test_parse_simple_string(self):
        """Top-level tags, groups and the full tag list are separated."""
        parsed, issues = parse_hed_string(REACH_STRING)

        assert issues == []
        assert [tag.original_tag for tag in parsed.top_level_tags] == [
            "/Action/Reach/To touch",
            "/Attribute/Location/Screen/Top/70 px",
            "/Attribute/Location/Screen/Left/23 px",
        ]
        assert parsed.tag_group_strings == (
            "(/Attribute/Object side/Left,/Participant/Effect/Body part/Arm)",
        )
        assert [tag.formatted_tag for tag in parsed.tags] == [
            "action/reach/to touch",
            "attribute/location/screen/top/70 px",
            "attribute/location/screen/left/23 px",
            "attribute/object side/left",
            "participant/effect/body part/arm",
        ]

    def test_nested_groups_are_recorded_children_first(self):
        """Inner groups come before the group that contains them."""
        parsed, issues = parse_hed_string("A, (B, (C, D)), E")

        assert issues == []
        assert parsed.tag_group_strings == ("(C, D)", "(B, (C, D))")
        outer = parsed.tag_groups[1]
        assert [child.original_tag for child in outer.children] == ["B", "(C, D)"]
        assert isinstance(outer.children[1], ParsedHedGroup)
        assert [tag.original_tag for tag in outer.tags] == ["B"]
        assert [tag.original_tag for tag in parsed.tags] == ["A", "E", "B", "C", "D"]

    def test_duplicate_tags_recorded_once(self):
        """The tag list holds each tag once, the top level keeps duplicates."""
        parsed, _ = parse_hed_string("Item/Object/Car,item/object/car,(Item/Object/Car)")

        assert [tag.original_tag for tag in parsed.tags] == ["Item/Object/Car"]
        assert len(parsed.top_level_tags) == 2

    def test_tildes_inside_groups(self):
        """Tildes are group members."""
        parsed, _ = parse_hed_string("(Item/Object/Car ~ Action/Reach ~ Item/Object/Bus)")
        group = parsed.tag_groups[0]
        assert group.tilde_count == 2
        assert [child.original_tag for child in group.children] == [
            "Item/Object/Car",
            "~",
            "Action/Reach",
            "~",
            "Item/Object/Bus",
        ]

    def test_group_bounds(self):
        """A group's bounds cover its parentheses."""
        hed_string = "Event/Label/Test,(Item/Object/Car, Action/Reach)"
        parsed, _ = parse_hed_string(hed_string)
        start, end = parsed.tag_groups[0].bounds
        assert hed_string[start:end] == "(Item/Object/Car, Action/Reach)"


class TestAttributeGroups:
    """Tests for curly-brace attribute groups."""

    def test_attribute_group(self):
        """Attributes become tags under the attribute namespace."""
        hed_string = "Item/Object/Vehicle/Car {Color/Red, /Size/Large}"
        parsed, issues = parse_hed_string(hed_string)

        assert issues == []
        assert parsed.top_level_tags == ()
        group = parsed.tag_groups[0]
        assert group.is_attribute_group is True
        assert group.original_tag == hed_string
        assert [child.original_tag for child in group.children] == [
            "Item/Object/Vehicle/Car",
            "Attribute/Color/Red",
            "Attribute/Size/Large",
        ]
        assert group.children[0].bounds == (0, 23)
        assert [tag.formatted_tag for tag in parsed.tags] == [
            "item/object/vehicle/car",
            "attribute/color/red",
            "attribute/size/large",
        ]

    def test_attribute_group_inside_group(self):
        """An attribute group is recorded before its enclosing group."""
        parsed, issues = parse_hed_string("(Item/Object/Car {Color/Red}, Action/Reach)")

        assert issues == []
        assert parsed.tag_group_strings == (
            "Item/Object/Car {Color/Red}",
            "(Item/Object/Car {Color/Red}, Action/Reach)",
        )
        assert parsed.tag_groups[0].is_attribute_group is True
        assert parsed.tag_groups[1].is_attribute_group is False

    def test_closing_brace_before_opening_brace(self):
        """Both braces are reported when they are out of order."""
        hed_string = "Item}Object{Car"
        _, issues = parse_hed_string(hed_string)
        assert issues == [
            generate_issue("invalidCharacter", character="{", index=11, string=hed_string),
            generate_issue("invalidCharacter", character="}", index=4, string=hed_string),
        ]

    def test_text_after_closing_brace(self):
        """Nothing may follow the attribute list."""
        hed_string = "Item/Object/Car {Color/Red} Extra"
        _, issues = parse_hed_string(hed_string)
        assert issues == [
            generate_issue("invalidCharacter", character="}", index=26, string=hed_string)
        ]

    def test_missing_primary_tag(self):
        """An attribute list needs a tag to attach to."""
        hed_string = "{Color/Red}"
        _, issues = parse_hed_string(hed_string)
        assert issues == [
            generate_issue("invalidCharacter", character="{", index=0, string=hed_string)
        ]

    def test_nested_attribute_group(self):
        """Attribute groups do not nest."""
        hed_string = "Item/Object/Car {Color {Red}}"
        _, issues = parse_hed_string(hed_string)
        assert issues == [
            generate_issue("invalidCharacter", character="{", index=23, string=hed_string)
        ]
