"""HED string tokenizer and group resolver.

Turns a raw HED string into a ParsedHedString:

- split_hed_string: flat, depth-aware scan into tags, tildes and group substrings
- find_top_level_tags / find_tag_groups: classify tokens and recurse into groups
- format_hed_tag: canonical lowercase form used for every comparison

All bounds are absolute character offsets into the string being parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hedcheck.validation.issues import generate_issue
from hedcheck.validation.validation_types import Issue

OPENING_GROUP_CHARACTER = "("
CLOSING_GROUP_CHARACTER = ")"
OPENING_ATTRIBUTE_GROUP_CHARACTER = "{"
CLOSING_ATTRIBUTE_GROUP_CHARACTER = "}"
OPENING_CHARACTERS = (OPENING_GROUP_CHARACTER, OPENING_ATTRIBUTE_GROUP_CHARACTER)
CLOSING_CHARACTERS = (CLOSING_GROUP_CHARACTER, CLOSING_ATTRIBUTE_GROUP_CHARACTER)
COMMA = ","
TILDE = "~"
DELIMITERS = (COMMA, TILDE)
DOUBLE_QUOTE_CHARACTER = '"'
INVALID_CHARACTERS = ("[", "]")

# Attribute group members become tags under this namespace
ATTRIBUTE_NAMESPACE = "Attribute"

_STRIPPED_TAG_CHARACTERS = ' \t\r\n"/'


def canonicalize_hed_tag(hed_tag: str) -> str:
    """Strip surrounding whitespace, double quotes and slashes, keeping case."""
    return hed_tag.replace("\n", " ").strip(_STRIPPED_TAG_CHARACTERS)


def format_hed_tag(hed_tag: str) -> str:
    """Format a HED tag for comparison.

    '"/Event/Duration/3 ms/"' -> 'event/duration/3 ms'. Formatting an
    already formatted tag returns it unchanged.
    """
    return canonicalize_hed_tag(hed_tag).lower()


@dataclass(frozen=True)
class ParsedHedTag:
    """A single tag (or tilde) as written, with its normalized forms.

    Attributes:
        original_tag: The tag text as written (double quotes elided)
        bounds: (start, end) offsets of the tag in the parsed string
        canonical_tag: Tag without surrounding quotes/slashes, case kept
        formatted_tag: Lowercase canonical tag, used for all comparisons
    """

    original_tag: str
    bounds: tuple[int, int]
    canonical_tag: str = field(init=False, repr=False, compare=False)
    formatted_tag: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        canonical_tag = canonicalize_hed_tag(self.original_tag)
        object.__setattr__(self, "canonical_tag", canonical_tag)
        object.__setattr__(self, "formatted_tag", canonical_tag.lower())

    @property
    def is_tilde(self) -> bool:
        return self.original_tag == TILDE

    def __str__(self) -> str:
        return self.original_tag


@dataclass(frozen=True)
class ParsedHedGroup:
    """A parenthesized group or a curly-brace attribute group.

    A nested group is one opaque member of its parent: it compares and
    formats by its whole original text.

    Attributes:
        original_tag: The group substring, delimiters included
        bounds: (start, end) offsets of the group in the parsed string
        children: Member tags and nested groups, in order
        is_attribute_group: True for 'Tag {attribute, ...}' groups
    """

    original_tag: str
    bounds: tuple[int, int]
    children: tuple[ParsedHedTag | ParsedHedGroup, ...]
    is_attribute_group: bool = False

    @property
    def canonical_tag(self) -> str:
        return self.original_tag

    @property
    def formatted_tag(self) -> str:
        return self.original_tag.lower()

    @property
    def is_tilde(self) -> bool:
        return False

    @property
    def tags(self) -> list[ParsedHedTag]:
        """Direct member tags, nested groups excluded."""
        return [child for child in self.children if isinstance(child, ParsedHedTag)]

    @property
    def tilde_count(self) -> int:
        return sum(1 for child in self.children if child.is_tilde)

    def __str__(self) -> str:
        return self.original_tag


HedToken = ParsedHedTag | ParsedHedGroup


@dataclass(frozen=True)
class ParsedHedString:
    """Structured form of one HED string.

    Attributes:
        hed_string: The string that was parsed
        tags: Every distinct tag in the string, groups included
        top_level_tags: Tags outside any group, in order, duplicates kept
        tag_groups: Every group, children before their parent
    """

    hed_string: str
    tags: tuple[ParsedHedTag, ...]
    top_level_tags: tuple[ParsedHedTag, ...]
    tag_groups: tuple[ParsedHedGroup, ...]

    @property
    def tag_group_strings(self) -> tuple[str, ...]:
        return tuple(group.original_tag for group in self.tag_groups)


class _TokenBuffer:
    """Characters of the tag being scanned and their outer bounds."""

    def __init__(self) -> None:
        self.characters: list[str] = []
        self.start: int | None = None
        self.end: int | None = None

    def add(self, character: str, index: int) -> None:
        self.characters.append(character)
        if not character.isspace():
            if self.start is None:
                self.start = index
            self.end = index + 1

    def is_empty(self) -> bool:
        return self.start is None

    def flush_into(self, tags: list[ParsedHedTag]) -> None:
        if self.start is not None and self.end is not None:
            tags.append(ParsedHedTag("".join(self.characters).strip(), (self.start, self.end)))
        self.characters = []
        self.start = None
        self.end = None


def split_hed_string(
    hed_string: str, start: int = 0, end: int | None = None
) -> tuple[list[ParsedHedTag], list[Issue]]:
    """Split (part of) a HED string into its top-level tokens.

    Parentheses and curly braces share one nesting counter; commas and
    tildes only delimit outside of any group. Group substrings are
    returned as single tokens, delimiters included.

    Args:
        hed_string: The full HED string
        start: Offset where scanning starts
        end: Offset where scanning stops (default: end of string)

    Returns:
        Tuple of (tokens, issues)
    """
    if end is None:
        end = len(hed_string)

    tags: list[ParsedHedTag] = []
    issues: list[Issue] = []
    buffer = _TokenBuffer()
    opened_groups = 0
    closed_groups = 0
    last_valid_character = ""
    last_valid_index = start

    for index in range(start, end):
        character = hed_string[index]
        if character == DOUBLE_QUOTE_CHARACTER:
            continue
        if character in OPENING_CHARACTERS:
            opened_groups += 1
        elif character in CLOSING_CHARACTERS:
            closed_groups += 1

        if opened_groups == closed_groups and character in DELIMITERS:
            if buffer.is_empty():
                issues.append(
                    generate_issue(
                        "extraDelimiter", character=character, index=index, string=hed_string
                    )
                )
                continue
            buffer.flush_into(tags)
            if character == TILDE:
                tags.append(ParsedHedTag(TILDE, (index, index + 1)))
        elif character in INVALID_CHARACTERS:
            issues.append(
                generate_issue(
                    "invalidCharacter", character=character, index=index, string=hed_string
                )
            )
            buffer.flush_into(tags)
        else:
            buffer.add(character, index)

        if not character.isspace():
            last_valid_character = character
            last_valid_index = index

    buffer.flush_into(tags)
    if last_valid_character in DELIMITERS:
        issues.append(
            generate_issue(
                "extraDelimiter",
                character=last_valid_character,
                index=last_valid_index,
                string=hed_string,
            )
        )
    return tags, issues


def hed_string_is_a_group(hed_string: str) -> bool:
    """Whether a token is a parenthesized group."""
    trimmed = hed_string.strip()
    return trimmed.startswith(OPENING_GROUP_CHARACTER) and trimmed.endswith(
        CLOSING_GROUP_CHARACTER
    )


def hed_string_has_attribute_braces(hed_string: str) -> bool:
    return (
        OPENING_ATTRIBUTE_GROUP_CHARACTER in hed_string
        or CLOSING_ATTRIBUTE_GROUP_CHARACTER in hed_string
    )


def _invalid_character(hed_string: str, index: int) -> Issue:
    return generate_issue(
        "invalidCharacter", character=hed_string[index], index=index, string=hed_string
    )


def check_attribute_group(tag: ParsedHedTag, hed_string: str, issues: list[Issue]) -> bool:
    """Check the shape of a 'Tag {attribute, ...}' token.

    Exactly one brace pair is allowed, it must follow a primary tag and
    nothing may come after the closing brace.

    Returns:
        True when the token is a well-formed attribute group
    """
    start, end = tag.bounds
    opening_index = hed_string.find(OPENING_ATTRIBUTE_GROUP_CHARACTER, start, end)
    closing_index = hed_string.find(CLOSING_ATTRIBUTE_GROUP_CHARACTER, start, end)

    if opening_index == -1:
        if closing_index != -1:
            issues.append(_invalid_character(hed_string, closing_index))
        return False
    if closing_index == -1:
        issues.append(_invalid_character(hed_string, opening_index))
        return False
    if closing_index < opening_index:
        issues.append(_invalid_character(hed_string, opening_index))
        issues.append(_invalid_character(hed_string, closing_index))
        return False

    nested_opening_index = hed_string.find(
        OPENING_ATTRIBUTE_GROUP_CHARACTER, opening_index + 1, closing_index
    )
    if nested_opening_index != -1:
        issues.append(_invalid_character(hed_string, nested_opening_index))
        return False
    if string_is_blank(hed_string[start:opening_index]):
        issues.append(_invalid_character(hed_string, opening_index))
        return False
    if not string_is_blank(hed_string[closing_index + 1 : end]):
        issues.append(_invalid_character(hed_string, closing_index))
        return False
    return True


def string_is_blank(substring: str) -> bool:
    return not substring.replace(DOUBLE_QUOTE_CHARACTER, "").strip()


def _attribute_tag(tag: ParsedHedTag) -> ParsedHedTag:
    if tag.is_tilde:
        return tag
    text = tag.original_tag
    if text.startswith("/"):
        return ParsedHedTag(ATTRIBUTE_NAMESPACE + text, tag.bounds)
    return ParsedHedTag(f"{ATTRIBUTE_NAMESPACE}/{text}", tag.bounds)


def build_attribute_group(
    tag: ParsedHedTag, hed_string: str, issues: list[Issue]
) -> ParsedHedGroup:
    """Build the group for a well-formed attribute group token.

    'Item/Object/Car {Color/Red, /Size/Large}' becomes a group of
    'Item/Object/Car', 'Attribute/Color/Red' and 'Attribute/Size/Large'.
    """
    start, end = tag.bounds
    opening_index = hed_string.index(OPENING_ATTRIBUTE_GROUP_CHARACTER, start, end)
    closing_index = hed_string.index(CLOSING_ATTRIBUTE_GROUP_CHARACTER, opening_index, end)

    primary_text = hed_string[start:opening_index].replace(DOUBLE_QUOTE_CHARACTER, "")
    primary_tag = ParsedHedTag(primary_text.strip(), (start, start + len(primary_text.rstrip())))

    attribute_tokens, attribute_issues = split_hed_string(
        hed_string, opening_index + 1, closing_index
    )
    issues.extend(attribute_issues)
    children = [primary_tag] + [_attribute_tag(token) for token in attribute_tokens]
    return ParsedHedGroup(
        hed_string[start:end], tag.bounds, tuple(children), is_attribute_group=True
    )


class _ParsedStringBuilder:
    """Collects tags and groups while a string is being resolved."""

    def __init__(self) -> None:
        self.tags: list[ParsedHedTag] = []
        self.tag_groups: list[ParsedHedGroup] = []
        self._formatted_tags: set[str] = set()

    def add_tag(self, tag: ParsedHedTag) -> None:
        if tag.formatted_tag not in self._formatted_tags:
            self._formatted_tags.add(tag.formatted_tag)
            self.tags.append(tag)

    def add_group(self, group: ParsedHedGroup) -> None:
        self.tag_groups.append(group)

    def build(self, hed_string: str, top_level_tags: list[ParsedHedTag]) -> ParsedHedString:
        return ParsedHedString(
            hed_string=hed_string,
            tags=tuple(self.tags),
            top_level_tags=tuple(top_level_tags),
            tag_groups=tuple(self.tag_groups),
        )


def find_top_level_tags(
    tag_list: list[ParsedHedTag], builder: _ParsedStringBuilder
) -> list[ParsedHedTag]:
    """Pick the tokens that are plain tags (not groups, not attribute groups)."""
    top_level_tags = []
    for tag in tag_list:
        if hed_string_is_a_group(tag.original_tag):
            continue
        if OPENING_ATTRIBUTE_GROUP_CHARACTER in tag.original_tag:
            continue
        top_level_tags.append(tag)
        builder.add_tag(tag)
    return top_level_tags


def find_tag_groups(
    tag_list: list[ParsedHedTag],
    hed_string: str,
    builder: _ParsedStringBuilder,
    issues: list[Issue],
) -> list[HedToken]:
    """Resolve group tokens into ParsedHedGroup objects, recursively.

    Nested groups are recorded before the group that contains them.

    Args:
        tag_list: Tokens produced by split_hed_string
        hed_string: The full string the token bounds refer to
        builder: Accumulator for tags and groups
        issues: List that parse issues are appended to

    Returns:
        The tokens with every group token replaced by its group
    """
    resolved: list[HedToken] = []
    for tag in tag_list:
        if hed_string_is_a_group(tag.original_tag):
            start, end = tag.bounds
            nested_tags, nested_issues = split_hed_string(hed_string, start + 1, end - 1)
            issues.extend(nested_issues)
            children = find_tag_groups(nested_tags, hed_string, builder, issues)
            group = ParsedHedGroup(hed_string[start:end], tag.bounds, tuple(children))
            builder.add_group(group)
            resolved.append(group)
        elif hed_string_has_attribute_braces(tag.original_tag) and check_attribute_group(
            tag, hed_string, issues
        ):
            group = build_attribute_group(tag, hed_string, issues)
            for child in group.tags:
                builder.add_tag(child)
            builder.add_group(group)
            resolved.append(group)
        else:
            builder.add_tag(tag)
            resolved.append(tag)
    return resolved


def parse_hed_string(hed_string: str) -> tuple[ParsedHedString, list[Issue]]:
    """Parse a HED string into its tags and groups.

    Args:
        hed_string: The HED string, after character substitution

    Returns:
        Tuple of (parsed string, issues found while parsing)
    """
    issues: list[Issue] = []
    builder = _ParsedStringBuilder()
    tag_list, split_issues = split_hed_string(hed_string)
    issues.extend(split_issues)
    top_level_tags = find_top_level_tags(tag_list, builder)
    find_tag_groups(tag_list, hed_string, builder, issues)
    return builder.build(hed_string, top_level_tags), issues
