"""Test the Lonelog line tokenizer."""

import pytest

from lonelog.notation import TokenType, tokenize, tokenize_line
from lonelog.notation.tokenizer import line_type


def _assert_tiles(line, tokens):
    """Tokens must concatenate to the line with contiguous offsets."""
    assert "".join(t.text for t in tokens) == line
    pos = 0
    for token in tokens:
        assert token.start == pos
        assert token.end > token.start
        assert line[token.start:token.end] == token.text
        pos = token.end
    assert pos == len(line)


def _types(tokens):
    return [t.type for t in tokens]


class TestLineLevelTypes:
    """Test detection of line-level token types."""

    @pytest.mark.parametrize("line,expected", [
        ("@ I sneak past the guard", TokenType.ACTION),
        ("? Is the door locked", TokenType.QUESTION),
        ("d: 2d6=8 vs TN 7", TokenType.DICE),
        ("=> The alarm sounds", TokenType.CONSEQUENCE),
        ("   @ indented action", TokenType.ACTION),
        ("Just narration", None),
        ("", None),
        ("dice: not a roll", None),
    ])
    def test_line_type(self, line, expected):
        """Test that only the leading prefix decides the line type."""
        assert line_type(line) == expected

    def test_whole_line_takes_line_type(self):
        """Test that a line without inline tokens is one token."""
        tokens = tokenize_line("@ Pick the lock")

        assert len(tokens) == 1
        assert tokens[0].type == TokenType.ACTION
        assert tokens[0].text == "@ Pick the lock"

    def test_leading_whitespace_keeps_line_color(self):
        """Test that indentation is colored with the line type too."""
        tokens = tokenize_line("  ? Is anyone home")

        assert _types(tokens) == [TokenType.QUESTION]
        assert tokens[0].start == 0


class TestInlineTokens:
    """Test result arrows and bracket tags."""

    def test_result_arrow_in_plain_line(self):
        """Test that -> is a result token in an otherwise plain line."""
        line = "Roll went well -> success"
        tokens = tokenize_line(line)

        _assert_tiles(line, tokens)
        assert _types(tokens) == [TokenType.TEXT, TokenType.RESULT, TokenType.TEXT]
        assert tokens[1].text == "->"

    def test_arrow_on_dice_line_keeps_line_color_around(self):
        """Test that inline tokens override the line color only for their span."""
        line = "d: 5 -> Strong Hit"
        tokens = tokenize_line(line)

        _assert_tiles(line, tokens)
        assert _types(tokens) == [TokenType.DICE, TokenType.RESULT, TokenType.DICE]

    def test_consequence_arrow_is_not_a_result(self):
        """Test that the arrow inside => is not a result token."""
        line = "=> The bridge collapses"
        tokens = tokenize_line(line)

        assert _types(tokens) == [TokenType.CONSEQUENCE]

    def test_equals_arrow_mid_line_is_not_a_result(self):
        """Test that => in the middle of a plain line is skipped too."""
        tokens = tokenize_line("a => b -> c")

        assert [t.text for t in tokens if t.type == TokenType.RESULT] == ["->"]
        assert tokens[1].start == 7

    def test_bracket_tags(self):
        """Test that every known tag prefix is recognized."""
        for tag in ("[N:Jonah|wary]", "[#N:Jonah]", "[L:Old Mill]", "[PC:Ash]",
                    "[Thread:Find Sister|Open]", "[E:Alarm 2/6]",
                    "[Track:Escape 1/4]", "[Timer:Dawn 3]"):
            line = f"We meet {tag} here"
            tokens = tokenize_line(line)

            _assert_tiles(line, tokens)
            assert [t.text for t in tokens if t.type == TokenType.TAG] == [tag]

    def test_unknown_prefix_is_plain_text(self):
        """Test that unknown bracket prefixes are not tags."""
        tokens = tokenize_line("[X:Nobody] and [#L:Nowhere]")

        assert _types(tokens) == [TokenType.TEXT]

    def test_unterminated_tag_is_plain_text(self):
        """Test that a tag without closing bracket stays plain."""
        line = "@ Talk to [N:Jonah"
        tokens = tokenize_line(line)

        _assert_tiles(line, tokens)
        assert _types(tokens) == [TokenType.ACTION]

    def test_mixed_line(self):
        """Test a line mixing line type, tags and arrows."""
        line = "@ Ask [N:Jonah] about [L:Mill] -> he lies"
        tokens = tokenize_line(line)

        _assert_tiles(line, tokens)
        assert _types(tokens) == [
            TokenType.ACTION, TokenType.TAG, TokenType.ACTION,
            TokenType.TAG, TokenType.ACTION, TokenType.RESULT, TokenType.ACTION,
        ]

    def test_adjacent_inline_tokens_have_no_gap_token(self):
        """Test that back-to-back tokens do not produce empty fillers."""
        line = "[N:A][L:B]->"
        tokens = tokenize_line(line)

        _assert_tiles(line, tokens)
        assert _types(tokens) == [TokenType.TAG, TokenType.TAG, TokenType.RESULT]


class TestOverlaps:
    """Test leftmost-first resolution of overlapping inline matches."""

    def test_arrow_inside_tag_is_absorbed(self):
        """Test that an arrow inside a bracket tag does not split it."""
        line = "See [N:Left->Right|odd] now"
        tokens = tokenize_line(line)

        _assert_tiles(line, tokens)
        assert _types(tokens) == [TokenType.TEXT, TokenType.TAG, TokenType.TEXT]
        assert tokens[1].text == "[N:Left->Right|odd]"


class TestCoverage:
    """Test the total-coverage guarantee on awkward input."""

    @pytest.mark.parametrize("line", [
        "",
        "   ",
        "->",
        "=>->",
        "[[N:a]]",
        "[N:]",
        "]]]][[[[",
        "@ [E:Clock 1/",
        "d: -> -> ->",
        "\t? [Timer:Fuse 0] -> [#N:Ghost]",
        "ünïcödé [L:Café] → ->",
    ])
    def test_tiles_any_line(self, line):
        """Test that tokens always tile the whole line."""
        _assert_tiles(line, tokenize_line(line))

    def test_empty_line_has_no_tokens(self):
        """Test that an empty line yields an empty list."""
        assert tokenize_line("") == []

    def test_tokenize_document(self):
        """Test tokenizing every line of a document."""
        lines = tokenize("@ act\n\n=> result")

        assert len(lines) == 3
        assert _types(lines[0]) == [TokenType.ACTION]
        assert lines[1] == []
        assert _types(lines[2]) == [TokenType.CONSEQUENCE]
