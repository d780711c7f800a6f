"""Test block-pairing resolution and function navigation."""

import pytest

from kixtart.blocks import (
    BlockMatch,
    beginning_of_function,
    enclosing_block_opener,
    end_of_function,
    matching_block_opener,
)
from kixtart.buffer import Buffer
from kixtart.keywords import BlockKeyword


class TestEnclosingOpener:
    def test_simple_if(self, at):
        buf, pos = at("If $a\n    |x")
        assert enclosing_block_opener(buf, pos) == BlockMatch(BlockKeyword.IF, 0, 2)

    def test_top_level(self, at):
        buf, pos = at("$a = 1\n|")
        assert enclosing_block_opener(buf, pos) is None
        assert enclosing_block_opener(Buffer(""), 0) is None

    def test_closed_inner_block_is_skipped(self, at):
        buf, pos = at("If $a\n  Do\n  Until $b\n  |")
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.IF

    def test_case_branch(self, at):
        buf, pos = at("Select\nCase 1\n  |")
        assert enclosing_block_opener(buf, pos) == BlockMatch(BlockKeyword.CASE, 7, 11)

    def test_closed_select(self, at):
        buf, pos = at("Select\nCase 1\n  x\nCase 2\nEndSelect\n|")
        assert enclosing_block_opener(buf, pos) is None

    def test_else_branch(self, at):
        buf, pos = at("If $a\nElse\n  |")
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.ELSE

    def test_nested_if_else_closed(self, at):
        buf, pos = at("If $a\n  If $b\n  Else\n  EndIf\n  |")
        assert enclosing_block_opener(buf, pos) == BlockMatch(BlockKeyword.IF, 0, 2)

    def test_keywords_in_strings_and_comments_ignored(self, at):
        buf, pos = at('$s = "If"\n; Do\n/* While */\n|')
        assert enclosing_block_opener(buf, pos) is None

    def test_closers_in_strings_and_comments_ignored(self, at):
        buf, pos = at('While 1\n  $s = "Loop"\n  ; Loop\n  |')
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.WHILE

    def test_paren_group_is_opaque(self, at):
        buf, pos = at("Foo(If)\n|")
        assert enclosing_block_opener(buf, pos) is None

    def test_jumps_out_of_enclosing_group(self, at):
        buf, pos = at("If $a\n  Foo(1,\n  |2)")
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.IF

    def test_unbalanced_paren(self, at):
        buf, pos = at("While 1\n  Foo(\n|")
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.WHILE

    def test_inside_string_escapes_outward(self, at):
        buf, pos = at('If $a\n  $s = "abc|def"')
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.IF

    def test_inside_comment_escapes_outward(self, at):
        buf, pos = at("Do\n  /* EndIf |If */")
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.DO

    def test_member_words_ignored(self, at):
        buf, pos = at("If $a\n  $obj.Next\n  |")
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.IF

    def test_inline_block_on_one_line(self, at):
        buf, pos = at("If $a EndIf\n|")
        assert enclosing_block_opener(buf, pos) is None

    def test_inline_opener(self, at):
        buf, pos = at("If $a Do\n|")
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.DO

    def test_case_insensitive(self, at):
        buf, pos = at("wHiLe 1\n|")
        assert enclosing_block_opener(buf, pos).keyword is BlockKeyword.WHILE

    def test_stray_closers_do_not_raise(self, at):
        # Malformed input: the exact answer is not part of the contract.
        buf, pos = at("EndIf\nNext\n)\n|")
        result = enclosing_block_opener(buf, pos)
        assert result is None or isinstance(result, BlockMatch)

    def test_repeatable(self, at):
        buf, pos = at("Select\nCase 1\n  If 1\n  |")
        assert enclosing_block_opener(buf, pos) == enclosing_block_opener(buf, pos)


class TestMatchingOpener:
    def test_endif_through_else(self):
        source = "If $a\nElse\nEndIf"
        buf = Buffer(source)
        assert matching_block_opener(buf, source.index("EndIf")).keyword is BlockKeyword.IF
        assert matching_block_opener(buf, source.index("Else")).keyword is BlockKeyword.IF

    def test_case_resolves_to_select(self):
        source = "Select\nCase 1\nCase 2\nEndSelect"
        buf = Buffer(source)
        found = matching_block_opener(buf, source.index("Case 2"))
        assert found == BlockMatch(BlockKeyword.SELECT, 0, 6)
        assert matching_block_opener(buf, source.index("EndSelect")).start == 0

    def test_skips_inline_block(self):
        source = "Do\n  If $a EndIf\nUntil 1"
        buf = Buffer(source)
        assert matching_block_opener(buf, source.index("Until")) == BlockMatch(
            BlockKeyword.DO, 0, 2
        )

    def test_inside_keyword(self):
        source = "While 1\nLoop"
        buf = Buffer(source)
        assert matching_block_opener(buf, source.index("Loop") + 2).keyword is BlockKeyword.WHILE

    def test_not_a_closer(self):
        buf = Buffer("If $a\nx")
        assert matching_block_opener(buf, 0) is None
        assert matching_block_opener(buf, 6) is None

    def test_unmatched_closer(self):
        assert matching_block_opener(Buffer("x\nNext"), 2) is None


FUNCTIONS = "Function A()\nEndFunction\n; Function fake\nFunction B()\nEndFunction\n"


class TestFunctionNavigation:
    @pytest.fixture
    def buf(self):
        return Buffer(FUNCTIONS)

    def test_beginning_backward(self, buf):
        b_start = FUNCTIONS.index("Function B")
        end = len(FUNCTIONS)
        assert beginning_of_function(buf, end) == (True, b_start)
        assert beginning_of_function(buf, end, 2) == (True, 0)
        assert beginning_of_function(buf, end, 3) == (False, 0)

    def test_beginning_is_strictly_before(self, buf):
        assert beginning_of_function(buf, FUNCTIONS.index("Function B")) == (True, 0)

    def test_beginning_forward(self, buf):
        b_start = FUNCTIONS.index("Function B")
        assert beginning_of_function(buf, 0, -1) == (True, b_start)
        assert beginning_of_function(buf, b_start, -1) == (False, len(FUNCTIONS))

    def test_end_forward(self, buf):
        first_end = FUNCTIONS.index("EndFunction") + len("EndFunction")
        last_end = FUNCTIONS.rindex("EndFunction") + len("EndFunction")
        assert end_of_function(buf, 0) == (True, first_end)
        assert end_of_function(buf, 0, 2) == (True, last_end)
        assert end_of_function(buf, first_end) == (True, last_end)
        assert end_of_function(buf, 0, 3) == (False, len(FUNCTIONS))

    def test_end_backward(self, buf):
        first_end = FUNCTIONS.index("EndFunction") + len("EndFunction")
        last_end = FUNCTIONS.rindex("EndFunction") + len("EndFunction")
        end = len(FUNCTIONS)
        assert end_of_function(buf, end, -1) == (True, last_end)
        assert end_of_function(buf, end, -2) == (True, first_end)
        assert end_of_function(buf, end, -3) == (False, 0)

    def test_zero_count(self, buf):
        assert beginning_of_function(buf, 5, 0) == (True, 5)
        assert end_of_function(buf, 5, 0) == (True, 5)

    def test_commented_function_ignored(self, buf):
        comment = FUNCTIONS.index("; Function")
        assert beginning_of_function(buf, comment + 12) == (True, 0)
