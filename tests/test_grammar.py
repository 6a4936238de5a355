"""Tests for the Cursor grammar primitives."""

from __future__ import annotations

import unittest

from itfstack.parser.grammar import Cursor


class TestWhitespace(unittest.TestCase):

    def test_skip_ws_crosses_comments_and_newlines(self):
        c = Cursor("  $ note\n\t$$ more\n  X")
        c.skip_ws()
        self.assertEqual(c.peek_char(), "X")
        self.assertEqual(c.line, 3)

    def test_skip_inline_ws_stops_at_newline(self):
        c = Cursor("  $ trailing\nnext")
        c.skip_inline_ws()
        self.assertEqual(c.peek_char(), "\n")

    def test_skip_line(self):
        c = Cursor("first line\nsecond")
        self.assertEqual(c.skip_line(), "first line")
        self.assertEqual(c.current_line(), "second")
        self.assertEqual(c.skip_line(), "second")
        self.assertTrue(c.at_end())


class TestTokens(unittest.TestCase):

    def test_identifier_allows_plus_and_minus(self):
        c = Cursor("  metal1+_cap-x rest")
        self.assertEqual(c.identifier(), "metal1+_cap-x")

    def test_identifier_miss_restores_position(self):
        c = Cursor("  {")
        self.assertIsNone(c.identifier())
        self.assertEqual(c.pos, 0)

    def test_keyword_is_case_insensitive(self):
        self.assertTrue(Cursor("thickness = 1").keyword("THICKNESS"))
        self.assertTrue(Cursor("Conductor m1").keyword("CONDUCTOR"))

    def test_keyword_is_whole_word(self):
        c = Cursor("THICKNESS_VS_WIDTH_AND_SPACING {")
        self.assertFalse(c.keyword("THICKNESS"))
        self.assertEqual(c.pos, 0)

    def test_peek_keyword_does_not_consume(self):
        c = Cursor("  via v1")
        self.assertEqual(c.peek_keyword(), "VIA")
        self.assertEqual(c.pos, 0)

    def test_numbers(self):
        for text, expected in [
            ("42", 42.0), ("-0.5", -0.5), ("+1e-1", 0.1), (".25", 0.25),
            ("3.", 3.0), ("3.5E-3", 3.5e-3), ("-8.5347e-07", -8.5347e-7),
        ]:
            with self.subTest(text=text):
                self.assertEqual(Cursor(text).number(), expected)

    def test_number_rejects_identifier_prefix(self):
        c = Cursor("1abc")
        self.assertIsNone(c.number())
        self.assertEqual(c.pos, 0)

    def test_symbol_and_peek_symbol(self):
        c = Cursor("  { }")
        self.assertTrue(c.peek_symbol("{"))
        self.assertEqual(c.pos, 0)
        self.assertTrue(c.symbol("{"))
        self.assertFalse(c.symbol("{"))
        self.assertTrue(c.symbol("}"))


class TestAssignments(unittest.TestCase):

    def test_assignment_number(self):
        c = Cursor("THICKNESS = 0.5 ER=4.2")
        self.assertEqual(c.assignment_number("THICKNESS"), 0.5)
        self.assertEqual(c.assignment_number("ER"), 4.2)

    def test_assignment_number_miss_restores(self):
        c = Cursor("THICKNESS = abc")
        self.assertIsNone(c.assignment_number("THICKNESS"))
        self.assertEqual(c.pos, 0)
        self.assertIsNone(Cursor("ER = 1").assignment_number("THICKNESS"))

    def test_assignment_identifier(self):
        c = Cursor("FROM = metal1 TO=metal2")
        self.assertEqual(c.assignment_identifier("FROM"), "metal1")
        self.assertEqual(c.assignment_identifier("TO"), "metal2")


class TestCompoundValues(unittest.TestCase):

    def test_number_list(self):
        self.assertEqual(Cursor("{ 0.1 0.2 0.3 }").number_list(), [0.1, 0.2, 0.3])
        self.assertEqual(Cursor("{}").number_list(), [])

    def test_number_list_rejects_garbage(self):
        c = Cursor("{ 0.1 oops }")
        self.assertIsNone(c.number_list())
        self.assertEqual(c.pos, 0)

    def test_number_matrix_rows_follow_newlines(self):
        c = Cursor("{\n  1 2 3\n  4 5 6   $ second row\n}")
        self.assertEqual(c.number_matrix(), [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])

    def test_number_matrix_closing_brace_on_row(self):
        c = Cursor("{ 0.48 0.5\n  0.49 0.51 }")
        self.assertEqual(c.number_matrix(), [[0.48, 0.5], [0.49, 0.51]])

    def test_number_matrix_ragged_rejected(self):
        c = Cursor("{ 1 2\n 3 }")
        self.assertIsNone(c.number_matrix())
        self.assertEqual(c.pos, 0)

    def test_tuple_list(self):
        c = Cursor("{\n (0.39, 3.6e-3, -8.5e-7)\n (0.45 3.7e-3 -8.4e-7) }")
        self.assertEqual(c.tuple_list(3), [(0.39, 3.6e-3, -8.5e-7), (0.45, 3.7e-3, -8.4e-7)])

    def test_tuple_list_commas_between_tuples(self):
        c = Cursor("{ (0.39, 3.6e-3, -8.5e-7), (0.45, 3.7e-3, -8.4e-7) }")
        self.assertEqual(c.tuple_list(3), [(0.39, 3.6e-3, -8.5e-7), (0.45, 3.7e-3, -8.4e-7)])
        self.assertEqual(c.pos, len(c.text))

    def test_tuple_list_wrong_arity(self):
        c = Cursor("{ (1, 2) }")
        self.assertIsNone(c.tuple_list(3))
        self.assertEqual(c.pos, 0)

    def test_skip_balanced_block(self):
        c = Cursor("BLOCK { a { b } $ } in comment\n c } tail")
        self.assertTrue(c.skip_balanced_block())
        self.assertEqual(c.text[c.pos:], " tail")

    def test_skip_balanced_block_unclosed(self):
        c = Cursor("BLOCK { a { b }")
        self.assertFalse(c.skip_balanced_block())
        self.assertTrue(c.at_end())


if __name__ == "__main__":
    unittest.main()
