"""
Tests for SQL reconstruction and formatting.
"""

import unittest

from logsql.formatter import (
    format_sql, format_params, substitute, fill_or_template,
    to_sql_literal, SubstitutionError, NOT_FOUND
)
from logsql.models import ParamToken


class TestSubstitute(unittest.TestCase):
    """Test typed placeholder substitution."""

    def test_int_and_string_with_quote(self):
        sql = "SELECT * FROM t WHERE id = ? AND name = ?"
        result = substitute(sql, ["Int:1:42", "String:2:O'Brien"])
        self.assertEqual(result, "SELECT * FROM t WHERE id = 42 AND name = 'O''Brien'")

    def test_null_timestamp_boolean(self):
        sql = "... a=? AND b=? AND c=?"
        result = substitute(sql, [
            "String:1:null",
            "Timestamp:2:2024-01-01 10:00:00",
            "Boolean:3:true",
        ])
        self.assertEqual(result, "... a=NULL AND b='2024-01-01 10:00:00' AND c=TRUE")

    def test_missing_position_names_it(self):
        with self.assertRaises(SubstitutionError) as ctx:
            substitute("SELECT * FROM t WHERE a = ? AND b = ?", ["Int:1:1"])
        self.assertEqual(ctx.exception.position, 2)
        self.assertIn("position 2", str(ctx.exception))

    def test_positions_follow_declared_index(self):
        # Tokens out of order still land on their declared placeholder.
        result = substitute("VALUES (?, ?)", ["Int:2:20", "Int:1:10"])
        self.assertEqual(result, "VALUES (10, 20)")

    def test_duplicate_position_last_wins(self):
        result = substitute("WHERE a = ?", ["Int:1:1", "Int:1:2"])
        self.assertEqual(result, "WHERE a = 2")

    def test_invalid_position_dropped(self):
        result = substitute("WHERE a = ?", ["Int:x:9", "Int:1:3"])
        self.assertEqual(result, "WHERE a = 3")

    def test_loosely_numeric_positions_dropped(self):
        tokens = ["Int: 1:7", "Int:+1:8", "Int:1_0:9", "Int:١:6"]
        with self.assertRaises(SubstitutionError) as ctx:
            substitute("WHERE a = ?", tokens)
        self.assertEqual(ctx.exception.position, 1)
        self.assertEqual(substitute("WHERE a = ?", tokens + ["Int:1:3"]), "WHERE a = 3")

    def test_malformed_token_ignored(self):
        result = substitute("WHERE a = ?", ["garbage", "Int:1:3"])
        self.assertEqual(result, "WHERE a = 3")

    def test_value_containing_separator(self):
        result = substitute("WHERE t = ?", ["Time:1:10:30:00"])
        self.assertEqual(result, "WHERE t = '10:30:00'")

    def test_no_placeholders(self):
        self.assertEqual(substitute("SELECT 1", []), "SELECT 1")

    def test_pure(self):
        tokens = ["String:1:x", "Int:2:5"]
        sql = "SELECT ? , ?"
        self.assertEqual(substitute(sql, tokens), substitute(sql, tokens))

    def test_fill_or_template_falls_back(self):
        sql = "SELECT * FROM t WHERE id = ?"
        self.assertEqual(fill_or_template(sql, []), sql)
        self.assertEqual(fill_or_template(sql, ["Int:1:7"]), "SELECT * FROM t WHERE id = 7")
        self.assertEqual(fill_or_template("", ["Int:1:7"]), "")


class TestSqlLiteral(unittest.TestCase):
    """Test literal rendering per declared type."""

    def _literal(self, raw: str) -> str:
        return to_sql_literal(ParamToken.parse(raw))

    def test_numeric_family_verbatim(self):
        for type_name in ["BigDecimal", "Number", "Int", "Long", "Float", "Double"]:
            self.assertEqual(self._literal(f"{type_name}:1:3.14"), "3.14")

    def test_quoted_types(self):
        self.assertEqual(self._literal("Date:1:2024-01-01"), "'2024-01-01'")
        self.assertEqual(self._literal("STRING:1:it's"), "'it''s'")

    def test_boolean_upper(self):
        self.assertEqual(self._literal("Boolean:1:false"), "FALSE")

    def test_null_regardless_of_type(self):
        self.assertEqual(self._literal("Int:1:null"), "NULL")
        self.assertEqual(self._literal("Boolean:1:null"), "NULL")

    def test_unknown_type_heuristic(self):
        self.assertEqual(self._literal("Short:1:12"), "12")
        self.assertEqual(self._literal("Short:1:1.5"), "1.5")
        self.assertEqual(self._literal("Char:1:A'B"), "'A''B'")


class TestFormatting(unittest.TestCase):
    """Test cosmetic SQL and parameter formatting."""

    def test_format_sql_breaks_keywords(self):
        formatted = format_sql("SELECT * FROM users WHERE id = 1 AND active = true")
        self.assertEqual(formatted, "SELECT *\nFROM users\nWHERE id = 1\nAND active = true")

    def test_format_sql_case_insensitive(self):
        formatted = format_sql("select a from t where x = 1 or y = 2 order by a")
        self.assertIn("\nFROM t", formatted)
        self.assertIn("\nWHERE x", formatted)
        self.assertIn("\nOR y", formatted)
        self.assertIn("\nORDER BY a", formatted)

    def test_format_sql_empty(self):
        self.assertEqual(format_sql(""), NOT_FOUND)

    def test_format_params(self):
        formatted = format_params(["String:1:hello", "Int:2:42", "oops"])
        self.assertEqual(formatted, "  [1] String: hello\n  [2] Int: 42\n  oops\n")

    def test_format_params_empty(self):
        self.assertEqual(format_params([]), NOT_FOUND)


if __name__ == '__main__':
    unittest.main()
