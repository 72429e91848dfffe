"""Tests for domain enum to engine value translation."""

import inspect
import sys
import unittest
from enum import IntEnum
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from FileSearch.core import enums as domain_enums
from FileSearch.core.enums import BoundaryScanner, HighlighterType, Operator, StringDistance, SuggestMode
from FileSearch.engine.enums import NATIVE_TABLES, native_value


class TestNativeTables(unittest.TestCase):
    def test_every_domain_enum_has_a_table(self) -> None:
        declared = [
            obj
            for _, obj in inspect.getmembers(domain_enums, inspect.isclass)
            if issubclass(obj, IntEnum) and obj is not IntEnum and obj.__module__ == domain_enums.__name__
        ]
        self.assertTrue(declared)
        for enum_type in declared:
            with self.subTest(enum=enum_type.__name__):
                self.assertIn(enum_type, NATIVE_TABLES)
        self.assertEqual(set(NATIVE_TABLES), set(declared))

    def test_every_table_covers_every_member(self) -> None:
        for enum_type, table in NATIVE_TABLES.items():
            with self.subTest(enum=enum_type.__name__):
                self.assertEqual(len(table), len(enum_type))
                self.assertEqual(sorted(int(m) for m in enum_type), list(range(len(table))))
                for member in enum_type:
                    self.assertIsInstance(native_value(member), str)

    def test_native_values_are_distinct(self) -> None:
        for enum_type, table in NATIVE_TABLES.items():
            with self.subTest(enum=enum_type.__name__):
                self.assertEqual(len(set(table)), len(table))

    def test_known_translations(self) -> None:
        self.assertEqual(native_value(SuggestMode.MISSING), "missing")
        self.assertEqual(native_value(StringDistance.DAMERAU_LEVENSHTEIN), "damerau_levenshtein")
        self.assertEqual(native_value(StringDistance.NGRAM), "ngram")
        self.assertEqual(native_value(HighlighterType.FVH), "fvh")
        self.assertEqual(native_value(BoundaryScanner.CHARACTERS), "chars")
        self.assertEqual(native_value(Operator.OR), "or")

    def test_unset_value_stays_unset(self) -> None:
        self.assertIsNone(native_value(None))


if __name__ == "__main__":
    unittest.main()
