"""
Tests for affix expressions and paradigms.
"""
import unittest

from morphgen.diagnostics import DiagnosticSink
from morphgen.paradigm import Paradigm, expand_affix, find_closing_bracket, gloss_tokens, split_low_level

CASES = ["NOM", "ACC", "DAT", "GEN", "SOC", "LOC", "INS"]


class TestExpandAffix(unittest.TestCase):

    def test_empty_expression(self):
        self.assertEqual(expand_affix(""), {""})
        self.assertEqual(expand_affix("   "), {""})

    def test_alternation(self):
        self.assertEqual(expand_affix("(NOM || GEN || DAT)"), {"", "NOM", "GEN", "DAT"})

    def test_every_suffix_is_optional(self):
        self.assertEqual(expand_affix("PL (NOM || GEN)"), {"", "NOM", "GEN", "PL", "PL NOM", "PL GEN"})

    def test_token_sequence(self):
        self.assertEqual(expand_affix("+2 *10"), {"", "*10", "+2", "+2 *10"})

    def test_underscore_is_a_blank_inside_one_affix(self):
        self.assertEqual(expand_affix("PST_STAT"), {"", "PST STAT"})

    def test_nested_alternation(self):
        expanded = expand_affix("((PRS || PST) (NEG || A) || GER)")

        self.assertEqual(expanded, {"", "PRS", "PST", "NEG", "A", "PRS NEG", "PRS A", "PST NEG", "PST A", "GER"})

    def test_unclosed_bracket_is_reported(self):
        sink = DiagnosticSink()

        self.assertEqual(expand_affix("(NOM || GEN", sink), {""})
        self.assertEqual(sink.kinds(), ["MalformedRuleSyntax"])


class TestHelpers(unittest.TestCase):

    def test_find_closing_bracket(self):
        self.assertEqual(find_closing_bracket("(a (b) c) d", 1), 8)
        self.assertEqual(find_closing_bracket("(a (b c", 1), -1)

    def test_split_low_level_ignores_nested_separators(self):
        self.assertEqual(split_low_level("(A || B) C || GER", " || "), ["(A || B) C", "GER"])
        self.assertEqual(split_low_level("NOM", " || "), ["NOM"])

    def test_gloss_tokens(self):
        self.assertEqual(gloss_tokens("PL (NOM || PST_STAT)"), {"PL", "NOM", "PST", "STAT"})
        self.assertEqual(gloss_tokens(""), set())


class TestParadigm(unittest.TestCase):

    def test_noun_paradigm(self):
        paradigm = Paradigm.from_expressions("", "PL (NOM || ACC || DAT || GEN || SOC || LOC || INS)")
        expected = {"puucca", "puucca PL"}
        expected |= {f"puucca {case}" for case in CASES}
        expected |= {f"puucca PL {case}" for case in CASES}

        self.assertEqual(paradigm.get_paradigm("puucca"), expected)
        self.assertLessEqual(len(expected), len(paradigm.prefixes) * len(paradigm.suffixes))

    def test_verb_paradigm(self):
        paradigm = Paradigm.from_expressions(
            "", "((PRS || PST || PST_STAT || HAB || INT || DES || HOR) (NEG || A) || GER || IMP || NEG PAM)")
        tenses = ["PRS", "PST", "PST STAT", "HAB", "INT", "DES", "HOR"]
        expected = {"ceyy", "ceyy GER", "ceyy IMP", "ceyy NEG", "ceyy A", "ceyy NEG PAM", "ceyy PAM"}
        for tense in tenses:
            expected |= {f"ceyy {tense}", f"ceyy {tense} NEG", f"ceyy {tense} A"}

        self.assertEqual(paradigm.get_paradigm("ceyy"), expected)
        self.assertEqual(len(expected), 28)

    def test_prefix_paradigm(self):
        paradigm = Paradigm.from_expressions("+2 *10", "")

        self.assertEqual(paradigm.get_paradigm("onn^u"), {"+2 *10 onn^u", "+2 onn^u", "*10 onn^u", "onn^u"})

    def test_from_affixes_adds_empty_affix(self):
        paradigm = Paradigm.from_affixes([], ["PL"])

        self.assertEqual(paradigm.get_paradigm("w"), {"w", "w PL"})


if __name__ == '__main__':
    unittest.main()
