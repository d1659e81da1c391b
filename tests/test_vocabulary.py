"""
Tests for vocabulary unfolding.
"""
import shutil
import tempfile
import unittest
from pathlib import Path

from morphgen.diagnostics import ResourceLoadError
from morphgen.generator import MorphGen
from morphgen.vocabulary import unfold_vocabulary

DATA_DIR = Path(__file__).parent.parent / "data"

PALAM_LINES = [
    "pa_la;m\tpa_la;m\t/\tplank\t/|NOM",
    "pa_la;mu.te\tpa_la;m|u.te\t\tplank\t|GEN",
    "pa_la;n;na.l\tpa_la;n|;na.l\t/\tplank\t|PL/|PL|NOM",
    "pa_la;n;na.lu.te\tpa_la;n|;na.l|u.te\t\tplank\t|PL|GEN",
]


class TestUnfoldVocabulary(unittest.TestCase):

    def setUp(self):
        """Create a temporary directory and the generator."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.gen = MorphGen.from_files(DATA_DIR / "mal-rules-simple.tsv", DATA_DIR / "mal-affixes.tsv")
        self.outfile = self.test_dir / "forms.tsv"

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def write_vocabulary(self, *lines):
        infile = self.test_dir / "vocab.tsv"
        infile.write_text("".join(line + "\n" for line in lines), encoding='utf-8')
        return infile

    def test_unfolds_every_form(self):
        infile = self.write_vocabulary("pa_la;m\tntest\tplank")

        written = unfold_vocabulary(self.gen, infile, self.outfile, progress=False)

        self.assertEqual(written, 4)
        self.assertEqual(self.outfile.read_text(encoding='utf-8').splitlines(), PALAM_LINES)

    def test_malformed_lines_are_skipped(self):
        infile = self.write_vocabulary("no tabs here", "pa_la;m\tntest\tplank", "a\tb")

        with self.assertLogs('morphgen.vocabulary', level='WARNING'):
            written = unfold_vocabulary(self.gen, infile, self.outfile, progress=False)

        self.assertEqual(written, 4)

    def test_overwrites_without_append(self):
        self.outfile.write_text("old\tline\n", encoding='utf-8')
        infile = self.write_vocabulary("pa_la;m\tntest\tplank")

        unfold_vocabulary(self.gen, infile, self.outfile, progress=False)

        self.assertNotIn("old\tline", self.outfile.read_text(encoding='utf-8'))

    def test_append_keeps_lines_and_skips_known_forms(self):
        unfold_vocabulary(self.gen, self.write_vocabulary("pa_la;m\tntest\tplank"), self.outfile, progress=False)

        infile = self.write_vocabulary("pa_la;mu.te\tntest\tof the plank", "ka.tal\tntest\tsea")
        written = unfold_vocabulary(self.gen, infile, self.outfile, append=True, progress=False)

        lines = self.outfile.read_text(encoding='utf-8').splitlines()
        self.assertEqual(written, 2)
        self.assertEqual(lines[:4], PALAM_LINES)
        self.assertEqual(lines[4:], [
            "ka.tal\tka.tal\t/\tsea\t/|NOM",
            "ka.talin_re\tka.tal|in_re\t\tsea\t|GEN",
        ])

    def test_unknown_part_of_speech_writes_bare_lemma(self):
        infile = self.write_vocabulary("ka.tal\tadj\tsea")

        written = unfold_vocabulary(self.gen, infile, self.outfile, progress=False)

        self.assertEqual(written, 1)
        self.assertEqual(self.outfile.read_text(encoding='utf-8'), "ka.tal\tka.tal\t\tsea\t\n")

    def test_missing_vocabulary_raises(self):
        with self.assertRaises(ResourceLoadError):
            unfold_vocabulary(self.gen, self.test_dir / "missing.tsv", self.outfile, progress=False)


if __name__ == '__main__':
    unittest.main()
