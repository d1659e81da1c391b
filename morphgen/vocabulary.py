"""
Batch unfolding of a vocabulary list into all of its inflected forms.

Input lines are `lemma<TAB>pos<TAB>translation`. Every inflected form is
written as

    phon<TAB>form<TAB>prefixes<TAB>translation<TAB>suffixes

where phon is the form without boundary markers and prefixes/suffixes are the
slash-joined parts of the glosses before and after the lemma.
"""
import re
import logging
from pathlib import Path
from typing import Dict, List

from tqdm import tqdm

from morphgen.diagnostics import DiagnosticSink
from morphgen.generator import MorphGen
from morphgen.glossed_word import GlossedWord
from morphgen.loader import read_lines

logger = logging.getLogger(__name__)

SEPARATORS = re.compile(r"[|&<>]")


def _is_marked(form: str) -> bool:
    """True for forms that show a morpheme boundary or an infix slot."""
    return '|' in form or '<>' in form


def unfold_vocabulary(generator: MorphGen, infile, outfile, append=False, progress=True,
                      sink=None) -> int:
    """
    Write all possible forms of the words in a vocabulary list to a file.

    Args:
        generator: The generator providing paradigms and rules.
        infile: Tab-separated lemma, POS and translation per line.
        outfile: Output file, overwritten unless `append` is set.
        append: Keep the lines already in `outfile` and skip lemmas that
            already appear there as an inflected form.
        progress: Show a tqdm progress bar.
        sink: Receives non-fatal problems.

    Returns:
        Number of new lines written.

    Raises:
        ResourceLoadError: if an input file cannot be read.
    """
    if sink is None:
        sink = DiagnosticSink()
    outfile = Path(outfile)

    previous: List[str] = []
    forms = set()
    if append and outfile.exists():
        for line in read_lines(outfile):
            if not line:
                continue
            previous.append(line)
            phon, tab, _ = line.partition('\t')
            if tab and _is_marked(line):
                forms.add(phon)

    entries = [line for line in read_lines(infile) if line]
    written = 0
    with open(outfile, 'w', encoding='utf-8') as out:
        for line in previous:
            out.write(line + "\n")

        for line in tqdm(entries, desc="Unfolding vocabulary", unit=" entry", disable=not progress):
            fields = line.split('\t')
            if len(fields) != 3:
                logger.warning(f"Skipping malformed vocabulary line: {line!r}")
                continue
            lemma, pos, translation = fields
            if lemma in forms:
                logger.info(f"Entry exists as inflected form: {lemma}")
                continue

            splits: Dict[str, List[GlossedWord]] = {}
            for word in generator.get_inflections(lemma, pos, sink):
                splits.setdefault(word.form, []).append(word)

            for form in sorted(splits):
                phon = SEPARATORS.sub("", form)
                if _is_marked(form):
                    forms.add(phon)
                prefixes, suffixes = _split_glosses(splits[form], lemma)
                out.write(f"{phon}\t{form}\t{prefixes}\t{translation}\t{suffixes}\n")
                written += 1

    logger.info(f"Wrote {written} forms to {outfile}")
    return written


def _split_glosses(words: List[GlossedWord], lemma: str):
    prefixes = []
    suffixes = []
    for word in sorted(words, key=lambda w: w.gloss):
        s = word.gloss.find(lemma)
        if s < 0:
            logger.warning(f"Lemma {lemma!r} not found in gloss {word.gloss!r}")
            continue
        prefixes.append(word.gloss[:s])
        suffixes.append(word.gloss[s + len(lemma):])
    return "/".join(prefixes), "/".join(suffixes)
