"""
Command-line interface for morphgen.

- Generating forms for glossed words
- Listing the paradigm of a word
- Inflecting a word through its whole paradigm
- Unfolding a vocabulary list into a form file
"""
import sys
import logging
import json
import argparse
from dataclasses import replace

from morphgen.config import MorphGenConfig
from morphgen.diagnostics import ResourceLoadError
from morphgen.logging_config import setup_logging


def _load_generator(args, config):
    from morphgen.generator import MorphGen

    try:
        return MorphGen.from_files(args.rules, getattr(args, 'paradigms', None), config=config)
    except ResourceLoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


def _print_words(words, fmt):
    words = sorted(words, key=lambda w: (w.gloss, w.form))
    if fmt == 'json':
        print(json.dumps([{'gloss': w.gloss, 'form': w.form} for w in words], indent=2, ensure_ascii=False))
    else:
        for w in words:
            print(f"{w.gloss} = {w.form}")


def cmd_generate(args, config):
    """Generate realizations for glossed words."""
    generator = _load_generator(args, config)
    glosses = args.gloss
    if not glosses:
        print("Enter a glossed word:")
        try:
            glosses = [input().strip()]
        except EOFError:
            print("ERROR: no glossed word given", file=sys.stderr)
            sys.exit(1)

    results = {}
    for gloss in glosses:
        results[gloss] = generator.generate(gloss)

    if args.format == 'json':
        print(json.dumps(
            {gloss: sorted(w.form for w in words) for gloss, words in results.items()},
            indent=2, ensure_ascii=False,
        ))
    else:
        for gloss, words in results.items():
            print(f"generate({gloss!r}):")
            for w in sorted(words, key=lambda w: w.form):
                print(f"\t{w.gloss} = {w.form}")


def cmd_paradigm(args, config):
    """Print all glosses of a word's paradigm."""
    from morphgen.generator import MorphGen
    from morphgen.loader import load_paradigm_file

    try:
        paradigms, pattern = load_paradigm_file(args.paradigms)
    except ResourceLoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    glosses = sorted(MorphGen([], paradigms, pattern).get_paradigm(args.word, args.pos))
    if args.format == 'json':
        print(json.dumps(glosses, indent=2, ensure_ascii=False))
    else:
        for gloss in glosses:
            print(gloss)


def cmd_inflect(args, config):
    """Inflect a word through its complete paradigm."""
    generator = _load_generator(args, config)
    _print_words(generator.get_inflections(args.word, args.pos), args.format)


def cmd_unfold(args, config):
    """Unfold a vocabulary list into all inflected forms."""
    from morphgen.vocabulary import unfold_vocabulary

    generator = _load_generator(args, config)
    try:
        written = unfold_vocabulary(generator, args.infile, args.outfile,
                                    append=args.append, progress=not args.quiet)
    except ResourceLoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"✓ Wrote {written} forms to {args.outfile}")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='morphgen',
        description='morphgen: rule-based morphological generation from glossed words',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Realize glossed words
  morphgen generate data/mal-rules-simple.tsv "ka.tal GEN" "pa_la;m PL GEN"
  morphgen generate data/ryk-rules.tsv "hethel<>PC|INE" --format json

  # List a paradigm
  morphgen paradigm data/mal-affixes.tsv puucca ntest

  # Inflect a word through its paradigm
  morphgen inflect data/mal-rules-simple.tsv data/mal-affixes.tsv "pa_la;m" ntest

  # Unfold a vocabulary list
  morphgen unfold data/mal-rules-simple.tsv data/mal-affixes.tsv vocab.tsv forms.tsv --append
        """
    )
    parser.add_argument('--debug', action='store_true', help='Verbose logging, including rule matches')
    parser.add_argument('--log-file', help='Also append log output to this file')
    parser.add_argument('--max-match-steps', type=int,
                        help='Matcher step budget per rule application')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # --- generate command ---
    parser_generate = subparsers.add_parser('generate', help='Generate forms for glossed words')
    parser_generate.add_argument('rules', help='Rule file')
    parser_generate.add_argument('gloss', nargs='*', help='Glossed words')
    parser_generate.add_argument('-p', '--paradigms', help='Paradigm file (enables gloss filtering)')
    parser_generate.add_argument('--format', choices=['text', 'json'], default='text',
                                 help='Output format (default: text)')
    parser_generate.set_defaults(func=cmd_generate)

    # --- paradigm command ---
    parser_paradigm = subparsers.add_parser('paradigm', help='List the paradigm of a word')
    parser_paradigm.add_argument('paradigms', help='Paradigm file')
    parser_paradigm.add_argument('word', help='Lemma')
    parser_paradigm.add_argument('pos', help='Part of speech label')
    parser_paradigm.add_argument('--format', choices=['text', 'json'], default='text',
                                 help='Output format (default: text)')
    parser_paradigm.set_defaults(func=cmd_paradigm)

    # --- inflect command ---
    parser_inflect = subparsers.add_parser('inflect', help='Inflect a word through its paradigm')
    parser_inflect.add_argument('rules', help='Rule file')
    parser_inflect.add_argument('paradigms', help='Paradigm file')
    parser_inflect.add_argument('word', help='Lemma')
    parser_inflect.add_argument('pos', help='Part of speech label')
    parser_inflect.add_argument('--format', choices=['text', 'json'], default='text',
                                help='Output format (default: text)')
    parser_inflect.set_defaults(func=cmd_inflect)

    # --- unfold command ---
    parser_unfold = subparsers.add_parser('unfold', help='Unfold a vocabulary list into all forms')
    parser_unfold.add_argument('rules', help='Rule file')
    parser_unfold.add_argument('paradigms', help='Paradigm file')
    parser_unfold.add_argument('infile', help='Vocabulary list: lemma, POS, translation')
    parser_unfold.add_argument('outfile', help='Output form list')
    parser_unfold.add_argument('--append', action='store_true',
                               help='Keep existing output and skip lemmas already listed as forms')
    parser_unfold.add_argument('-q', '--quiet', action='store_true', help='No progress bar')
    parser_unfold.set_defaults(func=cmd_unfold)

    args = parser.parse_args(argv)

    # If no command specified, show help
    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = MorphGenConfig.from_env()
    if args.debug:
        config = replace(config, debug=True)
    if args.log_file:
        config = replace(config, log_file=args.log_file)
    if args.max_match_steps:
        config = replace(config, max_match_steps=args.max_match_steps)
    setup_logging(log_file=config.log_file, level=logging.WARNING, debug=config.debug)

    args.func(args, config)


if __name__ == '__main__':
    main()
