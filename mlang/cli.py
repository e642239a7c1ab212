from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import find_lexicon, load_lexicon
from .lexer import Lexer, LexerError
from .lexicon import Lexicon, LexiconError
from .listing import build_report, dumps, format_error, format_token_listing
from .parser import Parser, ParserError
from .tokens import TokenStream
from .version import tool_version

_LOG = logging.getLogger("mlang")

EXIT_OK = 0
EXIT_ANALYSIS_ERROR = 1
EXIT_USAGE_ERROR = 2

SUCCESS_MESSAGE = "Syntax analysis completed successfully."


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if (verbose or os.environ.get("MLANG_DEBUG")) else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mlang",
        description="Lexical and syntax analyzer for mlang programs",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("file", type=Path, help="source file")
        sp.add_argument("--json", action="store_true", help="JSON output")
        sp.add_argument(
            "--lexicon",
            type=Path,
            metavar="YAML",
            help="language tables (default: ./mlang.yaml if present, else built-in)",
        )

    sp_tokens = sub.add_parser("tokens", help="Token listing")
    add_common(sp_tokens)

    sp_check = sub.add_parser("check", help="Token listing followed by syntax analysis")
    add_common(sp_check)
    sp_check.add_argument("--quiet", action="store_true", help="do not print the token listing")

    return p


def _lexicon(ns: argparse.Namespace) -> Lexicon:
    if ns.lexicon is not None:
        return load_lexicon(ns.lexicon)
    return find_lexicon(Path.cwd())


def _tokenize_file(path: Path, lexicon: Lexicon) -> TokenStream:
    with path.open(encoding="utf-8") as f:
        return Lexer(lexicon).tokenize(f)


def _run(ns: argparse.Namespace) -> int:
    lexicon = _lexicon(ns)
    show_tokens = not getattr(ns, "quiet", False)

    try:
        tokens = _tokenize_file(ns.file, lexicon)
    except LexerError as e:
        if ns.json:
            sys.stdout.write(dumps(build_report(None, e, "lexical")))
        else:
            sys.stderr.write(format_error(e, "Lexical") + "\n")
        return EXIT_ANALYSIS_ERROR

    if ns.cmd == "tokens":
        if ns.json:
            sys.stdout.write(dumps(build_report(tokens)))
        else:
            sys.stdout.write(format_token_listing(tokens))
        return EXIT_OK

    if show_tokens and not ns.json:
        sys.stdout.write(format_token_listing(tokens))

    try:
        Parser(tokens, lexicon).parse()
    except ParserError as e:
        if ns.json:
            sys.stdout.write(dumps(build_report(tokens if show_tokens else None, e, "syntax")))
        else:
            sys.stderr.write(format_error(e, "Syntax") + "\n")
        return EXIT_ANALYSIS_ERROR

    if ns.json:
        sys.stdout.write(dumps(build_report(tokens if show_tokens else None)))
    else:
        sys.stdout.write(SUCCESS_MESSAGE + "\n")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        return _run(ns)
    except LexiconError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return EXIT_USAGE_ERROR
    except (OSError, UnicodeDecodeError) as e:
        sys.stderr.write(f"Cannot read {ns.file}: {e}\n")
        return EXIT_USAGE_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
