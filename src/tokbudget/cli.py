"""Command-line interface: count, encode and decode tokens, manage resources."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import Settings
from .errors import TokBudgetError
from .factory import DEFAULT_ENCODING, DEFAULT_MODEL, get_tokenizer
from .resources import convert_encoder_json, fetch_resources

log = logging.getLogger(__name__)


def format_tokens(tokens: list[int]) -> str:
    """Format token ids as ``[a, b, c]``."""
    return "[" + ", ".join(str(tok) for tok in tokens) + "]"


def cmd_count(args: argparse.Namespace) -> int:
    """Print the token count of each file, and a total for several files."""
    tokenizer = get_tokenizer(args.model)
    show_paths = args.f or len(args.files) > 1

    total = 0
    for fn in args.files:
        text = Path(fn).read_text(encoding="utf-8", errors="replace")
        count = tokenizer.token_count(text)
        total += count
        if show_paths:
            print(f"{Path(fn).name}: {count}")
        else:
            print(count)

    if len(args.files) > 1:
        print(f"TOTAL: {total}")
    return 0


def cmd_encode(args: argparse.Namespace) -> int:
    print(format_tokens(get_tokenizer(args.model).encode(args.text)))
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    print(get_tokenizer(args.model).decode(args.tokens))
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert an ``encoder.json`` vocabulary into the NUL-delimited token list."""
    with open(args.encoder_json, encoding="utf-8") as f:
        mapping = json.load(f)
    out = Path(args.output)
    out.write_bytes(convert_encoder_json(mapping))
    log.info(f"wrote {len(mapping)} tokens to {out}")
    return 0


def cmd_fetch(args: argparse.Namespace) -> int:
    tokens_path, merges_path = fetch_resources(args.encoding, Settings.from_env())
    print(tokens_path)
    print(merges_path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tokbudget",
        description="Count GPT tokens and manage tokenizer resources.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    count = sub.add_parser("count", help="Count tokens in files.")
    count.add_argument("files", nargs="+", help="Files to count.")
    count.add_argument(
        "-f",
        action="store_true",
        help="Print file names even if only a single file is given.",
    )
    count.add_argument("--model", default=DEFAULT_MODEL, help=f"Model name (default: {DEFAULT_MODEL}).")
    count.set_defaults(func=cmd_count)

    encode = sub.add_parser("encode", help="Print the token ids of TEXT.")
    encode.add_argument("text")
    encode.add_argument("--model", default=DEFAULT_MODEL)
    encode.set_defaults(func=cmd_encode)

    decode = sub.add_parser("decode", help="Print the text of token ids.")
    decode.add_argument("tokens", nargs="*", type=int)
    decode.add_argument("--model", default=DEFAULT_MODEL)
    decode.set_defaults(func=cmd_decode)

    convert = sub.add_parser(
        "convert", help="Convert an encoder.json vocabulary into a token list."
    )
    convert.add_argument("encoder_json")
    convert.add_argument("output")
    convert.set_defaults(func=cmd_convert)

    fetch = sub.add_parser("fetch", help="Download vocabulary resources into the cache.")
    fetch.add_argument("--encoding", default=DEFAULT_ENCODING)
    fetch.set_defaults(func=cmd_fetch)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        return args.func(args)
    except (TokBudgetError, OSError) as e:
        log.error(str(e).strip())
        return 1


if __name__ == "__main__":
    sys.exit(main())
