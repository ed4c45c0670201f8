"""Command line entry point."""
import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from tqdm import tqdm

from langfile_translator.app_config import AppConfig, load_app_config
from langfile_translator.exceptions import ConfigurationError, TranslationRunError
from langfile_translator.languages import base_language
from langfile_translator.models import TranslationOptions
from langfile_translator.pipeline import SERVICES, build_backend, translate_document

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="langfile-translator",
        description="Translate the values of PHP language files ('key' => 'value')."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    translate = subparsers.add_parser("translate", help="Translate a language file.")
    translate.add_argument("input", help="Path of the language file to translate.")
    translate.add_argument("-o", "--output", help="Where to write the result (default: <input>.<target>.php).")
    translate.add_argument("--source", help="Source language code, 'auto' means English.")
    translate.add_argument("--target", help="Target language code.")
    translate.add_argument("--service", choices=SERVICES, help="Translation service to use.")
    chunking = translate.add_mutually_exclusive_group()
    chunking.add_argument("--chunk-size", type=int, help="Values sent per chunk.")
    chunking.add_argument("--no-chunking", action="store_true", help="Send all values in a single chunk.")
    translate.add_argument("--no-preserve-html", action="store_true", help="Do not protect markup tags.")
    translate.add_argument("--translate-comments", action="store_true",
                           help="Translate known comment boilerplate as well.")
    translate.add_argument("--api-key", help="API key for the service (default: from the environment).")
    translate.add_argument("--api-endpoint", help="Override the service endpoint.")

    serve = subparsers.add_parser("serve", help="Run the HTTP translation endpoint.")
    serve.add_argument("--host", help="Interface to bind.")
    serve.add_argument("--port", type=int, help="Port to listen on.")
    return parser


def options_from_args(args: argparse.Namespace, defaults: TranslationOptions) -> TranslationOptions:
    chunk_size = args.chunk_size if args.chunk_size is not None else defaults.chunk_size
    return TranslationOptions(
        source_lang=args.source or defaults.source_lang,
        target_lang=args.target or defaults.target_lang,
        preserve_html=defaults.preserve_html and not args.no_preserve_html,
        translate_comments=args.translate_comments or defaults.translate_comments,
        chunk_processing=defaults.chunk_processing and not args.no_chunking,
        chunk_size=chunk_size,
        service=args.service or defaults.service,
        api_key=args.api_key or defaults.api_key,
        api_endpoint=args.api_endpoint or defaults.api_endpoint,
    )


def default_output_path(input_path: str, target_lang: str) -> str:
    root, ext = os.path.splitext(input_path)
    return f"{root}.{target_lang}{ext or '.php'}"


def run_translate(args: argparse.Namespace, config: AppConfig) -> int:
    options = options_from_args(args, config.default_options)
    if base_language(options.target_lang) not in config.language_codes:
        logger.warning(f"Target language '{options.target_lang}' is not in the supported locales.")

    try:
        with open(args.input, 'r', encoding='utf-8') as f:
            document = f.read()
    except OSError as e:
        logger.error(f"Could not read '{args.input}': {e}")
        return 1

    try:
        backend = build_backend(options, config)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    with tqdm(total=100, desc=os.path.basename(args.input), unit="%") as progress_bar:
        def on_progress(percent: float, current_chunk: int, total_chunks: int) -> None:
            progress_bar.set_postfix_str(f"chunk {current_chunk}/{total_chunks}")
            progress_bar.update(percent - progress_bar.n)

        try:
            outcome = asyncio.run(translate_document(document, options, backend, on_progress))
        except TranslationRunError as e:
            logger.error(f"Translation failed, no output written: {e}")
            return 1

    output_path = args.output or default_output_path(args.input, options.target_lang)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(outcome.document)

    print(outcome.summary.describe())
    print(f"Output written to {output_path} in {outcome.summary.processing_time_seconds}s.")
    for warning in outcome.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    return 0


def run_serve(args: argparse.Namespace, config: AppConfig) -> int:
    from langfile_translator.server import create_app

    app = create_app(config)
    app.run(host=args.host or config.server_host, port=args.port or config.server_port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_app_config()
    if args.command == "translate":
        return run_translate(args, config)
    return run_serve(args, config)


if __name__ == "__main__":
    sys.exit(main())
