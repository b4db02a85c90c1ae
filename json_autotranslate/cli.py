"""
Command line entry point.

    json-autotranslate -i locales/en.json -g locales.txt -s deepl -c $DEEPL_KEY
    python -m json_autotranslate --list-services
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import traceback
import warnings

from json_autotranslate.config import RunConfig, get_settings
from json_autotranslate.core.errors import AutoTranslateError, InvalidKeyError, ProviderCallError
from json_autotranslate.core.models import FileType, RunResult, Skipped, Translated
from json_autotranslate.matchers import list_matchers
from json_autotranslate.services import list_services
from json_autotranslate.sync.engine import SyncEngine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-autotranslate",
        description="Translate JSON locale files, only sending new or changed strings",
    )
    parser.add_argument(
        "-i", "--input",
        dest="input_file",
        help="the input file containing the source language to be translated",
    )
    parser.add_argument(
        "-g", "--locales-file",
        help="text file with one target locale code per line",
    )
    parser.add_argument("--cache", dest="cache_dir", help="set the cache directory")
    parser.add_argument("--translations-dir", help="directory the locale files are written to")
    parser.add_argument("-l", "--source-language", help="specify the source language")
    parser.add_argument(
        "-t", "--type",
        dest="file_type",
        choices=[t.value for t in FileType],
        help="specify the file structure type",
    )
    parser.add_argument("-s", "--service", help="selects the service to be used for translation")
    parser.add_argument(
        "--list-services", action="store_true", help="outputs a list of available services"
    )
    parser.add_argument(
        "-m", "--matcher", help="selects the matcher to be used for interpolations"
    )
    parser.add_argument(
        "--list-matchers", action="store_true", help="outputs a list of available matchers"
    )
    parser.add_argument(
        "-c", "--config",
        dest="service_config",
        help="supply a config parameter (e.g. an API key) to the translation service",
    )
    parser.add_argument(
        "-f", "--fix-inconsistencies",
        action="store_true",
        help="automatically fixes inconsistent key-value pairs by setting the value to the key",
    )
    parser.add_argument(
        "-d", "--delete-unused-strings",
        action="store_true",
        help="deletes strings in translation files that don't exist in the template",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="translate but don't write any file"
    )
    parser.add_argument(
        "--retranslate-changed-source",
        action="store_true",
        help="also retranslate keys whose source value changed since the last run",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig.from_settings(
        input_file=args.input_file,
        locales_file=args.locales_file,
        cache_dir=args.cache_dir,
        translations_dir=args.translations_dir,
        source_language=args.source_language,
        file_type=args.file_type,
        service=args.service,
        matcher=args.matcher,
        service_config=args.service_config,
        fix_inconsistencies=args.fix_inconsistencies,
        delete_unused_strings=args.delete_unused_strings,
        dry_run=args.dry_run,
        retranslate_changed_source=args.retranslate_changed_source,
    )


def print_report(result: RunResult) -> None:
    """Human-readable summary of a run."""
    print(f"🏭 {result.source_file} ({result.file_type.value})")

    if result.inconsistent_keys:
        print(f"├── {len(result.inconsistent_keys)} inconsistent key(s)")
        if result.fixed_inconsistencies:
            print("└── Fixed all inconsistencies.")
        else:
            print("└── Please either fix these inconsistencies manually or supply the -f flag.")

    for name in result.deleted_files:
        print(f"🗑  {name} is no longer used and was deleted.")

    for outcome in result.outcomes:
        if isinstance(outcome, Translated):
            line = f"💬 {outcome.locale}: +{outcome.added}"
            if outcome.removed:
                line += f"/-{outcome.removed}"
            if outcome.changed_from_cache is not None:
                line += f" ({outcome.changed_from_cache} changes from cache)"
            print(line)
        elif isinstance(outcome, Skipped):
            print(f"🙈 {outcome.reason}. Skipped.")
        else:
            print(f"❌ {outcome.locale}: {outcome.reason}")

    if result.cached_sources:
        print("🗂  Translation files have been cached.")
    if result.dry_run:
        print("Dry run: no files were written.")

    print(f"\n{result.added} new translations have been added!")
    if result.skipped:
        print(f"{len(result.skipped)} language(s) were skipped.")
    if result.removed:
        print(f"{result.removed} translations have been removed!")


def main(argv: list[str] | None = None) -> int:
    """Run json-autotranslate from the command line."""
    args = build_parser().parse_args(argv)

    if args.list_services:
        print("Available services:")
        print(", ".join(list_services()))
        return 0

    if args.list_matchers:
        print("Available matchers:")
        print(", ".join(list_matchers()))
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_settings().log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)
    warnings.simplefilter("default")

    try:
        config = config_from_args(args)
        result = asyncio.run(SyncEngine().run(config))
    except AutoTranslateError as e:
        print("\nAn error has occurred:", file=sys.stderr)
        print(str(e), file=sys.stderr)
        if isinstance(e, InvalidKeyError):
            print(e.remediation, file=sys.stderr)
        if isinstance(e, ProviderCallError) and e.result is not None:
            print_report(e.result)
        traceback.print_exc()
        return 1

    print_report(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
