"""
POMO Editor

Copyright (C) 2024 Urban-Equipe

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

import argparse
import json
import logging
import os
import sys

from catalog_statistics import CatalogStatistics
from config_manager import ConfigManager
from constants import APP_TITLE, LOG_FORMAT
from errors import CatalogError
from file_handlers import FileHandler
from mo_compiler import MOCompiler
from po_parser import POParser
from search_replace import SEARCH_FIELDS, SearchReplaceHandler

logger = logging.getLogger(__name__)


def initialize(config_file=None, log_level=None):
    """Bootstrap the editor: load the configuration and set up logging

    Called once by the host process before any catalog is opened.
    Returns the loaded ConfigManager.
    """
    config = ConfigManager(config_file)
    config.load()
    level = (log_level or config.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    logger.debug("%s initialized with %s", APP_TITLE, config.config_file)
    return config


def cmd_check(args, config):
    text = FileHandler.load_po_file(args.file)
    header, entries = POParser().parse(text)
    print(f"{args.file}: {len(entries)} entries, charset {header.charset}, "
          f"{header.plural_count} plural forms")
    return 0


def cmd_stats(args, config):
    session = FileHandler.open_po_file(args.file)
    stats = CatalogStatistics.calculate_session_statistics(session)
    if args.json:
        print(json.dumps(stats, indent=2))
        return 0
    print(f"Entries:      {stats['total_entries']}")
    print(f"Translated:   {stats['translated']} ({stats['percent_translated']}%)")
    print(f"Partial:      {stats['partially_translated']}")
    print(f"Untranslated: {stats['untranslated']}")
    print(f"Fuzzy:        {stats['fuzzy']}")
    print(f"Plural:       {stats['plural']}")
    return 0


def cmd_compile(args, config):
    text = FileHandler.load_po_file(args.file)
    header, entries = POParser().parse(text)
    mo_bytes = MOCompiler().compile(header, entries)
    mo_path = args.output or FileHandler.mo_path_for(args.file)
    FileHandler.write_atomic(mo_path, mo_bytes)
    config.add_recent_file(args.file)
    config.save()
    print(f"Compiled {args.file} -> {mo_path}")
    return 0


def cmd_search(args, config):
    session = FileHandler.open_po_file(args.file)
    fields = args.field or SEARCH_FIELDS
    matches = SearchReplaceHandler.find_entries(
        session, args.term, fields, args.case_sensitive, args.whole_word)
    for entry in matches:
        context = f" [{entry.context}]" if entry.context is not None else ""
        print(f"{entry.source_text!r}{context} -> {list(entry.translations)!r}")
    print(f"{len(matches)} match(es)")
    return 0


def cmd_replace(args, config):
    session = FileHandler.open_po_file(args.file, wrap_width=config.wrap_width)
    if args.dry_run:
        preview = SearchReplaceHandler.preview_replacements(
            session, args.search, args.replace, args.case_sensitive, args.whole_word)
        for (source_text, _), change in preview.items():
            print(f"{source_text!r}: {list(change['old'])!r} -> {list(change['new'])!r}")
        print(f"{len(preview)} entr(ies) would change")
        return 0

    edited = SearchReplaceHandler.apply_replacements(
        session, args.search, args.replace, args.case_sensitive, args.whole_word)
    if not edited:
        print("No matches, nothing saved")
        return 0
    po_bytes, mo_bytes = session.commit()
    backup_path = FileHandler.save_catalog(args.file, po_bytes, mo_bytes, backup=config.create_backups)
    config.add_recent_file(args.file)
    config.save()
    print(f"Replaced in {len(edited)} entr(ies), saved {args.file}")
    if backup_path:
        print(f"Backup: {backup_path}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog='pomo-editor', description=f"{APP_TITLE}: edit and compile gettext catalogs")
    parser.add_argument('--config', help="path of the JSON configuration file")
    parser.add_argument('--log-level', help="override the configured log level")
    subparsers = parser.add_subparsers(dest='command', required=True)

    check = subparsers.add_parser('check', help="parse a PO file and report problems")
    check.add_argument('file')
    check.set_defaults(handler=cmd_check)

    stats = subparsers.add_parser('stats', help="show translation progress")
    stats.add_argument('file')
    stats.add_argument('--json', action='store_true', help="print statistics as JSON")
    stats.set_defaults(handler=cmd_stats)

    compile_ = subparsers.add_parser('compile', help="compile a PO file to MO")
    compile_.add_argument('file')
    compile_.add_argument('-o', '--output', help="MO path (default: next to the PO file)")
    compile_.set_defaults(handler=cmd_compile)

    search = subparsers.add_parser('search', help="list entries containing a term")
    search.add_argument('file')
    search.add_argument('term')
    search.add_argument('--field', action='append', choices=SEARCH_FIELDS,
                        help="restrict the search to a field (repeatable)")
    search.add_argument('--case-sensitive', action='store_true')
    search.add_argument('--whole-word', action='store_true')
    search.set_defaults(handler=cmd_search)

    replace = subparsers.add_parser('replace', help="replace text in translations and save")
    replace.add_argument('file')
    replace.add_argument('search')
    replace.add_argument('replace')
    replace.add_argument('--case-sensitive', action='store_true')
    replace.add_argument('--whole-word', action='store_true')
    replace.add_argument('--dry-run', action='store_true', help="show changes without saving")
    replace.set_defaults(handler=cmd_replace)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = initialize(args.config, args.log_level)
    try:
        return args.handler(args, config)
    except CatalogError as e:
        logger.error("%s: %s", os.path.basename(args.file), e)
        return 1
    except OSError as e:
        logger.error("Error accessing %s: %s", args.file, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
