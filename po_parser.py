"""
PO Parser for POMO Editor

Reads PO text into a CatalogHeader and the ordered list of entries.
"""

import logging
import re

from constants import PO_ESCAPES
from data_model import CatalogHeader, Entry
from errors import DuplicateEntryError, POSyntaxError

logger = logging.getLogger(__name__)

KEYWORD_RE = re.compile(r'^(msgctxt|msgid_plural|msgid|msgstr)(?:\[(\d+)\])?\s*(".*)$')
STRING_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')
ESCAPE_RE = re.compile(r'\\(.)')


def unescape(value, lineno=None):
    """Decode PO escape sequences"""
    def replace(match):
        char = match.group(1)
        if char not in PO_ESCAPES:
            raise POSyntaxError(f"unknown escape sequence \\{char}", lineno)
        return PO_ESCAPES[char]
    return ESCAPE_RE.sub(replace, value)


def unquote(token, lineno=None):
    """Strip the quotes from a PO string literal and decode it"""
    match = STRING_RE.fullmatch(token.strip())
    if not match:
        raise POSyntaxError(f"unterminated or malformed string {token.strip()!r}", lineno)
    return unescape(match.group(1), lineno)


def parse_header_fields(text, lineno=None):
    """Parse the `Key: value` lines of the header msgstr"""
    fields = {}
    for line in text.split('\n'):
        if not line.strip():
            continue
        name, sep, value = line.partition(':')
        if not sep or not name.strip():
            raise POSyntaxError(f"malformed header field {line!r}", lineno)
        fields[name.strip()] = value.strip()
    return fields


class _Record:
    """Comments and directives collected for the entry being read"""

    def __init__(self):
        self.lineno = None
        self.comment_lines = []  # Every comment line, verbatim
        self.translator_comments = []
        self.extracted_comments = []
        self.reference_locations = []
        self.flags = []
        self.previous = []
        self.obsolete = []
        self.msgctxt = None
        self.msgid = None
        self.msgid_plural = None
        self.msgstr = None
        self.msgstr_plural = []
        self.field = None  # Field that continuation lines extend
        self.continued = False
        self.widths = []

    def set(self, field, value, lineno, width):
        if self.lineno is None:
            self.lineno = lineno
        if field == 'msgstr_plural':
            self.msgstr_plural.append(value)
        else:
            setattr(self, field, value)
        self.field = field
        self.widths.append(width)

    def extend(self, value, width):
        if self.field == 'msgstr_plural':
            self.msgstr_plural[-1] += value
        else:
            setattr(self, self.field, getattr(self, self.field) + value)
        self.continued = True
        self.widths.append(width)

    def add_comment(self, line):
        self.comment_lines.append(line)
        if line.startswith('#,'):
            self.flags.extend(flag.strip() for flag in line[2:].split(',') if flag.strip())
        elif line.startswith('#:'):
            self.reference_locations.extend(line[2:].split())
        elif line.startswith('#.'):
            self.extracted_comments.append(_comment_text(line[2:]))
        elif line.startswith('#|'):
            self.previous.append(line)
        elif line.startswith('#~'):
            self.obsolete.append(line)
        else:
            self.translator_comments.append(_comment_text(line[1:]))

    @property
    def has_translation(self):
        return self.msgstr is not None or bool(self.msgstr_plural)


def _comment_text(text):
    # A single separating space belongs to the comment marker
    return text[1:] if text.startswith(' ') else text


class _CatalogReader:
    """Single-use state machine over the lines of one PO document"""

    def __init__(self):
        self.entries = []  # [(Entry, lineno)]
        self.identities = set()
        self.header_record = None
        self.current = _Record()
        self.wrapped = False
        self.max_width = 0

    def read(self, text):
        if text.startswith('\ufeff'):
            text = text[1:]
        for lineno, line in enumerate(text.split('\n'), 1):
            self.read_line(line.rstrip('\r').strip(), lineno)

        if self.current.msgid is not None:
            self.finish_record()
        elif self.current.msgctxt is not None:
            raise POSyntaxError("msgctxt without msgid", self.current.lineno)
        return self.build()

    def read_line(self, line, lineno):
        current = self.current
        if not line:
            current.field = None
            return

        if line.startswith('#'):
            if current.msgid is not None:
                self.finish_record()
            elif current.msgctxt is not None:
                raise POSyntaxError("msgctxt without msgid", current.lineno)
            self.current.add_comment(line)
            return

        if line.startswith('"'):
            if current.field is None:
                raise POSyntaxError("string continuation without a directive", lineno)
            current.extend(unquote(line, lineno), len(line))
            return

        match = KEYWORD_RE.match(line)
        if not match:
            raise POSyntaxError(f"unknown directive {line.split()[0]!r}", lineno)
        keyword, index, literal = match.groups()
        value = unquote(literal, lineno)

        if index is not None and keyword != 'msgstr':
            raise POSyntaxError(f"{keyword} does not take a plural index", lineno)

        if keyword == 'msgctxt':
            if current.msgid is not None:
                self.finish_record()
            elif current.msgctxt is not None:
                raise POSyntaxError("duplicate msgctxt", lineno)
            self.current.set('msgctxt', value, lineno, len(line))
        elif keyword == 'msgid':
            if current.msgid is not None:
                self.finish_record()
            self.current.set('msgid', value, lineno, len(line))
        elif keyword == 'msgid_plural':
            if current.msgid is None:
                raise POSyntaxError("msgid_plural without msgid", lineno)
            if current.msgid_plural is not None or current.has_translation:
                raise POSyntaxError("misplaced msgid_plural", lineno)
            current.set('msgid_plural', value, lineno, len(line))
        elif index is None:
            if current.msgid is None:
                raise POSyntaxError("msgstr without msgid", lineno)
            if current.msgid_plural is not None:
                raise POSyntaxError("plural entry needs indexed msgstr[N]", lineno)
            if current.msgstr is not None:
                raise POSyntaxError("duplicate msgstr", lineno)
            current.set('msgstr', value, lineno, len(line))
        else:
            if current.msgid_plural is None:
                raise POSyntaxError(f"msgstr[{index}] on an entry without msgid_plural", lineno)
            expected = len(current.msgstr_plural)
            if int(index) != expected:
                raise POSyntaxError(
                    f"plural index {index} out of sequence, expected msgstr[{expected}]", lineno)
            current.set('msgstr_plural', value, lineno, len(line))

    def finish_record(self):
        record = self.current
        if not record.has_translation:
            raise POSyntaxError("msgid without msgstr", record.lineno)

        if record.msgid == '':
            if record.msgctxt is not None or record.msgid_plural is not None:
                raise POSyntaxError("empty msgid", record.lineno)
            if self.header_record is not None:
                raise DuplicateEntryError(('', None), record.lineno)
            self.header_record = record
        else:
            translations = record.msgstr_plural if record.msgid_plural is not None else [record.msgstr]
            entry = Entry(
                record.msgid,
                translations=translations,
                context=record.msgctxt,
                plural_source_text=record.msgid_plural,
                translator_comments=record.translator_comments,
                extracted_comments=record.extracted_comments,
                reference_locations=record.reference_locations,
                flags=record.flags,
                previous=record.previous,
                obsolete=record.obsolete,
            )
            if entry.identity in self.identities:
                raise DuplicateEntryError(entry.identity, record.lineno)
            self.identities.add(entry.identity)
            self.entries.append((entry, record.lineno))
            if record.continued:
                self.wrapped = True
                self.max_width = max([self.max_width] + record.widths)

        self.current = _Record()

    def build(self):
        trailing = tuple(self.current.comment_lines)
        record = self.header_record
        if record is None:
            header = CatalogHeader(trailing_comments=trailing)
        else:
            header = CatalogHeader(
                parse_header_fields(record.msgstr, record.lineno),
                comments=[line for line in record.comment_lines if not line.startswith('#,')],
                flags=record.flags,
                trailing_comments=trailing,
            )
        if self.wrapped:
            header.wrap_width = self.max_width

        declared = header.declared_plural_count
        if declared is not None:
            for entry, lineno in self.entries:
                if entry.is_plural and len(entry.translations) != declared:
                    raise POSyntaxError(
                        f"entry has {len(entry.translations)} plural forms, header declares {declared}",
                        lineno)

        return header, [entry for entry, _ in self.entries]


class POParser:
    """Parses PO text"""

    def parse(self, text):
        """Parse PO text into (CatalogHeader, [Entry]) in file order"""
        header, entries = _CatalogReader().read(text)
        logger.debug("Parsed %d entries (charset %s)", len(entries), header.charset)
        return header, entries


def parse(text):
    """Parse PO text with a default POParser"""
    return POParser().parse(text)
