"""
PO Writer for POMO Editor

Serializes a header and entries back to PO text that po_parser reads
into the same catalog.
"""

import re

from constants import PO_ESCAPES

ESCAPE_MAP = {literal: '\\' + char for char, literal in PO_ESCAPES.items()}
PIECE_RE = re.compile(r'[^\n]*\n|[^\n]+')
WORD_RE = re.compile(r'[^ ]+ *| +')


def escape(value):
    """Inverse of po_parser.unescape"""
    return ''.join(ESCAPE_MAP.get(char, char) for char in value)


def _comment_lines(marker, comments):
    return [f"{marker} {comment}" if comment else marker for comment in comments]


class POWriter:
    """Serializes catalogs to PO text"""

    def __init__(self, wrap_width=None):
        # None defers to the wrap hint the parser stored on the header
        self.wrap_width = wrap_width

    def serialize(self, header, entries):
        """Return PO text for the header followed by the entries in order"""
        width = self.wrap_width if self.wrap_width is not None else header.wrap_width
        blocks = [self.header_lines(header)]
        for entry in entries:
            blocks.append(self.entry_lines(entry, width))
        if header.trailing_comments:
            blocks.append(list(header.trailing_comments))
        return '\n\n'.join('\n'.join(lines) for lines in blocks) + '\n'

    def header_lines(self, header):
        lines = list(header.comments)
        if header.flags:
            lines.append('#, ' + ', '.join(header.flags))
        lines.append('msgid ""')
        lines.append('msgstr ""')
        for name, value in header.items():
            lines.append(f'"{escape(f"{name}: {value}")}\\n"')
        return lines

    def entry_lines(self, entry, width=None):
        lines = []
        lines.extend(_comment_lines('#', entry.translator_comments))
        lines.extend(_comment_lines('#.', entry.extracted_comments))
        if entry.reference_locations:
            lines.append('#: ' + ' '.join(entry.reference_locations))
        if entry.flags:
            lines.append('#, ' + ', '.join(entry.flags))
        lines.extend(entry.previous)
        lines.extend(entry.obsolete)

        if entry.context is not None:
            lines.extend(self.field_lines('msgctxt', entry.context, width))
        lines.extend(self.field_lines('msgid', entry.source_text, width))
        if entry.is_plural:
            lines.extend(self.field_lines('msgid_plural', entry.plural_source_text, width))
            for index, translation in enumerate(entry.translations):
                lines.extend(self.field_lines(f'msgstr[{index}]', translation, width))
        else:
            lines.extend(self.field_lines('msgstr', entry.translations[0], width))
        return lines

    def field_lines(self, keyword, value, width=None):
        """Render one directive, split over continuation lines when wrapping"""
        escaped = escape(value)
        single = f'{keyword} "{escaped}"'
        if width is None:
            return [single]
        chunks = self.wrap(value, width - 2)
        if len(chunks) <= 1 and len(single) <= width:
            return [single]
        return [f'{keyword} ""'] + [f'"{chunk}"' for chunk in chunks]

    @staticmethod
    def wrap(value, width):
        """Split escaped text after each newline, then at spaces to fit width"""
        chunks = []
        for piece in PIECE_RE.findall(value):
            escaped = escape(piece)
            if len(escaped) <= width:
                chunks.append(escaped)
                continue
            line = ''
            for word in WORD_RE.findall(escaped):
                if line and len(line) + len(word) > width:
                    chunks.append(line)
                    line = ''
                line += word
            if line:
                chunks.append(line)
        return chunks


def serialize(header, entries, wrap_width=None):
    """Serialize with a POWriter"""
    return POWriter(wrap_width).serialize(header, entries)
