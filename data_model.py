"""
Data Model for POMO Editor

Holds the catalog header and the translatable entries.
"""

import re

from constants import (
    CHARSET_PLACEHOLDER, DEFAULT_CHARSET, DEFAULT_PLURAL_COUNT,
    HEADER_CONTENT_TYPE, HEADER_PLURAL_FORMS,
    STATE_CLEAN, STATE_DELETED, STATE_MODIFIED, STATE_NEW
)

CHARSET_RE = re.compile(r'charset=([\w\-:.]+)', re.IGNORECASE)
NPLURALS_RE = re.compile(r'nplurals\s*=\s*(\d+)')


class EntryState:
    """Session-local state of an entry"""

    CLEAN = STATE_CLEAN
    MODIFIED = STATE_MODIFIED
    NEW = STATE_NEW
    DELETED = STATE_DELETED

    ALL = (CLEAN, MODIFIED, NEW, DELETED)


class CatalogHeader:
    """Catalog metadata (the msgstr of the empty msgid)

    Field order is kept as read so the header round-trips unchanged.
    """

    def __init__(self, fields=None, comments=(), flags=(), trailing_comments=(),
                 wrap_width=None):
        self._fields = dict(fields or {})
        self.comments = tuple(comments)  # Raw comment lines above the header
        self.flags = tuple(flags)  # e.g. ('fuzzy',)
        self.trailing_comments = tuple(trailing_comments)  # Raw comment lines after the last entry
        self.wrap_width = wrap_width  # Wrap hint from the parsed file, None = no wrapping

    def __getitem__(self, name):
        return self._fields[name]

    def __contains__(self, name):
        return name in self._fields

    def __len__(self):
        return len(self._fields)

    def __eq__(self, other):
        if not isinstance(other, CatalogHeader):
            return NotImplemented
        return (list(self._fields.items()) == list(other._fields.items())
                and self.comments == other.comments
                and self.flags == other.flags
                and self.trailing_comments == other.trailing_comments)

    def __repr__(self):
        return f"CatalogHeader({self._fields!r})"

    def get(self, name, default=None):
        return self._fields.get(name, default)

    def items(self):
        return list(self._fields.items())

    def fields(self):
        """Return a copy of the metadata fields"""
        return dict(self._fields)

    def replace(self, fields=None, **changes):
        """Return a new header with the given fields and attributes swapped in"""
        attrs = {
            'fields': self._fields if fields is None else fields,
            'comments': self.comments,
            'flags': self.flags,
            'trailing_comments': self.trailing_comments,
            'wrap_width': self.wrap_width,
        }
        attrs.update(changes)
        return CatalogHeader(**attrs)

    @property
    def charset(self):
        """Charset declared in Content-Type, utf-8 when missing"""
        match = CHARSET_RE.search(self._fields.get(HEADER_CONTENT_TYPE, ''))
        if not match or match.group(1).upper() == CHARSET_PLACEHOLDER:
            return DEFAULT_CHARSET
        return match.group(1)

    @property
    def plural_count(self):
        """Number of plural forms declared in Plural-Forms"""
        declared = self.declared_plural_count
        return DEFAULT_PLURAL_COUNT if declared is None else declared

    @property
    def declared_plural_count(self):
        match = NPLURALS_RE.search(self._fields.get(HEADER_PLURAL_FORMS, ''))
        if not match:
            return None
        return int(match.group(1))

    def to_text(self):
        """Serialize fields as the `Key: value` block stored in the header msgstr"""
        return ''.join(f"{name}: {value}\n" for name, value in self._fields.items())


class Entry:
    """One translatable unit

    Entries are values: edits build a new Entry through replace().
    The identity is (source_text, context) and context never changes
    once the entry exists.
    """

    def __init__(self, source_text, translations=('',), context=None,
                 plural_source_text=None, translator_comments=(),
                 extracted_comments=(), reference_locations=(), flags=(),
                 previous=(), obsolete=()):
        self.source_text = source_text
        self.context = context
        self.plural_source_text = plural_source_text
        self.translations = tuple(translations)
        self.translator_comments = tuple(translator_comments)
        self.extracted_comments = tuple(extracted_comments)
        self.reference_locations = tuple(reference_locations)
        self.flags = tuple(flags)
        self.previous = tuple(previous)  # Raw `#|` lines
        self.obsolete = tuple(obsolete)  # Raw `#~` lines

    def _content(self):
        return (self.source_text, self.context, self.plural_source_text,
                self.translations, self.translator_comments,
                self.extracted_comments, self.reference_locations, self.flags,
                self.previous, self.obsolete)

    def __eq__(self, other):
        if not isinstance(other, Entry):
            return NotImplemented
        return self._content() == other._content()

    def __hash__(self):
        return hash(self._content())

    def __repr__(self):
        return (f"Entry(source_text={self.source_text!r}, context={self.context!r}, "
                f"translations={list(self.translations)!r})")

    @property
    def identity(self):
        return (self.source_text, self.context)

    @property
    def is_plural(self):
        return self.plural_source_text is not None

    @property
    def is_fuzzy(self):
        return 'fuzzy' in self.flags

    @property
    def is_translated(self):
        """True when at least one translation is non-empty"""
        return any(self.translations)

    def replace(self, **changes):
        """Return a copy with the given attributes changed"""
        if 'context' in changes or 'source_text' in changes:
            raise TypeError("source_text and context are part of the identity and cannot be replaced")
        attrs = {
            'source_text': self.source_text,
            'context': self.context,
            'plural_source_text': self.plural_source_text,
            'translations': self.translations,
            'translator_comments': self.translator_comments,
            'extracted_comments': self.extracted_comments,
            'reference_locations': self.reference_locations,
            'flags': self.flags,
            'previous': self.previous,
            'obsolete': self.obsolete,
        }
        attrs.update(changes)
        return Entry(**attrs)
