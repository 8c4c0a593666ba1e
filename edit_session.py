"""
Edit Session for POMO Editor

Holds the pending edits of one open catalog and resolves them into the
committed entry set on save.

Only one session may be open per catalog file at a time; locking the
file is up to the caller. Every operation runs in memory and leaves the
session untouched when it raises.
"""

import codecs
import logging

from constants import MO_CONTEXT_SEPARATOR, MO_PLURAL_SEPARATOR
from data_model import Entry, EntryState
from errors import (
    DuplicateEntryError, EncodingError, InvalidStateError, ValidationError
)
from mo_compiler import MOCompiler
from po_parser import POParser
from po_writer import POWriter

logger = logging.getLogger(__name__)


class _Record:
    """An entry with its last committed snapshot and session state"""

    def __init__(self, entry, committed, state):
        self.entry = entry  # Current content, including pending edits
        self.committed = committed  # Content as of the last commit, None for new entries
        self.state = state
        self.state_before_delete = None


class EditSession:
    """Pending edits for one catalog"""

    def __init__(self, header, entries, advanced_editing=False, wrap_width=None):
        """
        Start a session over a parsed catalog

        Args:
            header: CatalogHeader from the parser
            entries: entries in file order
            advanced_editing: allows adding entries and editing the header
            wrap_width: PO line width for commit(), None keeps the file's own
        """
        self.advanced_editing = advanced_editing
        self.wrap_width = wrap_width
        self._header = header
        self._committed_header = header
        self._committed_entries = list(entries)
        self._records = self._clean_records(self._committed_entries)

    # Read side

    @property
    def header(self):
        return self._header

    def get_entry(self, identity):
        return self._record(identity).entry

    def state_of(self, identity):
        return self._record(identity).state

    def entries(self):
        """(entry, state) pairs in display order, deleted entries included"""
        return [(record.entry, record.state) for record in self._records.values()]

    def __contains__(self, identity):
        return identity in self._records

    def __len__(self):
        return len(self._records)

    @property
    def has_pending_changes(self):
        if self._header is not self._committed_header:
            return True
        return any(record.state != EntryState.CLEAN for record in self._records.values())

    # Edits

    def apply_edit(self, identity, new_translations, new_comments=None):
        """Replace an entry's translations (and translator comments)

        Returns the updated entry.
        """
        record = self._records.get(identity)
        if record is None:
            raise ValidationError(f"unknown entry {identity!r}")
        if record.state == EntryState.DELETED:
            raise InvalidStateError(f"entry {identity[0]!r} is deleted")

        translations = tuple(new_translations)
        expected = len(record.entry.translations)
        if len(translations) != expected:
            raise ValidationError(
                f"entry {identity[0]!r} takes {expected} translation(s), got {len(translations)}")
        for translation in translations:
            self._check_text(translation, self._header.charset)

        changes = {'translations': translations}
        if new_comments is not None:
            comments = tuple(new_comments)
            for comment in comments:
                if not isinstance(comment, str) or '\n' in comment:
                    raise ValidationError("comments must be single-line strings")
            changes['translator_comments'] = comments

        record.entry = record.entry.replace(**changes)
        if record.state == EntryState.CLEAN:
            record.state = EntryState.MODIFIED
        logger.debug("Edited %r (%s)", identity, record.state)
        return record.entry

    def add_entry(self, source_text, context=None, plural_source_text=None,
                  translation_count=None):
        """Add a new, untranslated entry (advanced editing only)"""
        if not self.advanced_editing:
            raise InvalidStateError("adding entries requires advanced editing")
        if not isinstance(source_text, str) or not source_text:
            raise ValidationError("source text must be a non-empty string")
        for text in (source_text, context, plural_source_text):
            if text is not None:
                self._check_source(text, self._header.charset)

        if plural_source_text is None:
            if translation_count not in (None, 1):
                raise ValidationError("a singular entry takes exactly one translation")
            translation_count = 1
        else:
            declared = self._header.declared_plural_count
            if translation_count is None:
                translation_count = self._header.plural_count
            if not isinstance(translation_count, int) or translation_count < 1:
                raise ValidationError("translation count must be at least 1")
            if declared is not None and translation_count != declared:
                raise ValidationError(
                    f"header declares {declared} plural forms, got {translation_count}")

        identity = (source_text, context)
        existing = self._records.get(identity)
        if existing is not None:
            if existing.state != EntryState.DELETED:
                raise DuplicateEntryError(identity)
            # The new entry supersedes the tombstone
            del self._records[identity]

        entry = Entry(
            source_text,
            translations=[''] * translation_count,
            context=context,
            plural_source_text=plural_source_text,
        )
        self._records[identity] = _Record(entry, None, EntryState.NEW)
        logger.debug("Added %r", identity)
        return entry

    def delete_entry(self, identity):
        """Mark an entry deleted; unsaved new entries are removed outright"""
        record = self._record(identity)
        if record.state == EntryState.DELETED:
            raise InvalidStateError(f"entry {identity[0]!r} is already deleted")
        if record.state == EntryState.NEW:
            del self._records[identity]
        else:
            record.state_before_delete = record.state
            record.state = EntryState.DELETED
        logger.debug("Deleted %r", identity)

    def undelete_entry(self, identity):
        """Restore a deleted entry to the state it had before deletion"""
        record = self._record(identity)
        if record.state != EntryState.DELETED:
            raise InvalidStateError(f"entry {identity[0]!r} is not deleted")
        record.state = record.state_before_delete
        record.state_before_delete = None

    def discard_edit(self, identity):
        """Revert a modified entry to its last committed content"""
        record = self._record(identity)
        if record.state == EntryState.CLEAN:
            return record.entry
        if record.state != EntryState.MODIFIED:
            raise InvalidStateError(
                f"cannot discard edits of a {record.state} entry, delete or undelete it instead")
        record.entry = record.committed
        record.state = EntryState.CLEAN
        return record.entry

    def edit_header(self, fields):
        """Replace the header fields (advanced editing only)"""
        if not self.advanced_editing:
            raise InvalidStateError("editing the header requires advanced editing")
        header = self._header.replace(fields=dict(fields))

        try:
            codecs.lookup(header.charset)
        except LookupError as e:
            raise ValidationError(f"unknown charset {header.charset!r}") from e
        live = [record.entry for record in self._records.values()
                if record.state != EntryState.DELETED]
        if header.charset != self._header.charset:
            for entry in live:
                texts = (entry.source_text, entry.context, entry.plural_source_text) + entry.translations
                for text in texts:
                    if text is not None:
                        self._check_text(text, header.charset)
        declared = header.declared_plural_count
        if declared is not None:
            for entry in live:
                if entry.is_plural and len(entry.translations) != declared:
                    raise ValidationError(
                        f"entry {entry.source_text!r} has {len(entry.translations)} plural forms, "
                        f"header would declare {declared}")

        self._header = header
        return header

    # Save / cancel

    def resolve(self):
        """The entry set a commit would persist, in display order"""
        return [record.entry for record in self._records.values()
                if record.state != EntryState.DELETED]

    def commit(self):
        """Serialize the resolved catalog and make it the committed state

        Returns (po_bytes, mo_bytes). If either serializer fails nothing
        changes and the error propagates.
        """
        entries = self.resolve()
        writer = POWriter(self.wrap_width)
        po_text = writer.serialize(self._header, entries)
        mo_bytes = MOCompiler().compile(self._header, entries)
        try:
            po_bytes = po_text.encode(self._header.charset)
        except UnicodeEncodeError as e:
            raise EncodingError(f"catalog cannot be encoded as {self._header.charset}: {e.reason}") from e

        self._committed_entries = entries
        self._records = self._clean_records(entries)
        self._committed_header = self._header
        logger.info("Committed %d entries", len(entries))
        return po_bytes, mo_bytes

    def cancel(self):
        """Drop every pending change"""
        self._records = self._clean_records(self._committed_entries)
        self._header = self._committed_header

    @staticmethod
    def _clean_records(entries):
        records = {}  # {identity: _Record} in display order
        for entry in entries:
            if entry.identity in records:
                raise DuplicateEntryError(entry.identity)
            records[entry.identity] = _Record(entry, entry, EntryState.CLEAN)
        return records

    def _record(self, identity):
        try:
            return self._records[identity]
        except KeyError as e:
            raise ValidationError(f"unknown entry {identity!r}") from e

    @staticmethod
    def _check_source(text, charset):
        # Source and context strings become MO keys
        if not isinstance(text, str):
            raise ValidationError("source text and context must be strings")
        if MO_CONTEXT_SEPARATOR in text:
            raise ValidationError("source text and context cannot contain the \\x04 separator")
        EditSession._check_text(text, charset)

    @staticmethod
    def _check_text(text, charset):
        if not isinstance(text, str):
            raise ValidationError("translations must be strings")
        if MO_PLURAL_SEPARATOR in text:
            raise ValidationError(f"{text[:40]!r} cannot contain NUL characters")
        try:
            text.encode(charset)
        except UnicodeEncodeError as e:
            raise ValidationError(f"{text[:40]!r} cannot be encoded as {charset}") from e
        except LookupError as e:
            raise ValidationError(f"unknown charset {charset!r}") from e


def open_session(text, advanced_editing=False, wrap_width=None):
    """Parse PO text and open an edit session over it"""
    header, entries = POParser().parse(text)
    return EditSession(header, entries, advanced_editing=advanced_editing, wrap_width=wrap_width)
