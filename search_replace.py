"""
Search & Replace functionality for POMO Editor

Handles searching entries and bulk replacement in translations.
"""

import logging
import re

from data_model import EntryState
from errors import ValidationError

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ('source', 'translation', 'context', 'comments')


class SearchReplaceHandler:
    """Handles search and replace operations on an edit session"""

    @staticmethod
    def build_pattern(search_term, case_sensitive, whole_word):
        """Compile the search term according to the options"""
        pattern = re.escape(search_term)
        if whole_word:
            # Use word boundaries for whole word matching
            pattern = r'\b' + pattern + r'\b'
        flags = 0 if case_sensitive else re.IGNORECASE
        return re.compile(pattern, flags)

    @staticmethod
    def should_replace(text, search_term, case_sensitive, whole_word):
        """Check if text contains the search term based on options"""
        if not text or not search_term:
            return False
        pattern = SearchReplaceHandler.build_pattern(search_term, case_sensitive, whole_word)
        return bool(pattern.search(text))

    @staticmethod
    def replace_text(text, search_term, replace_term, case_sensitive, whole_word):
        """Replace text based on options"""
        pattern = SearchReplaceHandler.build_pattern(search_term, case_sensitive, whole_word)
        # The replacement is literal text, not a template
        return pattern.sub(lambda match: replace_term, text)

    @staticmethod
    def entry_texts(entry, fields):
        """Texts of an entry for the requested search fields"""
        texts = []
        if 'source' in fields:
            texts.append(entry.source_text)
            if entry.plural_source_text is not None:
                texts.append(entry.plural_source_text)
        if 'translation' in fields:
            texts.extend(entry.translations)
        if 'context' in fields and entry.context is not None:
            texts.append(entry.context)
        if 'comments' in fields:
            texts.extend(entry.translator_comments)
            texts.extend(entry.extracted_comments)
        return texts

    @staticmethod
    def find_entries(session, search_term, fields=SEARCH_FIELDS, case_sensitive=False,
                     whole_word=False):
        """Entries of the session (deleted ones excluded) that match the search term"""
        unknown = set(fields) - set(SEARCH_FIELDS)
        if unknown:
            raise ValueError(f"unknown search fields: {', '.join(sorted(unknown))}")

        matches = []
        for entry, state in session.entries():
            if state == EntryState.DELETED:
                continue
            for text in SearchReplaceHandler.entry_texts(entry, fields):
                if SearchReplaceHandler.should_replace(text, search_term, case_sensitive, whole_word):
                    matches.append(entry)
                    break
        return matches

    @staticmethod
    def preview_replacements(session, search_term, replace_term, case_sensitive=False,
                             whole_word=False):
        """Compute {identity: {'old': translations, 'new': translations}} without editing"""
        preview = {}
        for entry, state in session.entries():
            if state == EntryState.DELETED:
                continue
            new_translations = tuple(
                SearchReplaceHandler.replace_text(t, search_term, replace_term, case_sensitive, whole_word)
                if SearchReplaceHandler.should_replace(t, search_term, case_sensitive, whole_word) else t
                for t in entry.translations
            )
            if new_translations != entry.translations:
                preview[entry.identity] = {'old': entry.translations, 'new': new_translations}
        return preview

    @staticmethod
    def apply_replacements(session, search_term, replace_term, case_sensitive=False,
                           whole_word=False):
        """Replace in every matching translation through the session; returns the edited identities"""
        preview = SearchReplaceHandler.preview_replacements(
            session, search_term, replace_term, case_sensitive, whole_word)
        # All or nothing: validate the replacement once before any edit
        charset = session.header.charset
        if preview:
            if '\0' in replace_term:
                raise ValidationError("translations cannot contain NUL characters")
            try:
                replace_term.encode(charset)
            except UnicodeEncodeError as e:
                raise ValidationError(f"{replace_term!r} cannot be encoded as {charset}") from e
        for identity, change in preview.items():
            session.apply_edit(identity, change['new'])
        logger.info("Replaced %r in %d entries", search_term, len(preview))
        return list(preview)
