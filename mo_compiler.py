"""
MO Compiler for POMO Editor

Builds the binary GNU MO catalog from a header and resolved entries.
"""

import codecs
import logging
import struct

from constants import (
    MO_CONTEXT_SEPARATOR, MO_HEADER_SIZE, MO_MAGIC, MO_PLURAL_SEPARATOR,
    MO_REVISION
)
from errors import EncodingError

logger = logging.getLogger(__name__)


class MOCompiler:
    """Compiles catalogs to MO bytes

    Output is deterministic: entries keep the order they are given in
    (the header first) and no hash table is written.
    """

    def compile(self, header, entries):
        """Return the MO bytes for header + entries"""
        charset = header.charset
        try:
            codecs.lookup(charset)
        except LookupError as e:
            raise EncodingError(f"unknown charset {charset!r}") from e

        messages = [('', header.to_text())]
        skipped = 0
        for entry in entries:
            # Untranslated entries fall back to the source text at runtime
            if not entry.is_translated:
                skipped += 1
                continue
            messages.append((self.message_key(entry), self.message_value(entry)))

        keys = [self._encode(key, charset) for key, _ in messages]
        values = [self._encode(value, charset) for _, value in messages]
        count = len(messages)

        # The key strings follow the two index tables, the values follow the keys
        key_start = MO_HEADER_SIZE + 16 * count
        value_start = key_start + sum(len(key) + 1 for key in keys)

        key_offsets = []
        offset = key_start
        for key in keys:
            key_offsets += [len(key), offset]
            offset += len(key) + 1

        value_offsets = []
        offset = value_start
        for value in values:
            value_offsets += [len(value), offset]
            offset += len(value) + 1

        output = [
            struct.pack(
                '<7I',
                MO_MAGIC,
                MO_REVISION,
                count,
                MO_HEADER_SIZE,               # start of key index
                MO_HEADER_SIZE + 8 * count,   # start of value index
                0,                            # hash table size
                MO_HEADER_SIZE + 16 * count,  # hash table offset
            ),
            struct.pack(f'<{2 * count}I', *key_offsets),
            struct.pack(f'<{2 * count}I', *value_offsets),
        ]
        output.extend(key + b'\0' for key in keys)
        output.extend(value + b'\0' for value in values)

        logger.debug("Compiled %d messages (%d untranslated skipped)", count, skipped)
        return b''.join(output)

    @staticmethod
    def message_key(entry):
        key = entry.source_text
        if entry.is_plural:
            key += MO_PLURAL_SEPARATOR + entry.plural_source_text
        if entry.context is not None:
            key = entry.context + MO_CONTEXT_SEPARATOR + key
        return key

    @staticmethod
    def message_value(entry):
        return MO_PLURAL_SEPARATOR.join(entry.translations)

    @staticmethod
    def _encode(text, charset):
        try:
            return text.encode(charset)
        except UnicodeEncodeError as e:
            raise EncodingError(f"{text[:40]!r} cannot be encoded as {charset}: {e.reason}") from e


def compile_mo(header, entries):
    """Compile with a default MOCompiler"""
    return MOCompiler().compile(header, entries)
