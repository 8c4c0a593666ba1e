"""
File Handlers for POMO Editor

Handles PO loading and PO/MO saving operations.
"""

import codecs
import logging
import os
import re
import shutil
from datetime import datetime

from constants import BACKUP_SUFFIX, CHARSET_PLACEHOLDER, DEFAULT_CHARSET, MO_EXTENSION
from edit_session import open_session
from errors import EncodingError

logger = logging.getLogger(__name__)

RAW_CHARSET_RE = re.compile(rb'"Content-Type:[^"]*?charset=([\w\-:.]+)', re.IGNORECASE)
HEADER_MSGID_RE = re.compile(rb'^msgid\s+""$')


class FileHandler:
    """Handles file operations for PO and MO files"""

    @staticmethod
    def detect_charset(raw):
        """Charset declared in the raw PO header, utf-8 when none is declared"""
        match = RAW_CHARSET_RE.search(FileHandler.header_block(raw))
        if not match:
            return DEFAULT_CHARSET
        charset = match.group(1).decode('ascii')
        if charset.upper() == CHARSET_PLACEHOLDER:
            return DEFAULT_CHARSET
        return charset

    @staticmethod
    def header_block(raw):
        """Raw msgstr lines of the first `msgid ""` entry, empty when there is none"""
        lines = [line.strip() for line in raw.split(b'\n')]
        for index, line in enumerate(lines[:-1]):
            if HEADER_MSGID_RE.match(line) and lines[index + 1].startswith(b'msgstr'):
                block = [lines[index + 1]]
                for following in lines[index + 2:]:
                    if not following.startswith(b'"'):
                        break
                    block.append(following)
                return b'\n'.join(block)
        return b''

    @staticmethod
    def decode_po(raw):
        """Decode PO bytes with the charset they declare"""
        if raw.startswith(codecs.BOM_UTF8):
            raw = raw[len(codecs.BOM_UTF8):]
        charset = FileHandler.detect_charset(raw)
        try:
            return raw.decode(charset)
        except LookupError as e:
            raise EncodingError(f"unknown charset {charset!r}") from e
        except UnicodeDecodeError as e:
            raise EncodingError(f"file is not valid {charset}: {e.reason} at byte {e.start}") from e

    @staticmethod
    def load_po_file(file_path):
        """Read a whole PO file and return its text"""
        with open(file_path, 'rb') as f:
            raw = f.read()
        text = FileHandler.decode_po(raw)
        logger.info("Loaded %s (%d bytes)", file_path, len(raw))
        return text

    @staticmethod
    def open_po_file(file_path, advanced_editing=False, wrap_width=None):
        """Load a PO file and open an edit session over it"""
        text = FileHandler.load_po_file(file_path)
        return open_session(text, advanced_editing=advanced_editing, wrap_width=wrap_width)

    @staticmethod
    def mo_path_for(po_path):
        """Compute .mo name from .po name"""
        return os.path.splitext(po_path)[0] + MO_EXTENSION

    @staticmethod
    def save_catalog(po_path, po_bytes, mo_bytes, mo_path=None, backup=False):
        """Write the compiled MO, then the PO source

        The PO file is only replaced once the MO file is in place.
        Returns the backup path, or None when no backup was made.
        """
        if mo_path is None:
            mo_path = FileHandler.mo_path_for(po_path)

        backup_path = None
        if backup and os.path.exists(po_path):
            base_name, extension = os.path.splitext(os.path.basename(po_path))
            directory = os.path.dirname(po_path) or os.getcwd()
            backup_path = FileHandler.unique_path(os.path.join(
                directory,
                FileHandler.generate_timestamped_filename(base_name, BACKUP_SUFFIX, extension)))
            shutil.copy2(po_path, backup_path)
            logger.info("Backed up %s to %s", po_path, backup_path)

        FileHandler.write_atomic(mo_path, mo_bytes)
        FileHandler.write_atomic(po_path, po_bytes)
        logger.info("Saved %s and %s", po_path, mo_path)
        return backup_path

    @staticmethod
    def write_atomic(file_path, data):
        """Write bytes through a temporary file so readers never see a partial file"""
        temp_path = f"{file_path}.tmp"
        try:
            with open(temp_path, 'wb') as f:
                f.write(data)
            os.replace(temp_path, file_path)
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)

    @staticmethod
    def unique_path(output_path):
        """Append a counter until the path does not exist"""
        counter = 1
        original_path = output_path
        while os.path.exists(output_path):
            base, ext = os.path.splitext(original_path)
            output_path = f"{base}_{counter}{ext}"
            counter += 1
        return output_path

    @staticmethod
    def generate_timestamped_filename(base_name, suffix, extension='.po'):
        """Generate a timestamped filename"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        if suffix:
            if not suffix.startswith('_'):
                suffix = '_' + suffix
            filename = f"{base_name}{suffix}_{timestamp}{extension}"
        else:
            filename = f"{base_name}_{timestamp}{extension}"
        return filename
