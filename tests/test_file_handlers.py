import codecs
import os

import pytest

from errors import EncodingError
from file_handlers import FileHandler

LATIN1_PO = (
    'msgid ""\n'
    'msgstr ""\n'
    '"Content-Type: text/plain; charset=ISO-8859-1\\n"\n'
    '\n'
    'msgid "Yes"\n'
    'msgstr "Oui, très"\n'
)


def test_detect_charset():
    assert FileHandler.detect_charset(LATIN1_PO.encode('latin-1')) == 'ISO-8859-1'
    assert FileHandler.detect_charset(b'msgid "a"\nmsgstr "b"\n') == 'utf-8'
    assert FileHandler.detect_charset(
        b'msgid ""\nmsgstr ""\n"Content-Type: text/plain; charset=CHARSET\\n"\n') == 'utf-8'


def test_detect_charset_only_reads_the_header():
    raw = (
        b'msgid "Content-Type: text/plain; charset=ISO-8859-1"\n'
        b'msgstr ""\n'
        b'\n'
        b'msgid ""\n'
        b'msgstr ""\n'
        b'"Content-Type: text/plain; charset=UTF-8\\n"\n'
    )
    assert FileHandler.detect_charset(raw) == 'UTF-8', "a msgid must not be taken for the header"
    assert FileHandler.detect_charset(b'msgid "Content-Type: x; charset=latin-1"\nmsgstr "y"\n') == 'utf-8'


def test_load_po_file_decodes_declared_charset(tmp_path):
    po_path = tmp_path / "fr.po"
    po_path.write_bytes(LATIN1_PO.encode('latin-1'))

    session = FileHandler.open_po_file(str(po_path))

    assert session.get_entry(("Yes", None)).translations == ("Oui, très",)


def test_load_po_file_strips_bom(tmp_path):
    po_path = tmp_path / "de.po"
    po_path.write_bytes(codecs.BOM_UTF8 + 'msgid "Yes"\nmsgstr "Ja"\n'.encode('utf-8'))

    assert FileHandler.load_po_file(str(po_path)) == 'msgid "Yes"\nmsgstr "Ja"\n'


def test_invalid_bytes_raise_encoding_error(tmp_path):
    po_path = tmp_path / "bad.po"
    po_path.write_bytes(b'msgid "a"\nmsgstr "\xff\xfe"\n')

    with pytest.raises(EncodingError) as excinfo:
        FileHandler.load_po_file(str(po_path))
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_save_catalog_writes_mo_and_po(tmp_path):
    po_path = tmp_path / "fr.po"
    po_path.write_bytes(LATIN1_PO.encode('latin-1'))
    session = FileHandler.open_po_file(str(po_path))
    session.apply_edit(("Yes", None), ["Oui"])
    po_bytes, mo_bytes = session.commit()

    backup_path = FileHandler.save_catalog(str(po_path), po_bytes, mo_bytes, backup=True)

    assert (tmp_path / "fr.mo").read_bytes() == mo_bytes
    assert po_path.read_bytes() == po_bytes
    assert backup_path is not None
    with open(backup_path, 'rb') as f:
        assert f.read() == LATIN1_PO.encode('latin-1')
    assert not [name for name in os.listdir(tmp_path) if name.endswith('.tmp')]


def test_save_catalog_without_backup(tmp_path):
    po_path = tmp_path / "fr.po"
    mo_path = tmp_path / "out.mo"

    backup_path = FileHandler.save_catalog(str(po_path), b'po', b'mo', mo_path=str(mo_path))

    assert backup_path is None
    assert mo_path.read_bytes() == b'mo'
    assert po_path.read_bytes() == b'po'


def test_unique_path(tmp_path):
    existing = tmp_path / "fr_backup.po"
    existing.write_text("x")

    assert FileHandler.unique_path(str(existing)) == str(tmp_path / "fr_backup_1.po")


def test_generate_timestamped_filename():
    name = FileHandler.generate_timestamped_filename("fr", "backup", ".po")
    assert name.startswith("fr_backup_")
    assert name.endswith(".po")
