import gettext
import io
import struct

import pytest

from data_model import CatalogHeader, Entry
from errors import EncodingError
from mo_compiler import MOCompiler, compile_mo
from po_parser import parse


def _read_strings(mo, table_offset, count):
    strings = []
    for index in range(count):
        length, offset = struct.unpack_from('<2I', mo, table_offset + 8 * index)
        strings.append(mo[offset:offset + length])
    return strings


def test_hello_example_has_two_entries():
    header, entries = parse('msgid "Hello"\nmsgstr "Bonjour"\n')

    mo = compile_mo(header, entries)

    magic, revision, count, key_table, value_table, hash_size, hash_offset = struct.unpack_from('<7I', mo)
    assert magic == 0x950412de
    assert revision == 0
    assert count == 2, "header entry plus the one message"
    assert key_table == 28
    assert value_table == 28 + 8 * count
    assert hash_size == 0
    assert hash_offset == 28 + 16 * count
    assert _read_strings(mo, key_table, count) == [b'', b'Hello']
    assert _read_strings(mo, value_table, count) == [b'', b'Bonjour']


def test_compile_is_deterministic(sample_po):
    header, entries = parse(sample_po)
    assert MOCompiler().compile(header, entries) == MOCompiler().compile(header, entries)


def test_entries_keep_resolved_order():
    entries = [Entry("zebra", ["Zebra"]), Entry("apple", ["Apfel"])]

    mo = compile_mo(CatalogHeader(), entries)

    assert _read_strings(mo, 28, 3) == [b'', b'zebra', b'apple']


def test_keys_for_context_and_plurals(sample_po):
    header, entries = parse(sample_po)

    mo = compile_mo(header, entries)
    count = struct.unpack_from('<I', mo, 8)[0]
    keys = _read_strings(mo, 28, count)
    values = _read_strings(mo, 28 + 8 * count, count)

    assert b'menu\x04File' in keys
    plural_index = keys.index(b'%d item\x00%d items')
    assert values[plural_index] == '%d élément\x00%d éléments'.encode('utf-8')
    assert b'Untranslated' not in keys, "untranslated entries are not compiled"
    assert values[0].startswith(b'Project-Id-Version: Example 1.0\n')


def test_output_loads_with_stdlib_gettext(sample_po):
    header, entries = parse(sample_po)

    translations = gettext.GNUTranslations(io.BytesIO(compile_mo(header, entries)))

    assert translations.gettext("Hello") == "Bonjour"
    assert translations.pgettext("menu", "File") == "Fichier"
    assert translations.ngettext("%d item", "%d items", 1) == "%d élément"
    assert translations.ngettext("%d item", "%d items", 5) == "%d éléments"
    assert translations.gettext("Untranslated") == "Untranslated"
    assert translations.gettext("Line one\nLine two") == "Ligne un\nLigne deux"


def test_strings_use_declared_charset():
    header = CatalogHeader({'Content-Type': 'text/plain; charset=ISO-8859-1'})

    mo = compile_mo(header, [Entry("Yes", ["Oui, très"])])

    assert _read_strings(mo, 28 + 8 * 2, 2)[1] == 'Oui, très'.encode('latin-1')


def test_unencodable_string_raises():
    header = CatalogHeader({'Content-Type': 'text/plain; charset=ISO-8859-1'})
    with pytest.raises(EncodingError) as excinfo:
        compile_mo(header, [Entry("Japanese", ["日本語"])])
    assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)


def test_unknown_charset_raises():
    header = CatalogHeader({'Content-Type': 'text/plain; charset=x-no-such-codec'})
    with pytest.raises(EncodingError) as excinfo:
        compile_mo(header, [Entry("a", ["b"])])
    assert isinstance(excinfo.value.__cause__, LookupError)
