import pytest

from errors import DuplicateEntryError, POSyntaxError
from po_parser import parse, unescape


def test_single_entry_without_header():
    header, entries = parse('msgid "Hello"\nmsgstr "Bonjour"\n')

    assert len(entries) == 1
    entry = entries[0]
    assert entry.source_text == "Hello"
    assert entry.translations == ("Bonjour",)
    assert entry.context is None
    assert len(header) == 0
    assert header.charset == 'utf-8'


def test_header_fields_and_comments(sample_po):
    header, _ = parse(sample_po)

    assert header.items() == [
        ('Project-Id-Version', 'Example 1.0'),
        ('Content-Type', 'text/plain; charset=UTF-8'),
        ('Plural-Forms', 'nplurals=2; plural=(n > 1);'),
    ]
    assert header.charset == 'UTF-8'
    assert header.plural_count == 2
    assert header.flags == ('fuzzy',)
    assert header.comments == ('# French translation for Example.', '# Copyright (C) 2024')


def test_entries_keep_file_order_and_annotations(sample_po):
    _, entries = parse(sample_po)

    assert [e.source_text for e in entries] == [
        "Hello", "File", "%d item", "Untranslated", "Line one\nLine two"]

    hello = entries[0]
    assert hello.extracted_comments == ("Greeting on the front page",)
    assert hello.reference_locations == ("index.php:10", "index.php:22")

    menu_file = entries[1]
    assert menu_file.context == "menu"
    assert menu_file.translator_comments == ("Reviewed",)
    assert menu_file.flags == ("php-format",)


def test_plural_entry(sample_po):
    _, entries = parse(sample_po)
    plural = entries[2]

    assert plural.is_plural
    assert plural.plural_source_text == "%d items"
    assert plural.translations == ("%d élément", "%d éléments")


def test_multiline_strings_are_concatenated(sample_po):
    header, entries = parse(sample_po)

    assert entries[4].translations == ("Ligne un\nLigne deux",)
    # The file wraps literals over several lines, so a wrap hint is kept
    assert header.wrap_width is not None


def test_no_wrap_hint_for_single_line_literals():
    header, _ = parse('msgid "a"\nmsgstr "b"\n')
    assert header.wrap_width is None


def test_escape_sequences():
    _, entries = parse('msgid "Tab\\there \\"quoted\\" back\\\\slash"\nmsgstr "x\\ny"\n')

    assert entries[0].source_text == 'Tab\there "quoted" back\\slash'
    assert entries[0].translations == ("x\ny",)
    assert unescape(r'\a\b\f\v\r') == '\a\b\f\v\r'


def test_crlf_line_endings():
    _, entries = parse('msgid "Hello"\r\nmsgstr "Bonjour"\r\n')
    assert entries[0].translations == ("Bonjour",)


def test_obsolete_and_previous_lines_are_kept():
    text = (
        '#| msgid "Helo"\n'
        'msgid "Hello"\n'
        'msgstr "Salut"\n'
        '\n'
        '#~ msgid "Gone"\n'
        '#~ msgstr "Parti"\n'
    )
    header, entries = parse(text)

    assert entries[0].previous == ('#| msgid "Helo"',)
    assert header.trailing_comments == ('#~ msgid "Gone"', '#~ msgstr "Parti"')


@pytest.mark.parametrize("text, lineno", [
    ('msgid "Hello\nmsgstr ""\n', 1),
    ('msgid "a"\nmsgstr "b" trailing\n', 2),
    ('msgfoo "x"\n', 1),
    ('msgid "a"\nmsgstr "\\q"\n', 2),
    ('"orphan"\n', 1),
    ('msgid "a"\nmsgstr[0] "x"\n', 2),
    ('msgid "a"\nmsgid_plural "as"\nmsgstr "x"\n', 3),
    ('msgid "a"\nmsgstr "x"\nmsgid_plural "as"\n', 3),
    ('msgid "a"\n', 1),
    ('msgctxt "c"\nmsgid ""\nmsgstr ""\n', 1),
])
def test_malformed_input_raises_syntax_error(text, lineno):
    with pytest.raises(POSyntaxError) as excinfo:
        parse(text)
    assert excinfo.value.lineno == lineno, f"expected error on line {lineno}, got {excinfo.value}"


def test_plural_indices_must_be_contiguous():
    text = 'msgid "a"\nmsgid_plural "as"\nmsgstr[0] "x"\nmsgstr[2] "z"\n'
    with pytest.raises(POSyntaxError) as excinfo:
        parse(text)
    assert excinfo.value.lineno == 4


def test_missing_plural_form_for_declared_arity():
    text = (
        'msgid ""\n'
        'msgstr "Plural-Forms: nplurals=3; plural=(n%10==1 ? 0 : n%10>=2 ? 1 : 2);\\n"\n'
        '\n'
        'msgid "file"\n'
        'msgid_plural "files"\n'
        'msgstr[0] "plik"\n'
        'msgstr[1] "pliki"\n'
    )
    with pytest.raises(POSyntaxError) as excinfo:
        parse(text)
    assert excinfo.value.lineno == 4
    assert "header declares 3" in str(excinfo.value)


def test_duplicate_identity_raises():
    text = 'msgid "a"\nmsgstr "1"\n\nmsgid "a"\nmsgstr "2"\n'
    with pytest.raises(DuplicateEntryError) as excinfo:
        parse(text)
    assert excinfo.value.identity == ("a", None)


def test_same_source_with_different_context_is_allowed():
    text = 'msgid "a"\nmsgstr "1"\n\nmsgctxt "x"\nmsgid "a"\nmsgstr "2"\n'
    _, entries = parse(text)
    assert [e.identity for e in entries] == [("a", None), ("a", "x")]


def test_second_header_is_a_duplicate():
    text = 'msgid ""\nmsgstr ""\n\nmsgid ""\nmsgstr ""\n'
    with pytest.raises(DuplicateEntryError):
        parse(text)


def test_malformed_header_field():
    with pytest.raises(POSyntaxError):
        parse('msgid ""\nmsgstr "no colon here\\n"\n')
