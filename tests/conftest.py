import pytest

SAMPLE_PO = r'''# French translation for Example.
# Copyright (C) 2024
#, fuzzy
msgid ""
msgstr ""
"Project-Id-Version: Example 1.0\n"
"Content-Type: text/plain; charset=UTF-8\n"
"Plural-Forms: nplurals=2; plural=(n > 1);\n"

#. Greeting on the front page
#: index.php:10 index.php:22
msgid "Hello"
msgstr "Bonjour"

# Reviewed
#, php-format
msgctxt "menu"
msgid "File"
msgstr "Fichier"

msgid "%d item"
msgid_plural "%d items"
msgstr[0] "%d élément"
msgstr[1] "%d éléments"

msgid "Untranslated"
msgstr ""

msgid ""
"Line one\n"
"Line two"
msgstr "Ligne un\nLigne deux"
'''


@pytest.fixture
def sample_po():
    return SAMPLE_PO
