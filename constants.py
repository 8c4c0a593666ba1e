"""
Constants for POMO Editor
"""

# Application
APP_TITLE = "POMO Editor"
CONFIG_FILENAME = ".pomo_editor.json"
DEFAULT_LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

# Catalog defaults
DEFAULT_CHARSET = 'utf-8'
DEFAULT_PLURAL_COUNT = 2
CHARSET_PLACEHOLDER = 'CHARSET'

# Header fields
HEADER_CONTENT_TYPE = 'Content-Type'
HEADER_PLURAL_FORMS = 'Plural-Forms'

# Entry states (session-local)
STATE_CLEAN = 'clean'
STATE_MODIFIED = 'modified'
STATE_NEW = 'new'
STATE_DELETED = 'deleted'

# MO container
MO_MAGIC = 0x950412de
MO_REVISION = 0
MO_HEADER_SIZE = 7 * 4
MO_CONTEXT_SEPARATOR = '\x04'
MO_PLURAL_SEPARATOR = '\x00'

# PO escape sequences: escape character -> literal character
PO_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '"': '"',
    '\\': '\\',
    'a': '\a',
    'b': '\b',
    'f': '\f',
    'v': '\v',
}

# File types
MO_EXTENSION = '.mo'
BACKUP_SUFFIX = 'backup'
