"""
tagbox.constants — reserved tag names and module-level settings.
"""


class Tags:
    """Reserved tag names understood by :class:`tagbox.box.Box`."""
    ID = "id"
    SCOPE = "scope"
    GLOSSARY = "glossary"
    NOTIFY = "notify"

    # Debugging aids
    DEBUG_GLOSSARY = "debug:glossary"
    DEBUG_PRINT_FILTER = "debug:print:filter"


# Key under which scalar content is wrapped
VALUE_KEY = "_v"

PATH_SEPARATOR = "."
FILTER_SEPARATOR = ";"

# Top-level keys starting with this prefix are hidden when printing
HIDDEN_PREFIX = "_"

# Length of generated sequence ids
ID_LENGTH = 14
