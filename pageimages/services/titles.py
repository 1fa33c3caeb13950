# pageimages/services/titles.py
# Responsibility: Page title parsing and normalization into (namespace, db key) pairs.

import re
from typing import Optional, Tuple

# -------------------------------
# Namespaces
# -------------------------------
NS_MAIN = 0
NS_USER = 2
NS_PROJECT = 4
NS_FILE = 6
NS_MEDIAWIKI = 8
NS_TEMPLATE = 10
NS_HELP = 12
NS_CATEGORY = 14

NAMESPACE_NAMES = {
    "user": NS_USER,
    "project": NS_PROJECT,
    "file": NS_FILE,
    "image": NS_FILE,
    "mediawiki": NS_MEDIAWIKI,
    "template": NS_TEMPLATE,
    "help": NS_HELP,
    "category": NS_CATEGORY,
}

ILLEGAL_TITLE_CHARS = re.compile(r"[\[\]{}|#<>\n\r\t]")
MAX_TITLE_LENGTH = 255


def make_db_key(text: str) -> Optional[str]:
    """
    Normalizes title text into its storage form: whitespace and underscores
    collapse to a single underscore and the first letter is upper-cased.

    Returns:
        Optional[str]: The db key, or None if the text is not a valid title.
    """
    if not text or ILLEGAL_TITLE_CHARS.search(text):
        return None
    key = re.sub(r"[\s_]+", "_", text).strip("_")
    if not key or len(key.encode("utf-8")) > MAX_TITLE_LENGTH:
        return None
    return key[0].upper() + key[1:]


def parse_title(text: str, default_namespace: int = NS_MAIN) -> Optional[Tuple[int, str]]:
    """
    Splits 'Namespace:Title' into (namespace id, db key). Unknown prefixes are
    kept as part of the title in the default namespace.
    """
    text = (text or "").strip()
    namespace = default_namespace
    if ":" in text:
        prefix, rest = text.split(":", 1)
        ns = NAMESPACE_NAMES.get(prefix.strip().replace(" ", "_").lower())
        if ns is not None:
            namespace, text = ns, rest
    key = make_db_key(text)
    if key is None:
        return None
    return namespace, key


def make_file_key(text: str) -> Optional[str]:
    """Normalizes a file name, with or without a 'File:' prefix, into a file key."""
    parsed = parse_title(text, NS_FILE)
    if parsed is None or parsed[0] != NS_FILE:
        return None
    return parsed[1]
