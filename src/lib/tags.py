"""
Tag extraction and argument parsing helpers for block handlers

Handlers discover asset references with tags_extract() and read their own
directive arguments with args_split() / moduleArgs_parse().
"""

import json
import re
from typing import List, Optional, Pattern, Tuple

from ..models.parser import TagRecord, ModuleArgs
from .errors import DirectiveUsageError, DirectiveOptionsError


ATTR_RE: Pattern[str] = re.compile(r' ([a-z0-9_\-]+)="([^"]+)"', re.IGNORECASE)
WHITESPACE_RE: Pattern[str] = re.compile(r'[ \t]+')

MODULE_SYNTAX = '<data-main> [<dest> [<target>]] [<options-json>]'


def tags_extract(element_name: str, html: str) -> List[TagRecord]:
    """
    Extract every occurrence of an element and its attributes

    Only double-quoted attribute values are recognized. Attribute names are
    lower-cased; when a tag repeats an attribute the last value wins.

    Args:
        element_name: Element to look for (e.g., "script", "link")
        html: Fragment to scan

    Returns:
        TagRecords in document order

    Example:
        >>> tags_extract("script", '<script src="a.js"></script>')
        [TagRecord(html='<script src="a.js">', attrs={'src': 'a.js'})]
    """
    if not html:
        return []

    tag_re = re.compile(r'<' + re.escape(element_name) + r'( .+?)/?>', re.IGNORECASE)
    tags = []

    for tag_match in tag_re.finditer(html):
        record = TagRecord(html=tag_match.group(0))
        for attr_match in ATTR_RE.finditer(tag_match.group(1)):
            record.attrs[attr_match.group(1).lower()] = attr_match.group(2)
        tags.append(record)

    return tags


def args_split(args: Optional[str], limit: Optional[int] = None) -> Optional[List[str]]:
    """
    Split a directive's argument string into whitespace-separated tokens

    With a limit, at most ``limit`` tokens are returned and the last one keeps
    the unsplit remainder of the string.

    Args:
        args: Raw argument string (None passes through)
        limit: Maximum number of tokens, None or <= 0 for no limit

    Returns:
        Token list, or None if args is None

    Example:
        >>> args_split("a b c d", 2)
        ['a', 'b c d']
        >>> args_split("a b c", 1)
        ['a b c']
    """
    if args is None:
        return None

    if limit == 1:
        return [args]

    stripped = args.strip(' \t')
    if not stripped:
        return []

    maxsplit = limit - 1 if limit is not None and limit > 0 else 0
    return WHITESPACE_RE.split(stripped, maxsplit=maxsplit)


def token_shift(text: str) -> Tuple[str, str]:
    """Split off the first token: (token, rest) with rest left-trimmed"""
    parts = WHITESPACE_RE.split(text, maxsplit=1)
    return parts[0], (parts[1] if len(parts) > 1 else '')


def moduleArgs_parse(args: Optional[str]) -> ModuleArgs:
    """
    Parse the arguments of a requirejs block

    Grammar: ``<data-main> [<dest> [<target>]] [<options-json>]``. The
    destination and target are told apart from the options by not starting
    with "{"; everything from the first "{" token on is one JSON object.

    Args:
        args: Raw argument string

    Returns:
        ModuleArgs record

    Raises:
        DirectiveUsageError: If the main module is missing, or unexpected
                             tokens follow the target
        DirectiveOptionsError: If the options are not a valid JSON object

    Example:
        >>> moduleArgs_parse('app build/app.js {"optimize": "none"}')
        ModuleArgs(main='app', dest='build/app.js', target=None, options={'optimize': 'none'})
    """
    text = (args or '').strip(' \t')
    if not text or text.startswith('{'):
        raise DirectiveUsageError('requirejs', MODULE_SYNTAX)

    main, rest = token_shift(text)
    parsed = ModuleArgs(main=main)

    # <dest> then <target>
    for slot in ('dest', 'target'):
        if rest and not rest.startswith('{'):
            value, rest = token_shift(rest)
            setattr(parsed, slot, value)

    # <options>
    if rest:
        if not rest.startswith('{'):
            raise DirectiveUsageError(
                'requirejs', MODULE_SYNTAX, detail=f"Unexpected arguments: {rest}."
            )
        try:
            options = json.loads(rest)
        except json.JSONDecodeError as e:
            raise DirectiveOptionsError(f"Invalid JSON ({e}): {rest}") from e
        parsed.options = options

    return parsed
