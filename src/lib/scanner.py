"""
Directive grammar and scan cursor

One compiled pattern recognizes both directive forms:

    <!--build:type args-->  ...  <!--endbuild-->
    <!--build:type args/-->

where "build" is the configurable tag token. The document is never tokenized;
matches are pulled one at a time, in document order, through a ScanCursor
that owns the scan position for a whole parse.
"""

import re
from typing import Optional, Pattern


def blockPattern_make(tag_name: str) -> Pattern[str]:
    """
    Compile the directive grammar for a tag token

    Groups:
        indent: Whitespace at the start of the line before a begin tag
        type: Block type, a run of characters other than space and hyphen
        args: Free text up to the closing marker, never spanning a "-->"
        single: "/" when the begin tag is self-closing
        end: The whole end tag

    The type group is lazy so that "<!--build:uncomment/-->" leaves the "/" to
    the self-closing group instead of absorbing it into the type.

    Args:
        tag_name: Directive token (regex metacharacters are escaped)

    Returns:
        Compiled multiline pattern
    """
    tag = re.escape(tag_name)
    return re.compile(
        r'(?:'
        # Indent whitespace
        r'(?P<indent>^[ \t]+)?'
        # Begin tag
        r'<!--[ \t]*' + tag +
        # Type
        r':(?P<type>[^ \-]+?)'
        # Args
        r'(?:[ ]+(?P<args>(?:(?!-->).)+?))?'
        # Optional self-closing
        r'[ ]*(?P<single>/)?-->'
        r')|(?P<end>'
        # End tag
        r'<!--[ \t]*end' + tag + r'[ \t]*-->'
        r')',
        re.MULTILINE,
    )


def match_isEnd(match: 're.Match[str]') -> bool:
    """True if the match is the end tag alternative"""
    return match.group('end') is not None


def match_isSingle(match: 're.Match[str]') -> bool:
    """True if the match is a self-closing begin tag"""
    return match.group('single') is not None


class ScanCursor:
    """
    Scan position over a document, shared by every recursion level of a parse

    Each call to next() resumes exactly where the previous match ended, so a
    child block resolved by a recursive call leaves the cursor just after its
    own end tag for the caller to continue from.

    Attributes:
        source: Document being scanned
        pattern: Directive grammar
        position: Index just past the last match returned
    """

    def __init__(self, source: str, pattern: Pattern[str]) -> None:
        self.source = source
        self.pattern = pattern
        self.position = 0

    def next(self) -> Optional['re.Match[str]']:
        """
        Return the next directive match and advance past it

        Returns:
            The match, or None once the document is exhausted (the position
            is left at the end of the last match)
        """
        match = self.pattern.search(self.source, self.position)
        if match is None:
            return None
        self.position = match.end()
        return match

    def text(self, start: int, end: int) -> str:
        """Literal document text between two offsets"""
        return self.source[start:end]
