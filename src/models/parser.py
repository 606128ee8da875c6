"""
Parser-specific data models

Type-safe structures for parser operations and return values.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Block:
    """
    A resolved directive block, as handed to a handler

    Built by BlockParser.block_resolve() once the begin tag has been matched
    with its end tag (or is self-closing) and every nested block inside it has
    already been replaced by its own handler output.

    Attributes:
        type: Block type from the begin tag (e.g., "js", "less", "uncomment")
        args: Raw argument string after the type, None if absent
        contents: Resolved inner text; None for self-closing blocks
        indent: Leading whitespace captured before the begin tag, reapplied to
                every continuation line of list-valued handler output

    Example:
        For "  <!--build:js app.js--><script src="a.js"></script><!--endbuild-->":
        Block(
            type="js",
            args="app.js",
            contents='<script src="a.js"></script>',
            indent="  "
        )
    """
    type: str
    args: Optional[str]
    contents: Optional[str]
    indent: str = ""


@dataclass
class TagRecord:
    """
    An HTML tag found by tags_extract()

    Attributes:
        html: Verbatim text of the matched tag (for diagnostics)
        attrs: Attribute names (lower-cased) mapped to their quoted values

    Example:
        For '<script src="a.js" data-main="app">':
        TagRecord(html='<script src="a.js" data-main="app">',
                  attrs={"src": "a.js", "data-main": "app"})
    """
    html: str
    attrs: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        """Attribute value by name, None if the tag does not carry it"""
        return self.attrs.get(name)


@dataclass
class ModuleArgs:
    """
    Arguments of a requirejs block

    Returned by moduleArgs_parse() for the grammar
    ``<main> [<dest> [<target>]] [<options-json>]``.

    Attributes:
        main: Main module path without the .js extension (e.g., "js/app")
        dest: Explicit destination path, None for the default
        target: Explicit build target, None for the default
        options: Options object from the trailing JSON, {} if absent

    Example:
        Input: 'js/app js/app.min.js release {"optimize": "none"}'
        Result: ModuleArgs(main="js/app", dest="js/app.min.js",
                           target="release", options={"optimize": "none"})
    """
    main: str
    dest: Optional[str] = None
    target: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
