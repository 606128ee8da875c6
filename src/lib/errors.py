"""
Exceptions raised while resolving directive blocks

Fatal errors abort the whole parse and no output is produced. AssetError is
the exception form of a recoverable per-tag problem and is only raised when
strict mode is enabled; otherwise such problems are logged and the tag is
skipped.
"""


class BlockError(Exception):
    """Base class for all block resolution errors"""
    pass


class MissingEndTagError(BlockError):
    """Raised when a begin tag has no matching end tag in the rest of the document"""

    def __init__(self, begin_tag: str):
        self.begin_tag = begin_tag
        super().__init__(f"Missing end tag for block. {begin_tag}")


class DirectiveUsageError(BlockError):
    """Raised when a directive is missing required arguments (or has too many)"""

    def __init__(self, block_type: str, syntax: str, detail: str = "Missing arguments."):
        self.block_type = block_type
        self.syntax = syntax
        super().__init__(f"{detail} '{block_type}' syntax: {syntax}")


class DirectiveOptionsError(BlockError):
    """Raised when a requirejs block carries malformed JSON options"""
    pass


class AssetError(BlockError):
    """Raised in strict mode for asset tags that would otherwise be skipped"""
    pass
