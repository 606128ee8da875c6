"""
Recursive block parser for <!--build:type args--> directives

Rewrites an HTML document by replacing every directive block with the output
of its handler.

The parser never tokenizes the document. It pulls directive matches one at a
time from a single ScanCursor and resolves nesting by recursive descent:
1. Scanning: the next begin tag, end tag or self-closing tag, in document order
2. Resolving: a begin tag consumes matches until its own end tag, resolving
   every begin tag met on the way as a child block first

Key features:
- Arbitrary nesting depth, one end tag consumed per begin tag
- Self-closing shorthand (<!--build:type args/-->)
- Indentation captured at each begin tag and reapplied to list output
- Handler results, notices and build instructions published on an EventBus

Example:
    >>> parser = BlockParser('<!--build:uncomment--><!-- <b>hi</b> --><!--endbuild-->')
    >>> parser.parse()
    ' <b>hi</b> '
"""

import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..config import AppSettings, appsettings
from ..models.parser import Block
from ..models.events import (
    EventName,
    InstructionKind,
    BuildInstruction,
    BlockNotification,
    Destination,
    Notice,
    instructions_group,
)
from .scanner import ScanCursor, blockPattern_make, match_isEnd, match_isSingle
from .handlers import HandlerRegistry
from .events import EventBus
from .errors import BlockError, MissingEndTagError, AssetError
from .log import LOG


class BlockParser:
    """
    Parser and rewriter for directive blocks in an HTML document

    Handles:
    - Nested blocks, including blocks of the same type
    - Self-closing blocks (no contents, no recursion)
    - Missing end tags (fatal, MissingEndTagError)
    - Dispatch to built-in or caller-supplied handlers
    """

    def __init__(
        self,
        source: str,
        settings: Optional[AppSettings] = None,
        type_parsers: Optional[Dict[str, Callable]] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        """
        Initialize parser with source document

        Args:
            source: Raw HTML document
            settings: AppSettings supplying tag_name, base_url, target,
                      source_root and strict_mode (defaults to appsettings)
            type_parsers: Handler overrides keyed by block type
            events: EventBus to publish on (a private bus if omitted)

        Attributes:
            source: Document being parsed
            settings: Effective configuration
            events: Observer channel
            registry: HandlerRegistry built from built-ins and overrides
            pattern: Compiled directive grammar for settings.tag_name
            instructions: BuildInstructions emitted by the last parse()
            diagnostics: Recoverable problems reported by the last parse()
        """
        if settings is None:
            settings = appsettings

        self.source = source
        self.settings = settings
        self.events = events if events is not None else EventBus()
        self.registry = HandlerRegistry(overrides=type_parsers)
        self.pattern = blockPattern_make(settings.tag_name)
        self.instructions: List[BuildInstruction] = []
        self.diagnostics: List[str] = []

    def parse(self) -> str:
        """
        Rewrite the document, replacing every top-level block

        Text outside directive blocks is kept verbatim. An end tag with no
        open block is left in place. A failed parse leaves instructions and
        diagnostics empty.

        Returns:
            The rewritten document

        Raises:
            MissingEndTagError: If a begin tag is never closed
            DirectiveUsageError: If a block lacks its required arguments
            DirectiveOptionsError: If requirejs options are not valid JSON
            AssetError: In strict mode, for any skipped asset tag

        Example:
            >>> BlockParser('a<!--build:nothing x/-->b').parse()
            'ab'
        """
        self.instructions = []
        self.diagnostics = []

        cursor = ScanCursor(self.source, self.pattern)
        parts: List[str] = []
        last_index = 0

        try:
            while True:
                match = cursor.next()
                if match is None:
                    break

                if match_isEnd(match):
                    LOG(f"Warning: End tag without a block, left in place: {match.group(0)}", level=1)
                    continue

                indent = match.group('indent') or ''
                parts.append(cursor.text(last_index, match.start()) + indent)
                parts.append(self.block_resolve(cursor, match))
                last_index = cursor.position
        except BlockError:
            # Partial results of a failed parse are discarded
            self.instructions = []
            self.diagnostics = []
            raise

        parts.append(cursor.text(last_index, len(self.source)))
        return ''.join(parts)

    def block_resolve(self, cursor: ScanCursor, match: 're.Match[str]') -> str:
        """
        Resolve one begin tag into its replacement text

        For a block (not self-closing), matches are taken from the shared
        cursor until the first end tag that no child consumed:
        - begin tag: literal text since the last consumed position (plus the
          child's indent) is kept, the child is resolved recursively and its
          replacement appended; the cursor is then just past the child
        - end tag: closes this block
        - end of document: MissingEndTagError

        Args:
            cursor: Scan position, positioned just after ``match``
            match: Begin tag match

        Returns:
            Handler output for the block (children already replaced)

        Raises:
            MissingEndTagError: If the document ends before the end tag
        """
        indent = match.group('indent') or ''
        block_type = match.group('type')
        args = match.group('args')
        begin_tag = match.group(0)
        contents: Optional[str] = None

        if match_isSingle(match):
            self.events.emit(
                EventName.BLOCK_SINGLE,
                BlockNotification(type=block_type, args=args, begin_tag=begin_tag),
            )
        else:
            self.events.emit(
                EventName.BLOCK_BEGIN,
                BlockNotification(type=block_type, args=args, begin_tag=begin_tag),
            )

            parts: List[str] = []
            last_index = cursor.position

            while True:
                next_match = cursor.next()
                if next_match is None:
                    raise MissingEndTagError(begin_tag)
                if match_isEnd(next_match):
                    break

                parts.append(cursor.text(last_index, next_match.start()))
                parts.append(next_match.group('indent') or '')
                parts.append(self.block_resolve(cursor, next_match))

                # Resume where the child block left off
                last_index = cursor.position

            # Text after the last child, or all of it when there were none
            parts.append(cursor.text(last_index, next_match.start()))
            contents = ''.join(parts)

        LOG(f"Resolving '{block_type}' block: {begin_tag.strip()}", level=3)
        parsed = self.handler_run(indent, block_type, args, contents)

        if not match_isSingle(match):
            self.events.emit(
                EventName.BLOCK_END,
                BlockNotification(type=block_type, args=args, begin_tag=begin_tag, contents=contents),
            )

        return parsed

    def handler_run(self, indent: str, block_type: str, args: Optional[str], contents: Optional[str]) -> str:
        """Dispatch a resolved block to its handler"""
        block = Block(type=block_type, args=args, contents=contents, indent=indent)
        return self.registry.dispatch(block, self)

    # ------------------------------------------------------------------
    # Services used by handlers
    # ------------------------------------------------------------------

    def destination_make(self, short: str) -> Destination:
        return self.settings.destination_make(short)

    def asset_exists(self, path: str) -> bool:
        """True if a referenced asset is a file under the source root"""
        return (Path(self.settings.source_root) / path).is_file()

    def notice_emit(self, message: str, verbose: bool = True) -> None:
        """Publish a progress notice"""
        LOG(message, level=2 if verbose else 1)
        self.events.emit(EventName.NOTICE, Notice(message=message, verbose=verbose))

    def warning_report(self, message: str) -> None:
        """
        Report a recoverable problem with one asset tag

        The caller skips the tag. In strict mode the problem is raised instead.

        Raises:
            AssetError: If settings.strict_mode is enabled
        """
        self.diagnostics.append(message)
        LOG(f"Warning: {message}", level=1)
        self.events.emit(EventName.WARNING, message)

        if self.settings.strict_mode:
            raise AssetError(message)

    def instruction_emit(
        self,
        kind: InstructionKind,
        target: str,
        src: Union[str, List[str]],
        dest: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> BuildInstruction:
        """Record a build instruction and publish it under its kind's event"""
        instruction = BuildInstruction(kind=kind, target=target, src=src, dest=dest, options=options)
        self.instructions.append(instruction)
        LOG(f"Queued {kind.value} [{target}]: {src} -> {dest}", level=2)
        self.events.emit(kind.event, instruction)
        return instruction

    def instructions_group(self) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
        """Instructions of the last parse(), grouped by tool and target"""
        return instructions_group(self.instructions)
