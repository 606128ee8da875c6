"""
Block handler implementations for htmlblocks

Each handler turns a resolved Block into replacement text and, for the
aggregating types, publishes the build instructions that produce the files
the replacement refers to. Uses HandlerSpec for metadata and dispatch.
"""

import os
import re
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from ..models.handlers import HandlerSpec, HandlerOrigin
from ..models.parser import Block
from ..models.events import Destination, InstructionKind
from .errors import DirectiveUsageError
from .tags import tags_extract, args_split, moduleArgs_parse, MODULE_SYNTAX
from .log import LOG

if TYPE_CHECKING:
    from .parser import BlockParser


STYLESHEET_TYPE = "text/css"
DEST_SYNTAX = "<dest>"


def scriptTag_make(src: str) -> str:
    return f'<script src="{src}"></script>'


def linkTag_make(href: str) -> str:
    return f'<link rel="stylesheet" type="{STYLESHEET_TYPE}" href="{href}">'


def destination_parse(block: Block, parser: 'BlockParser') -> Destination:
    """
    Read the single <dest> argument of an aggregating block

    Raises:
        DirectiveUsageError: If there is not exactly one argument token
    """
    tokens = args_split(block.args)
    if not tokens:
        raise DirectiveUsageError(block.type, DEST_SYNTAX)
    if len(tokens) > 1:
        raise DirectiveUsageError(
            block.type, DEST_SYNTAX, detail=f"Too many arguments: {block.args}."
        )
    return parser.destination_make(tokens[0])


def moduleOptions_make(main: str, dest: Destination, base_url: str) -> Dict[str, Any]:
    """
    Default module optimizer options for a main module

    A main module without a directory component ("app") uses the configured
    base directory as its baseUrl.
    """
    return {
        'baseUrl': os.path.dirname(main) or base_url,
        'name': os.path.basename(main),
        'out': dest.full,
        'mainConfigFile': main + '.js',
    }


class HandlerRegistry:
    """
    Registry of block handlers

    Built once per parser: built-in handlers first, then caller overrides,
    which replace a built-in of the same type.
    """

    def __init__(self, overrides: Optional[Dict[str, Callable]] = None) -> None:
        """
        Initialize the registry

        Args:
            overrides: Caller handlers keyed by block type

        Raises:
            TypeError: If an override is not callable
        """
        self.specs: Dict[str, HandlerSpec] = {}
        self.builtinHandlers_register()

        for name, handler in (overrides or {}).items():
            if not callable(handler):
                raise TypeError(f"Handler override for '{name}' is not callable: {handler!r}")
            self.register(HandlerSpec(
                name=name,
                handler=handler,
                origin=HandlerOrigin.OVERRIDE,
                description='Caller-supplied handler',
            ))

    def register(self, spec: HandlerSpec) -> None:
        """Register a handler specification"""
        self.specs[spec.name] = spec

    def get(self, name: str) -> Optional[Callable[[Block, 'BlockParser'], Any]]:
        """Get handler function by block type, None if not registered"""
        spec = self.specs.get(name)
        return spec.handler if spec else None

    def spec_get(self, name: str) -> Optional[HandlerSpec]:
        """Get full handler specification by block type"""
        return self.specs.get(name)

    def handlers_listByOrigin(self, origin: HandlerOrigin) -> List[HandlerSpec]:
        """Get all handlers of one origin"""
        return [spec for spec in self.specs.values() if spec.origin == origin]

    def dispatch(self, block: Block, parser: 'BlockParser') -> str:
        """
        Run the handler for a block and normalize its result

        A string is used verbatim; a list or tuple of strings is joined with a
        newline followed by the block's indent so continuation lines line up
        with the begin tag. Anything else, and unknown block types, produce an
        empty replacement.

        Args:
            block: Resolved block
            parser: BlockParser running the block (passed through to the handler)

        Returns:
            Replacement text
        """
        handler = self.get(block.type)
        if handler is None:
            LOG(f"Unknown block type '{block.type}', dropping block", level=2)
            return ''

        replace = handler(block, parser)

        if isinstance(replace, str):
            return replace
        if isinstance(replace, (list, tuple)):
            return ('\n' + block.indent).join(replace)
        return ''

    def builtinHandlers_register(self) -> None:
        """Register the built-in block handlers"""

        def uncomment_handler(block: Block, parser: 'BlockParser') -> str:
            """Handle uncomment - strip the comment markers around the contents"""
            if block.contents is None:
                return ''

            contents = re.sub(r'^(\s*)<!--', r'\1', block.contents, count=1)
            return re.sub(r'-->(\s*)$', r'\1', contents, count=1)

        def js_handler(block: Block, parser: 'BlockParser') -> List[str]:
            """Handle js - bundle every <script src> into one destination"""
            dest = destination_parse(block, parser)
            target = parser.settings.target
            parser.notice_emit(f"Set destination to {dest.full}")

            out_tags: List[str] = []

            for tag in tags_extract('script', block.contents or ''):
                parser.notice_emit(f"Parsing tag: {tag.html}")

                src = tag.get('src')
                if src is None:
                    parser.warning_report(f"Tag missing src attribute: {tag.html}")
                    continue

                if not parser.asset_exists(src):
                    parser.warning_report(f"Cannot find file for src: {tag.html}")
                    continue

                if not out_tags:
                    out_tags.append(scriptTag_make(dest.short))
                    parser.notice_emit(f"Added tag: {out_tags[-1]}")

                parser.instruction_emit(InstructionKind.BUNDLE, target, src, dest.full)

                # Loader tag with an embedded requirejs main module
                main = tag.get('data-main')
                if main is None:
                    continue

                module_dest = parser.destination_make(tag.get('data-dest') or main + '.js')
                module_target = tag.get('data-target') or target

                out_tags.append(scriptTag_make(module_dest.short))
                parser.notice_emit(f"Added tag: {out_tags[-1]}")

                parser.instruction_emit(
                    InstructionKind.MODULE_BUNDLE,
                    module_target,
                    main + '.js',
                    module_dest.full,
                    options=moduleOptions_make(main, module_dest, parser.settings.base_url),
                )
                parser.instruction_emit(
                    InstructionKind.BUNDLE, target, module_dest.full, module_dest.full
                )

            return out_tags

        def less_handler(block: Block, parser: 'BlockParser') -> List[str]:
            """Handle less - compile every stylesheet <link> into one destination"""
            dest = destination_parse(block, parser)
            target = parser.settings.target
            parser.notice_emit(f"Set destination to {dest.full}")

            out_tags: List[str] = []

            for tag in tags_extract('link', block.contents or ''):
                parser.notice_emit(f"Parsing tag: {tag.html}")

                problem = None
                for attr in ('href', 'rel', 'type'):
                    if tag.get(attr) is None:
                        problem = f"Tag missing {attr} attribute: {tag.html}"
                        break
                else:
                    if tag.get('type') != STYLESHEET_TYPE:
                        problem = f"Tag's type attribute is not '{STYLESHEET_TYPE}': {tag.html}"
                    elif not parser.asset_exists(tag.get('href')):
                        problem = f"Cannot find file for href: {tag.html}"

                if problem:
                    parser.warning_report(problem)
                    continue

                if not out_tags:
                    out_tags.append(linkTag_make(dest.short))
                    parser.notice_emit(f"Added tag: {out_tags[-1]}")

                # Later sources for the same destination are merged by the compiler
                parser.instruction_emit(InstructionKind.STYLE_COMPILE, target, tag.get('href'), dest.full)

            return out_tags

        def requirejs_handler(block: Block, parser: 'BlockParser') -> List[str]:
            """Handle requirejs - optimize a module tree into one script"""
            module_args = moduleArgs_parse(block.args)
            settings = parser.settings

            main = module_args.main
            parser.notice_emit(f"Set main to {main}")

            dest = parser.destination_make(module_args.dest or main + '.js')
            if module_args.dest:
                parser.notice_emit(f"Set destination to {dest.full}")

            target = module_args.target or settings.target
            if module_args.target:
                parser.notice_emit(f"Set target to {target}")

            out_tags = [scriptTag_make(dest.short)]
            parser.notice_emit(f"Added tag: {out_tags[-1]}")

            options = moduleOptions_make(main, dest, settings.base_url)
            options.update(module_args.options)

            parser.instruction_emit(
                InstructionKind.MODULE_BUNDLE, target, main + '.js', dest.full, options=options
            )
            parser.instruction_emit(InstructionKind.BUNDLE, target, dest.full, dest.full)

            return out_tags

        self.register(HandlerSpec(
            name='uncomment',
            handler=uncomment_handler,
            description='Turn commented-out markup back into live markup',
            examples=['<!--build:uncomment-->\n<!-- <script src="live-reload.js"></script> -->\n<!--endbuild-->'],
        ))

        self.register(HandlerSpec(
            name='js',
            handler=js_handler,
            description='Concatenate and minify referenced scripts into one file',
            syntax=DEST_SYNTAX,
            examples=[
                '<!--build:js js/app.min.js-->\n<script src="js/a.js"></script>\n<!--endbuild-->',
                '<!--build:js js/vendor.js-->\n<script src="js/require.js" data-main="js/app"></script>\n<!--endbuild-->',
            ],
        ))

        self.register(HandlerSpec(
            name='less',
            handler=less_handler,
            description='Compile referenced stylesheets into one file',
            syntax=DEST_SYNTAX,
            examples=[
                '<!--build:less css/site.css-->\n'
                '<link rel="stylesheet" type="text/css" href="css/a.less">\n'
                '<!--endbuild-->'
            ],
        ))

        self.register(HandlerSpec(
            name='requirejs',
            handler=requirejs_handler,
            description='Optimize a requirejs module tree into one script',
            syntax=MODULE_SYNTAX,
            examples=[
                '<!--build:requirejs js/app/-->',
                '<!--build:requirejs js/app js/app.min.js release {"optimize": "none"}/-->',
            ],
        ))
