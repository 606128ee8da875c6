"""
Event and build instruction models

Defines the notifications a BlockParser emits while resolving a document and
the build instructions it hands to external asset tools (bundler, module
optimizer, stylesheet compiler).
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


class EventName(Enum):
    """
    Names of the notifications published on the EventBus

    Block events describe parser progress; instruction events carry the work
    requested from external tools.
    """
    BLOCK_BEGIN = "blockbegin"      # <!--build:type args-->
    BLOCK_END = "blockend"          # <!--endbuild-->
    BLOCK_SINGLE = "blocksingle"    # <!--build:type args/-->
    NOTICE = "notice"
    WARNING = "warning"
    UGLIFY = "uglify"
    REQUIREJS = "requirejs"
    LESS = "less"


class InstructionKind(Enum):
    """
    Kinds of build work a handler can request

    The value is the event the instruction is published under.
    """
    BUNDLE = "uglify"               # concatenate + minify scripts
    MODULE_BUNDLE = "requirejs"     # trace and bundle an AMD module tree
    STYLE_COMPILE = "less"          # compile/merge stylesheets

    @property
    def event(self) -> EventName:
        return EventName(self.value)


@dataclass(frozen=True)
class Destination:
    """
    Output path of an aggregating handler

    Attributes:
        short: Path as written into the rewritten document (e.g. "js/app.js")
        full: Resolved path under the configured base directory, used as the
              external tool's output file (e.g. "/www/js/app.js")
    """
    short: str
    full: str


@dataclass
class BuildInstruction:
    """
    A unit of work for an external build tool

    The parser never inspects the effect of an instruction; it only constructs
    it and forwards it on the EventBus.

    Attributes:
        kind: Which tool should run
        target: Build target name (e.g. "dist")
        src: Source path, or list of paths
        dest: Destination path (full form)
        options: Tool-specific options (module bundles only)
    """
    kind: InstructionKind
    target: str
    src: Union[str, List[str]]
    dest: str
    options: Optional[Dict[str, Any]] = None

    def as_dict(self) -> Dict[str, Any]:
        """Plain mapping for manifests, without the kind/target keys"""
        entry: Dict[str, Any] = {"src": self.src, "dest": self.dest}
        if self.options:
            entry["options"] = dict(self.options)
        return entry


@dataclass
class BlockNotification:
    """
    Payload of blockbegin / blockend / blocksingle

    Attributes:
        type: Block type (selects the handler)
        args: Raw argument string, None if absent
        begin_tag: Verbatim text of the begin tag match
        contents: Resolved contents (blockend only)
    """
    type: str
    args: Optional[str]
    begin_tag: str
    contents: Optional[str] = None


@dataclass
class Notice:
    """Human-readable progress message; verbose notices are debugging detail"""
    message: str
    verbose: bool = field(default=False)


def instructions_group(
    instructions: List[BuildInstruction],
) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    """
    Group instructions by tool and target, keeping emission order

    Example:
        {"uglify": {"dist": [{"src": "a.js", "dest": "out.js"},
                             {"src": "b.js", "dest": "out.js"}]}}
    """
    grouped: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
    for instruction in instructions:
        by_target = grouped.setdefault(instruction.kind.value, {})
        by_target.setdefault(instruction.target, []).append(instruction.as_dict())
    return grouped
