"""
Nesting parser tests - verify nested block resolution

Tests nested blocks at various depths and validates that:
- Inner blocks are resolved before the block that contains them
- Outer handlers see inner handler output, never raw inner directives
- Exactly one end tag is consumed per begin tag
- Block events are published in document order
"""

import pytest

from htmlblocks.config import AppSettings
from htmlblocks.lib.events import EventBus
from htmlblocks.lib.parser import BlockParser
from htmlblocks.models.events import EventName


def wrap_handler(block, parser):
    """Test handler: show type and contents"""
    return f"[{block.type}:{block.contents}]"


def make_parser(source, events=None):
    handlers = {name: wrap_handler for name in ("a", "b", "c", "d")}
    return BlockParser(source, settings=AppSettings(), type_parsers=handlers, events=events)


class TestSingleLevelNesting:
    """Test blocks with one level of nesting"""

    def test_single_child(self):
        """Inner block resolved first, outer sees its output"""
        parser = make_parser("<!--build:a--><!--build:b-->X<!--endbuild--><!--endbuild-->")
        assert parser.parse() == "[a:[b:X]]"

    def test_outer_contents_are_inner_output(self):
        """Outer handler never sees the raw inner directive"""
        seen = []

        def outer(block, parser):
            seen.append(block.contents)
            return "OUT"

        parser = BlockParser(
            "<!--build:a-->pre <!--build:b-->X<!--endbuild--> post<!--endbuild-->",
            settings=AppSettings(),
            type_parsers={"a": outer, "b": lambda block, parser: "INNER"},
        )
        assert parser.parse() == "OUT"
        assert seen == ["pre INNER post"]

    def test_sibling_children(self):
        """Several children with text between them"""
        parser = make_parser(
            "<!--build:a-->1<!--build:b-->x<!--endbuild-->2<!--build:c-->y<!--endbuild-->3<!--endbuild-->"
        )
        assert parser.parse() == "[a:1[b:x]2[c:y]3]"

    def test_same_type_nesting(self):
        """Blocks of the same type may nest"""
        parser = make_parser("<!--build:a-->x<!--build:a-->y<!--endbuild-->z<!--endbuild-->")
        assert parser.parse() == "[a:x[a:y]z]"

    def test_self_closing_child(self):
        parser = make_parser("<!--build:a-->x<!--build:b arg/-->y<!--endbuild-->")
        assert parser.parse() == "[a:x[b:None]y]"


class TestMultiLevelNesting:
    """Test blocks with multiple levels of nesting"""

    def test_three_levels(self):
        parser = make_parser(
            "<!--build:a--><!--build:b--><!--build:c-->deep<!--endbuild--><!--endbuild--><!--endbuild-->"
        )
        assert parser.parse() == "[a:[b:[c:deep]]]"

    def test_children_at_each_level(self):
        parser = make_parser(
            "<!--build:a-->"
            "<!--build:b-->1<!--endbuild-->"
            "<!--build:c-->"
            "<!--build:d-->2<!--endbuild-->"
            "<!--build:d-->3<!--endbuild-->"
            "<!--endbuild-->"
            "<!--endbuild-->"
        )
        assert parser.parse() == "[a:[b:1][c:[d:2][d:3]]]"

    def test_text_after_nested_block(self):
        """Scanning resumes after the whole nested block"""
        parser = make_parser(
            "<!--build:a--><!--build:b--><!--build:c-->x<!--endbuild-->y<!--endbuild-->z<!--endbuild-->tail"
        )
        assert parser.parse() == "[a:[b:[c:x]y]z]tail"

    def test_top_level_blocks_after_nesting(self):
        """A nested block does not swallow the next top-level block"""
        parser = make_parser(
            "<!--build:a--><!--build:b-->x<!--endbuild--><!--endbuild-->"
            " | "
            "<!--build:c-->y<!--endbuild-->"
        )
        assert parser.parse() == "[a:[b:x]] | [c:y]"


class TestNestedIndentation:
    """Test indentation of nested blocks"""

    def test_child_indent_kept_in_parent_contents(self):
        """A child's indentation stays in front of its replacement"""
        parser = BlockParser(
            "<!--build:a-->\n  <!--build:b x/-->\n<!--endbuild-->",
            settings=AppSettings(),
            type_parsers={"a": wrap_handler, "b": lambda block, parser: "B"},
        )
        assert parser.parse() == "[a:\n  B\n]"

    def test_child_list_output_uses_child_indent(self):
        """Multi-line child output aligns with the child's begin tag"""
        parser = BlockParser(
            "<!--build:a-->\n    <!--build:b/-->\n<!--endbuild-->",
            settings=AppSettings(),
            type_parsers={"a": wrap_handler, "b": lambda block, parser: ["one", "two"]},
        )
        assert parser.parse() == "[a:\n    one\n    two\n]"


class TestBlockEvents:
    """Test block event publication"""

    @pytest.fixture
    def recorded(self):
        """EventBus recording (event, type, contents) for block events"""
        bus = EventBus()
        log = []
        for name in (EventName.BLOCK_BEGIN, EventName.BLOCK_END, EventName.BLOCK_SINGLE):
            bus.on(name, lambda payload, name=name: log.append((name.value, payload.type, payload.contents)))
        return bus, log

    def test_nested_event_order(self, recorded):
        """Begin events outside-in, end events inside-out"""
        bus, log = recorded
        make_parser("<!--build:a--><!--build:b-->X<!--endbuild--><!--endbuild-->", events=bus).parse()

        assert log == [
            ("blockbegin", "a", None),
            ("blockbegin", "b", None),
            ("blockend", "b", "X"),
            ("blockend", "a", "[b:X]"),
        ]

    def test_self_closing_single_event_only(self, recorded):
        """Self-closing blocks emit blocksingle and no begin/end"""
        bus, log = recorded
        make_parser("<!--build:a x/-->", events=bus).parse()

        assert log == [("blocksingle", "a", None)]

    def test_event_payload_begin_tag(self):
        bus = EventBus()
        payloads = []
        bus.on(EventName.BLOCK_END, payloads.append)

        make_parser("  <!--build:a one two-->x<!--endbuild-->", events=bus).parse()

        assert payloads[0].type == "a"
        assert payloads[0].args == "one two"
        assert payloads[0].begin_tag == "  <!--build:a one two-->"
        assert payloads[0].contents == "x"
