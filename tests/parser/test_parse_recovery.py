import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from basm.exceptions import ErrorCode
from basm.parser.core.classes import NodeKind
from factory_helpers import *


def test_wrong_literal_shape_is_consumed():
    root, diagnostics = parse_source('[Stage]\nvolume "loud"\nlayer 1\nend')
    assert [(d.code, d.line) for d in diagnostics] == [(ErrorCode.EXPECTED_VALUE, 2)]
    assert diagnostics[0].details == {"expected": "a non-negative number", "keyword": "volume", "data": '"loud"'}
    target = root.children[0]
    assert target.children[1] == get_node(NodeKind.VOLUME, line=2)
    assert target.children[2] == get_property(NodeKind.LAYER, NodeKind.POS_INT_DATA, "1", line=3)


def test_missing_value_hands_structural_token_back():
    root, diagnostics = parse_source("[Stage]\nvolume\nend\nsem_ver \"3.0.0\"")
    assert [(d.code, d.line) for d in diagnostics] == [(ErrorCode.EXPECTED_VALUE, 3)]
    # `end` still closed the target, so the metadata parses at root
    assert [child.kind for child in root.children] == [NodeKind.TARGET, NodeKind.SEM_VER]


def test_keyword_instead_of_value_is_reprocessed():
    root, diagnostics = parse_source("[Stage] volume layer 2 end")
    assert codes(diagnostics) == [ErrorCode.EXPECTED_VALUE]
    assert root.children[0].children[2] == get_property(NodeKind.LAYER, NodeKind.POS_INT_DATA, "2")


@pytest.mark.parametrize(
    "source, data, section",
    [
        pytest.param("[S] opcode end", "opcode", "Target", id="block_property_in_target"),
        pytest.param("[S] block costume end end", "costume", "Block", id="section_inside_block"),
        pytest.param("{m} block end", "block", "Monitor", id="section_inside_monitor"),
        pytest.param("[S] sem_ver end", "sem_ver", "Target", id="metadata_inside_target"),
        pytest.param("[S] 12 end", "12", "Target", id="bare_literal"),
    ],
)
def test_unexpected_tokens_in_sections(source, data, section):
    root, diagnostics = parse_source(source)
    assert codes(diagnostics) == [ErrorCode.UNEXPECTED_TOKEN_IN_SECTION]
    assert diagnostics[0].details["data"] == data
    assert diagnostics[0].details["section"] == section


def test_new_header_closes_unterminated_target():
    root, diagnostics = parse_source("[Stage]\nis_stage true\n[Sprite1]\nis_stage false\nend")
    assert [(d.code, d.line) for d in diagnostics] == [(ErrorCode.UNCLOSED_SECTION, 1)]
    assert diagnostics[0].details == {"section": "Target"}
    assert [child.children[0] for child in root.children] == [get_string("Stage"), get_string("Sprite1", line=3)]


def test_new_header_reports_every_open_section_innermost_first():
    root, diagnostics = parse_source("[Stage]\nblock\nuid \"a\"\n{monitor}\nend")
    assert [(d.code, d.line, d.details["section"]) for d in diagnostics] == [
        (ErrorCode.UNCLOSED_SECTION, 2, "Block"),
        (ErrorCode.UNCLOSED_SECTION, 1, "Target"),
    ]
    assert [child.kind for child in root.children] == [NodeKind.TARGET, NodeKind.MONITOR]


def test_header_instead_of_value_is_not_swallowed():
    root, diagnostics = parse_source("[Stage] volume [Cat] end")
    assert codes(diagnostics) == [ErrorCode.EXPECTED_VALUE, ErrorCode.UNCLOSED_SECTION]
    assert [child.kind for child in root.children] == [NodeKind.TARGET, NodeKind.TARGET]


def test_unclosed_sections_at_end_of_input():
    root, diagnostics = parse_source('[Stage]\nblock\nuid "a"')
    assert [(d.code, d.line, d.details["section"]) for d in diagnostics] == [
        (ErrorCode.UNCLOSED_SECTION, 2, "Block"),
        (ErrorCode.UNCLOSED_SECTION, 1, "Target"),
    ]
    assert root.children[0].children[1].children == [get_property(NodeKind.UID, NodeKind.STRING_DATA, "a", line=3)]


def test_property_value_missing_at_end_of_input():
    root, diagnostics = parse_source("[Stage]\nvolume")
    assert [(d.code, d.line) for d in diagnostics] == [
        (ErrorCode.MISSING_VALUE, 2),
        (ErrorCode.UNCLOSED_SECTION, 1),
    ]


def test_input_without_terminator_before_next_property():
    root, diagnostics = parse_source('[S]\nblock\ninput "X" double 1\nnext null\nend\nend')
    assert [(d.code, d.line) for d in diagnostics] == [(ErrorCode.MISSING_ENTRY_TERMINATOR, 4)]
    assert diagnostics[0].details == {"keyword": "input", "data": "next"}
    block = root.children[0].children[1]
    assert [child.kind for child in block.children] == [NodeKind.INPUT, NodeKind.NEXT]


def test_input_without_terminator_before_end():
    root, diagnostics = parse_source('[S] block input "X" double 1 end end sem_ver "1"')
    assert codes(diagnostics) == [ErrorCode.MISSING_ENTRY_TERMINATOR]
    assert [child.kind for child in root.children] == [NodeKind.TARGET, NodeKind.SEM_VER]


def test_bare_literal_in_input_needs_annotation():
    root, diagnostics = parse_source('[S] block input "X" 5 ; end end')
    assert codes(diagnostics) == [ErrorCode.MISSING_TYPE_ANNOTATION]
    assert diagnostics[0].details == {"keyword": "input", "data": "5"}


def test_empty_input_entry():
    root, diagnostics = parse_source('[S] block input "X" ; end end')
    assert codes(diagnostics) == [ErrorCode.EMPTY_TYPED_ENTRY]


def test_annotation_with_wrong_literal_shape():
    root, diagnostics = parse_source('[S] block input "X" double "ten" ; end end')
    assert codes(diagnostics) == [ErrorCode.EXPECTED_VALUE]
    assert diagnostics[0].details == {"expected": "a number", "keyword": "double", "data": '"ten"'}
    assert root.children[0].children[1].children[0] == get_node(NodeKind.INPUT, get_string("X"))


def test_input_name_must_be_a_string():
    root, diagnostics = parse_source("[S] block input 3 end end")
    assert codes(diagnostics) == [ErrorCode.EXPECTED_VALUE]
    assert diagnostics[0].details["keyword"] == "input"


def test_unterminated_input_at_end_of_input():
    root, diagnostics = parse_source('[S] block input "X" color')
    assert codes(diagnostics) == [
        ErrorCode.MISSING_VALUE,
        ErrorCode.UNTERMINATED_ENTRY,
        ErrorCode.UNCLOSED_SECTION,
        ErrorCode.UNCLOSED_SECTION,
    ]


def test_two_errors_on_different_lines_are_both_reported():
    root, diagnostics = parse_source("[Stage]\nvolume true\nend\n[Cat]\nsize \"big\"\nend")
    assert [(d.code, d.line) for d in diagnostics] == [
        (ErrorCode.EXPECTED_VALUE, 2),
        (ErrorCode.EXPECTED_VALUE, 5),
    ]
    assert len(root.children) == 2
