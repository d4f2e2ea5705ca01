from ctxweaver.engine.directive import (
    GENERATED_MARKER,
    SKIP_MARKER,
    comment_body,
    has_decl_marker,
    has_marker,
    has_stmt_marker,
    is_generated_header,
)
from ..infrastructure import block_of


def test_comment_body_strips_syntax():
    assert comment_body("// ctxweaver:skip") == "ctxweaver:skip"
    assert comment_body("//ctxweaver:skip reason") == "ctxweaver:skip reason"
    assert comment_body("/* ctxweaver:skip */") == "ctxweaver:skip"
    assert comment_body("  // x  ") == "x"


def test_has_marker_is_prefix_match():
    assert has_marker(["//ctxweaver:skip"])
    assert has_marker(["// unrelated", "/*ctxweaver:skip: hand-written*/"])
    assert not has_marker(["// do not ctxweaver:skip"])
    assert not has_marker([])


def test_has_marker_disabled():
    assert not has_marker(["//ctxweaver:skip"], None)
    assert not has_marker(["//ctxweaver:skip"], "")


def test_stmt_marker_positions():
    block = block_of('''
        //ctxweaver:skip
        a()
        b() // ctxweaver:skip
        c()
    ''')
    a, b, c = block.stmts
    assert has_stmt_marker(a, SKIP_MARKER)
    assert has_stmt_marker(b, SKIP_MARKER)
    assert not has_stmt_marker(c, SKIP_MARKER)
    assert not has_stmt_marker(None)


def test_generated_marker_is_distinct():
    block = block_of(f"a() //{GENERATED_MARKER}")
    assert has_stmt_marker(block.stmts[0], GENERATED_MARKER)
    assert not has_stmt_marker(block.stmts[0], SKIP_MARKER)


def test_generated_header():
    assert is_generated_header(["// Code generated by protoc-gen-go. DO NOT EDIT."])
    assert not is_generated_header(["// Code generated by hand, edit freely."])


def test_decl_marker_file_scope():
    header = ["// Code generated by mockgen. DO NOT EDIT."]
    assert has_decl_marker(header, SKIP_MARKER, file_scope=True)
    assert not has_decl_marker(header, SKIP_MARKER)
    assert has_decl_marker(["// Handle does things.", "//ctxweaver:skip"], SKIP_MARKER)
