"""
Tests for statement list mutations and trivia transfer.
"""

from ctxweaver.engine import insert_front, remove_range, replace_range
from ..infrastructure import block_of, candidate


def test_insert_front_marks_blank_after_last_inserted():
    block = block_of("work(ctx)")
    cand = candidate("a()\nb()")

    assert insert_front(block, cand) is True

    assert [s.source for s in block.stmts] == ["a()", "b()", "work(ctx)"]
    assert block.stmts[0].trivia.blank_after is False
    assert block.stmts[1].trivia.blank_after is True
    assert block.stmts[2].trivia.blank_before is False


def test_insert_front_empty_candidate_is_noop():
    block = block_of("work(ctx)")
    assert insert_front(block, []) is False
    assert len(block.stmts) == 1


def test_replace_inherits_leading_comments_and_blank_after():
    block = block_of('''
        // tracing
        defer trace(ctx, "old")

        work(ctx)
    ''')
    old = block.stmts[0]
    assert old.trivia.leading == ["// tracing"]
    assert old.trivia.blank_after is True

    assert replace_range(block, 0, 1, candidate('defer trace(ctx, "new")')) is True

    new = block.stmts[0]
    assert new.source == 'defer trace(ctx, "new")'
    assert new.trivia.leading == ["// tracing"]
    assert new.trivia.blank_after is True


def test_replace_keeps_candidate_comments():
    block = block_of('''
        // old comment
        defer trace(ctx, "old") // old trailing
    ''')
    cand = candidate('''
        // new comment
        defer trace(ctx, "new") // new trailing
    ''')

    replace_range(block, 0, 1, cand)

    assert block.stmts[0].trivia.leading == ["// new comment"]
    assert block.stmts[0].trivia.trailing == [" // new trailing"]


def test_replace_inherits_trailing_when_candidate_has_none():
    block = block_of('defer trace(ctx, "old") // keep')
    replace_range(block, 0, 1, candidate('defer trace(ctx, "new")'))
    assert block.stmts[0].trivia.trailing == [" // keep"]


def test_replace_multi_statement_boundaries():
    block = block_of('''
        first()

        // group
        ctx, span := tracer.Start(ctx, "old")
        defer span.End()

        work(ctx)
    ''')
    cand = candidate('ctx, span := tracer.Start(ctx, "new")\ndefer span.End()')

    assert replace_range(block, 1, 2, cand) is True

    assert block.stmts[1].trivia.leading == ["// group"]
    assert block.stmts[2].trivia.blank_after is True
    assert [s.source for s in block.stmts][0] == "first()"
    assert [s.source for s in block.stmts][-1] == "work(ctx)"


def test_replace_out_of_bounds_leaves_block_untouched():
    block = block_of("a()\nb()")
    assert replace_range(block, 1, 2, candidate("c()")) is False
    assert replace_range(block, -1, 1, candidate("c()")) is False
    assert replace_range(block, 0, 0, candidate("c()")) is False
    assert [s.source for s in block.stmts] == ["a()", "b()"]


def test_remove_range():
    block = block_of("a()\nb()\nc()")
    assert remove_range(block, 0, 2) is True
    assert [s.source for s in block.stmts] == ["c()"]


def test_remove_out_of_bounds():
    block = block_of("a()")
    assert remove_range(block, 0, 2) is False
    assert remove_range(block, 1, 1) is False
    assert len(block.stmts) == 1


def test_candidate_not_shared_after_replace():
    cand = candidate('defer trace(ctx, "new")')
    block = block_of('defer trace(ctx, "old") // keep')

    replace_range(block, 0, 1, cand)

    assert block.stmts[0] is not cand[0]
    assert cand[0].trivia.trailing == []
