from hotline.scoreboard import Scoreboard


def test_register_is_idempotent():
    board = Scoreboard()
    board.register('Jack')
    board.award('Jack')
    board.register('Jack')
    assert board['Jack'] == 1


def test_snapshot_keeps_insertion_order():
    board = Scoreboard()
    board.register('Jack')
    board.register('Lori')
    board.award('Lori')
    snap = [(p.name, p.score) for p in board.snapshot()]
    assert snap == [('Jack', 0), ('Lori', 1)]


def test_snapshot_is_a_copy():
    board = Scoreboard()
    board.register('Jack')
    first = board.snapshot()
    board.award('Jack')
    assert first[0].score == 0
    assert board.as_dict() == {'Jack': 1}
