from __future__ import annotations

import random

import numpy as np
import pytest

from falling_blocks.game import (
    Command,
    GameConfig,
    GameEngine,
    GameOver,
    GameState,
    LevelUp,
    LinesCleared,
    Phase,
    PieceLocked,
    PieceMoved,
    PieceRotated,
    TetrominoType,
    empty_board,
    is_valid,
    spawn_piece,
)

from conftest import make_board


def playing(board=None, piece=None, upcoming=None, **kwargs) -> GameState:
    return GameState(
        board=board if board is not None else empty_board(),
        current_piece=piece if piece is not None else spawn_piece(TetrominoType.T),
        next_piece=upcoming if upcoming is not None else spawn_piece(TetrominoType.L),
        is_playing=True,
        **kwargs,
    )


def two_row_well() -> np.ndarray:
    """Bottom two rows full except columns 4 and 5."""
    return make_board([(x, y) for y in (18, 19) for x in range(10) if x not in (4, 5)], value=int(TetrominoType.Z))


# -- lifecycle -----------------------------------------------------------


def test_start_initialises_fresh_game(engine):
    state = engine.start(high_score=250)
    assert state.phase is Phase.PLAYING
    assert state.current_piece is not None and state.next_piece is not None
    assert is_valid(state.current_piece, state.board)
    assert (state.score, state.lines, state.level) == (0, 0, 1)
    assert state.stats == (0,) * 7
    assert state.high_score == 250
    assert not state.board.any()


def test_start_carries_engine_high_score(engine):
    engine.high_score = 900
    assert engine.start().high_score == 900
    assert engine.start(high_score=100).high_score == 900


def test_reset_is_idle_and_idempotent(engine):
    engine.high_score = 42
    first = engine.reset()
    second = engine.reset()
    assert first == second
    assert first.phase is Phase.IDLE
    assert first.current_piece is None and first.next_piece is None
    assert first.high_score == 42
    assert engine.ghost_position(first) is None


def test_reset_keeps_high_score_of_finished_state(engine):
    over = playing(is_game_over=True, high_score=777).evolve(is_playing=False)
    assert engine.reset(over).high_score == 777


def test_pause_toggle_twice_restores(engine):
    state = engine.start()
    paused = engine.pause_toggle(state)
    assert paused.is_paused and paused.phase is Phase.PAUSED
    assert engine.pause_toggle(paused).is_paused is False


def test_pause_ignored_when_not_playing(engine):
    idle = engine.reset()
    assert engine.pause_toggle(idle) is idle
    over = GameState(is_game_over=True)
    assert engine.pause_toggle(over) is over


@pytest.mark.parametrize("command", list(Command))
def test_commands_ignored_outside_play(engine, command):
    idle = engine.reset()
    assert engine.apply_command(idle, command) is idle
    paused = engine.pause_toggle(engine.start())
    assert engine.apply_command(paused, command) is paused
    over = playing(is_game_over=True).evolve(is_playing=False)
    assert engine.step(over, command) == (over, [])


@pytest.mark.parametrize("bad", [99, -1, "jump"])
def test_unknown_command_fails_fast(engine, bad):
    with pytest.raises(ValueError):
        engine.apply_command(engine.start(), bad)


def test_invalid_config_fails_fast():
    with pytest.raises(ValueError):
        GameConfig(width=2)


# -- movement ------------------------------------------------------------


def test_move_left_and_right(engine):
    state = playing()
    left, events = engine.step(state, Command.MOVE_LEFT)
    assert left.current_piece.x == state.current_piece.x - 1
    assert events == [PieceMoved(-1, 0)]
    right = engine.apply_command(left, Command.MOVE_RIGHT)
    assert right.current_piece == state.current_piece
    # the board never holds the active piece
    assert not right.board.any()


def test_move_into_wall_is_a_noop(engine):
    state = playing(piece=spawn_piece(TetrominoType.O).moved(-4, 5))
    assert state.current_piece.x == 0
    after, events = engine.step(state, Command.MOVE_LEFT)
    assert after is state
    assert events == []


def test_soft_drop_and_tick_descend(engine):
    state = playing()
    dropped = engine.apply_command(state, Command.SOFT_DROP)
    ticked = engine.apply_command(state, Command.TICK)
    assert dropped.current_piece.y == 1
    assert ticked == dropped
    assert dropped.score == 0


def test_rotate_emits_event(engine):
    state = playing(piece=spawn_piece(TetrominoType.T).moved(0, 5))
    rotated, events = engine.step(state, Command.ROTATE)
    assert events == [PieceRotated()]
    np.testing.assert_array_equal(rotated.current_piece.shape, [[0, 1, 0], [0, 1, 1], [0, 1, 0]])


def test_rotate_o_piece_keeps_position(engine):
    state = playing(piece=spawn_piece(TetrominoType.O).moved(0, 5))
    rotated = engine.apply_command(state, Command.ROTATE)
    assert rotated.current_piece == state.current_piece


# -- locking and scoring -------------------------------------------------


def test_soft_lock_without_lines_scores_ten(engine):
    piece = spawn_piece(TetrominoType.O).moved(0, 18)
    upcoming = spawn_piece(TetrominoType.I)
    state = playing(piece=piece, upcoming=upcoming, lines=4, score=90)

    after, events = engine.step(state, Command.SOFT_DROP)

    assert after.score == 100
    assert (after.lines, after.level) == (4, 1)
    assert after.current_piece == upcoming
    assert after.next_piece is not None
    assert after.board[18, 4] == after.board[19, 5] == int(TetrominoType.O)
    assert after.placements(TetrominoType.O) == 1
    assert sum(after.stats) == 1
    assert events == [PieceLocked(TetrominoType.O, 0)]


def test_two_line_clear_at_level_three(engine):
    piece = spawn_piece(TetrominoType.O).moved(0, 18)
    state = playing(board=two_row_well(), piece=piece, lines=20)
    assert state.level == 3

    after, events = engine.step(state, Command.TICK)

    assert after.score == 610
    assert after.lines == 22
    assert after.level == 3
    assert not after.board.any()
    assert LinesCleared(2) in events
    assert not any(isinstance(e, LevelUp) for e in events)


def test_level_up_shortens_drop_interval(engine):
    piece = spawn_piece(TetrominoType.O).moved(0, 18)
    board = make_board([(x, 19) for x in range(10) if x not in (4, 5)])
    state = playing(board=board, piece=piece, lines=9)
    before = engine.drop_interval(state)

    after, events = engine.step(state, Command.SOFT_DROP)

    assert after.lines == 10
    assert after.level == 2
    assert LevelUp(2) in events
    # line bonus uses the level before the lock
    assert after.score == 10 + 100 * 1 * 1
    assert engine.drop_interval(after) < before


def test_hard_drop_scores_rows_descended(engine):
    state = playing(piece=spawn_piece(TetrominoType.O))
    after, events = engine.step(state, Command.HARD_DROP)
    assert after.score == 10 + 2 * 18
    assert events[0] == PieceLocked(TetrominoType.O, 18)
    assert after.board[19, 4] and after.board[18, 5]


def test_hard_drop_into_well_clears_lines(engine):
    state = playing(board=two_row_well(), piece=spawn_piece(TetrominoType.O))
    after = engine.apply_command(state, Command.HARD_DROP)
    assert after.score == 10 + 100 * 2 + 2 * 18
    assert after.lines == 2


def test_ghost_position_is_pure(engine):
    state = playing(board=two_row_well(), piece=spawn_piece(TetrominoType.T))
    ghost = engine.ghost_position(state)
    assert ghost.y == 16
    assert state.current_piece.y == 0
    dropped = engine.apply_command(state, Command.HARD_DROP)
    assert dropped.score == 10 + 2 * 16


# -- game over -----------------------------------------------------------


def blocked_spawn_state(high_score: int) -> GameState:
    # top two rows occupied up to the last column, so they never clear
    # but the lookahead O cannot spawn over them
    cells = [(x, y) for y in (0, 1) for x in range(9)]
    board = make_board(cells, value=int(TetrominoType.S))
    return playing(
        board=board,
        piece=spawn_piece(TetrominoType.I).moved(0, 18),
        upcoming=spawn_piece(TetrominoType.O),
        score=40,
        high_score=high_score,
    )


def test_game_over_with_new_high_score(engine):
    after, events = engine.step(blocked_spawn_state(high_score=20), Command.SOFT_DROP)

    assert after.is_game_over
    assert not after.is_playing
    assert after.phase is Phase.GAME_OVER
    assert after.current_piece is None
    assert after.score == 50
    assert after.high_score == 50
    assert events[-1] == GameOver(50, True)
    # a transition never touches the engine; only start/reset fold the record in
    assert engine.high_score == 0


def test_game_over_keeps_higher_previous_high_score(engine):
    after, events = engine.step(blocked_spawn_state(high_score=1000), Command.SOFT_DROP)
    assert after.is_game_over
    assert after.high_score == 1000
    assert events[-1] == GameOver(50, False)


def test_start_after_game_over_keeps_high_score(engine):
    over = engine.apply_command(blocked_spawn_state(high_score=0), Command.HARD_DROP)
    assert over.is_game_over
    fresh = engine.start(over)
    assert fresh.phase is Phase.PLAYING
    assert fresh.score == 0
    assert fresh.high_score == over.high_score


# -- invariants over play ------------------------------------------------


def test_random_play_keeps_invariants():
    engine = GameEngine(GameConfig(random_seed=3))
    rng = random.Random(3)
    state = engine.start()
    locks = 0
    for _ in range(2000):
        if state.is_game_over:
            break
        previous = state
        state, events = engine.step(state, rng.choice(list(Command)))
        locks += sum(isinstance(e, PieceLocked) for e in events)

        assert state.score >= previous.score
        assert state.level == state.lines // 10 + 1
        assert state.board.shape == (20, 10)
        assert sum(state.stats) == locks
        if state.accepts_input:
            assert state.current_piece is not None
            assert is_valid(state.current_piece, state.board)
            assert state.next_piece is not None
    assert locks > 0


def test_lookahead_on_copied_state_leaves_engine_untouched(engine):
    state = blocked_spawn_state(high_score=0)
    engine.step(state.evolve(), Command.HARD_DROP)
    assert engine.high_score == 0
    assert engine.start().high_score == 0


def test_reset_after_game_over_folds_in_high_score(engine):
    over = engine.apply_command(blocked_spawn_state(high_score=0), Command.HARD_DROP)
    idle = engine.reset(over)
    assert idle.high_score == 50
    assert engine.start().high_score == 50


def test_states_compare_by_value_and_are_unhashable(engine):
    assert engine.reset() == engine.reset()
    with pytest.raises(TypeError):
        hash(engine.reset())
