"""Equilibrium search: saddlepoints, pure Nash equilibria, oddments and security levels."""
import warnings
from typing import Dict, List, Optional, Tuple

import numpy as np

from .errors import NoEquilibrium, UnsupportedShape
from .game import MatrixGame, numeric_matrix
from .expression import to_fraction


def _item(value):
    return value.item() if isinstance(value, np.generic) else value


def _key(row: int, col: int) -> str:
    return f'{row},{col}'


def saddlepoint(game: MatrixGame) -> Dict[str, object]:
    """All saddlepoints of the (row player's) payoff matrix: values that are the minimum of their row and
    the maximum of their column. Returns {"row,col": value} with 0-based coordinates; empty if there is none.
    With ties, every qualifying coordinate is reported.
    """
    matrix = numeric_matrix(game.row_payoff, 'saddlepoint')
    saddlepoints = {}
    for row in range(game.num_rows):
        row_min = min(matrix[row, :])
        for col in range(game.num_cols):
            value = matrix[row, col]
            if value == row_min and value == max(matrix[:, col]):
                saddlepoints[_key(row, col)] = _item(value)
    return saddlepoints


def best_responses(game: MatrixGame, player: int) -> set:
    """Outcomes (row, col) at which player's strategy is a best response to the opponent's pure strategy:
    player 1 maximizes payoff1 within each column, player 2 maximizes payoff2 within each row."""
    matrix = numeric_matrix(game.payoff_matrix(player), 'best_responses')
    if player == 1:
        return {(row, col) for col in range(game.num_cols) for row in range(game.num_rows)
                if matrix[row, col] == max(matrix[:, col])}
    return {(row, col) for row in range(game.num_rows) for col in range(game.num_cols)
            if matrix[row, col] == max(matrix[row, :])}


def nash(game: MatrixGame) -> Optional[Dict[str, Tuple[object, object]]]:
    """Pure strategy Nash equilibria: outcomes where both strategies are mutual best responses.
    Returns {"row,col": (u1, u2)} with 0-based coordinates, or None if the game has no pure equilibrium.
    """
    row_payoff = numeric_matrix(game.row_payoff, 'nash')
    col_payoff = numeric_matrix(game.col_payoff, 'nash')
    equilibria = sorted(best_responses(game, 1) & best_responses(game, 2))
    if not equilibria:
        return None
    return {_key(row, col): (_item(row_payoff[row, col]), _item(col_payoff[row, col])) for row, col in equilibria}


def _oddments(matrix: np.ndarray) -> List:
    (a, b), (c, d) = matrix.tolist()
    x, y = d - c, a - b
    if x < 0 or y < 0:
        x, y = c - d, b - a
    if x < 0 or y < 0:
        warnings.warn(f'Payoffs {matrix.tolist()} have a saddlepoint; oddments do not describe an equilibrium.',
                      RuntimeWarning)
    if x + y == 0:
        raise NoEquilibrium(f'Oddments of {matrix.tolist()} are undefined (payoff differences cancel out).')
    return [x / (x + y), y / (x + y)]


def oddments(game: MatrixGame) -> List[List]:
    """Closed-form mixed equilibrium of a 2x2 game without saddlepoint.

    For payoffs [[A, B], [C, D]], player 1 mixes with weights (D - C, A - B) (or (C - D, B - A) if either
    is negative), normalized to sum to 1. Player 2's weights follow from the transposed matrix.
    Exact payoffs (Fractions, expression strings) give exact probabilities.
    """
    if game.shape != (2, 2):
        raise UnsupportedShape('oddments', game.shape, required='2x2')
    matrix = numeric_matrix(game.row_payoff, 'oddments')
    if matrix.dtype == object:
        matrix = np.vectorize(to_fraction, otypes=[object])(matrix)
    return [_oddments(matrix), _oddments(matrix.T)]


def mm_tally(game: MatrixGame) -> Dict[int, dict]:
    """Pure security strategies of both players.

    Player 1 plays maximin: the row with the largest row minimum.
    Player 2 plays minimax in a zero-sum game (the column with the smallest column maximum of payoff), and
    maximin on payoff2 in a general-sum game (the column with the largest column minimum).
    In a general-sum game this is player 2's own security level, not the column that minimizes player 1's payoff.
    Ties go to the lowest index. Returns {player: {'strategy': one-hot list, 'value': guaranteed value}}.
    """
    rows = numeric_matrix(game.row_payoff, 'mm_tally')
    row_minima = [min(rows[row, :]) for row in range(game.num_rows)]
    row = max(range(game.num_rows), key=lambda index: row_minima[index])
    row_value = row_minima[row]

    if game.is_zero_sum:
        col_maxima = [max(rows[:, col]) for col in range(game.num_cols)]
        col = min(range(game.num_cols), key=lambda index: col_maxima[index])
        col_value = col_maxima[col]
    else:
        cols = numeric_matrix(game.col_payoff, 'mm_tally')
        col_minima = [min(cols[:, col]) for col in range(game.num_cols)]
        col = max(range(game.num_cols), key=lambda index: col_minima[index])
        col_value = col_minima[col]

    tally = {}
    for player, index, size, value in ((1, row, game.num_rows, row_value), (2, col, game.num_cols, col_value)):
        strategy = [0] * size
        strategy[index] = 1
        tally[player] = {'strategy': strategy, 'value': _item(value)}
    return tally
