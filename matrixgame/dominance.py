"""Elimination of dominated strategies.

Two distinct procedures are provided:

- reduce: strict dominance between the utility vectors of a single player; removes at most one strategy per call.
- row_reduce / col_reduce: weak dominance on the payoff matrix; removes every dominated row (column) at once.

All functions return a new MatrixGame and leave their input untouched. Apply them repeatedly until the game
no longer changes (see iterated_reduction).
"""
from typing import Callable, List, Optional, Tuple

import numpy as np

from .game import MatrixGame, numeric_matrix


def _other(player: int) -> int:
    if player not in (1, 2):
        raise ValueError(f'Player must be 1 or 2, got {player}.')
    return 2 if player == 1 else 1


def _utility_vectors(game: MatrixGame, player: int) -> List[np.ndarray]:
    """One vector per strategy of player: their payoffs against each strategy of the opponent."""
    matrix = numeric_matrix(game.payoff_matrix(player), 'Dominance')
    if player == 1:
        return [matrix[a, :] for a in range(game.num_rows)]
    return [matrix[:, a] for a in range(game.num_cols)]


def _classify(utility, other_utility) -> int:
    """+1 if utility is better, -1 if it is worse, 0 for a tie."""
    if utility > other_utility:
        return 1
    if utility < other_utility:
        return -1
    return 0


def dominated_strategies(game: MatrixGame, player: int) -> List[Tuple[int, int]]:
    """All pairs (dominated, dominator) of strategy numbers (1-based) of player such that the dominated strategy
    is strictly worse against every strategy of the opponent."""
    _other(player)
    vectors = _utility_vectors(game, player)
    pairs = []
    for a, vector_a in enumerate(vectors):
        for b, vector_b in enumerate(vectors):
            if a == b:
                continue
            comparison = [_classify(u_a, u_b) for u_a, u_b in zip(vector_a, vector_b)]
            if all(c == -1 for c in comparison):
                pairs.append((a + 1, b + 1))
    return pairs


def reduce(game: MatrixGame, player: int, opponent: Optional[int] = None) -> MatrixGame:
    """Remove the first strictly dominated strategy of player (in order of strategy numbers).
    The opponent loses the matching entry of each of their utility vectors, i.e. the row (column) disappears
    from both payoff matrices. Returns the game unchanged if player has no dominated strategy.
    """
    if opponent is None:
        opponent = _other(player)
    elif opponent != _other(player):
        raise ValueError(f'Opponent of player {player} must be player {_other(player)}, got {opponent}.')

    pairs = dominated_strategies(game, player)
    if not pairs:
        return game
    dominated, _ = pairs[0]
    return game.remove_strategies(player, [dominated - 1])


def _weakly_dominated(vectors: np.ndarray, dominated_by: Callable) -> List[int]:
    """Indices of vectors that are dominated by another vector which has not been removed yet."""
    removed = []
    for index in range(len(vectors)):
        for other in range(len(vectors)):
            if other == index or other in removed:
                continue
            if np.all(dominated_by(vectors[index], vectors[other])):
                removed.append(index)
                break
    return removed


def row_reduce(game: MatrixGame) -> MatrixGame:
    """Remove every row that is pointwise <= another row: the (maximizing) row player never prefers it.
    A row that has already been removed does not eliminate others, so one of several identical rows remains.
    """
    rows = numeric_matrix(game.row_payoff, 'row_reduce')
    removed = _weakly_dominated(rows, lambda row, other: row <= other)
    return game.remove_strategies(1, removed)


def col_reduce(game: MatrixGame) -> MatrixGame:
    """Remove every column the column player never prefers to another one.
    Zero-sum: the column player minimizes, so a column is removed if it is pointwise >= another column of payoff.
    General-sum: a column is removed if it is pointwise <= another column of payoff2.
    """
    if game.is_zero_sum:
        columns = numeric_matrix(game.payoff, 'col_reduce').T
        removed = _weakly_dominated(columns, lambda column, other: column >= other)
    else:
        columns = numeric_matrix(game.payoff2, 'col_reduce').T
        removed = _weakly_dominated(columns, lambda column, other: column <= other)
    return game.remove_strategies(2, removed)


def iterated_reduction(game: MatrixGame, verbose: int = 0) -> MatrixGame:
    """Iterated elimination of strictly dominated strategies: apply reduce to both players until
    neither has a dominated strategy left.

    verbose: 0 is silent, 1 reports every removed strategy.
    """
    step = 0
    changed = True
    while changed:
        changed = False
        for player in (1, 2):
            reduced = reduce(game, player)
            if reduced is game:
                continue
            step += 1
            changed = True
            if verbose >= 1:
                removed = set(game.strategy_labels[player - 1]) - set(reduced.strategy_labels[player - 1])
                print(f'Step {step:3d}: removed strategy {", ".join(sorted(removed))} '
                      f'of {game.player_labels[player - 1]} ({reduced.num_rows}x{reduced.num_cols} left)')
            game = reduced
    if verbose >= 1:
        print(f'Iterated reduction finished after {step} step(s).')
    return game
