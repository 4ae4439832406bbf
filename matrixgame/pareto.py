"""Pareto-optimal outcomes."""
from typing import Dict, Tuple

import numpy as np

from .game import MatrixGame, numeric_matrix


def pareto_optimal(game: MatrixGame) -> Dict[str, Tuple[object, object]]:
    """Outcomes whose payoff pair (u1, u2) is not Pareto-dominated, i.e. no other outcome is at least as good
    for both players and strictly better for one. Returns {"row,col": (u1, u2)} with 0-based coordinates.
    In a zero-sum game every outcome is Pareto-optimal.
    """
    u1 = numeric_matrix(game.row_payoff, 'pareto_optimal')
    u2 = numeric_matrix(game.col_payoff, 'pareto_optimal')

    # pairs[k] = (u1, u2) of outcome k, outcomes in row-major order
    pairs = np.stack([u1.ravel(), u2.ravel()], axis=1)
    at_least_as_good = (pairs[np.newaxis, :, :] >= pairs[:, np.newaxis, :]).all(axis=-1)
    strictly_better = (pairs[np.newaxis, :, :] > pairs[:, np.newaxis, :]).any(axis=-1)
    # dominated[k]: some outcome l is at least as good in both and better in one payoff
    dominated = (at_least_as_good & strictly_better).any(axis=1)

    optimal = {}
    for index in np.flatnonzero(~dominated.astype(bool)):
        row, col = np.unravel_index(index, game.shape)
        u = tuple(value.item() if isinstance(value, np.generic) else value for value in pairs[index])
        optimal[f'{row},{col}'] = u
    return optimal
