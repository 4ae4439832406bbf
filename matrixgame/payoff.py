"""Expected payoffs, symbolic payoff sums, and single-round play."""
import re
from fractions import Fraction
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .game import MatrixGame, is_symbolic_value
from .expression import Expression

_ATOM = re.compile(r'^(?:-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?|[A-Za-z_][A-Za-z_0-9]*)$')


def format_value(value) -> str:
    """Render a payoff or probability as a factor of a product: numbers without trailing .0,
    compound expression strings in parentheses."""
    if isinstance(value, Expression):
        value = str(value)
    if isinstance(value, str):
        value = value.strip()
        return value if _ATOM.match(value) else f'({value})'
    if isinstance(value, Fraction):
        return str(value.numerator) if value.denominator == 1 else f'{value.numerator}/{value.denominator}'
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return np.format_float_positional(float(value), trim='-')


def _item(value):
    return value.item() if isinstance(value, np.generic) else value


def s_expected_payoff(game: MatrixGame, player: int = 1) -> str:
    """Expected payoff of player as an unevaluated expression string.

    One term "p1[i] * p2[j] * payoff[i][j]" per outcome, joined by " + ", ordered by player 1's and then
    player 2's strategy number. No simplification takes place.
    """
    matrix = game.payoff_matrix(player)
    terms = []
    for i, p in enumerate(game.probabilities(1)):
        for j, q in enumerate(game.probabilities(2)):
            terms.append(f'{format_value(p)} * {format_value(q)} * {format_value(matrix[i, j])}')
    return ' + '.join(terms)


def expected_payoff(game: MatrixGame, player: int = 1):
    """Expected payoff of player (1 or 2) under the game's mixed strategies:
    sum over all outcomes (i, j) of p1[i] * p2[j] * payoff[i][j].

    Expression strings are evaluated exactly; they must not leave any free variable
    (use s_expected_payoff or the symbolic module for that).
    """
    matrix = game.payoff_matrix(player)
    if not game.is_symbolic:
        total = 0
        for i, p in enumerate(game.probabilities(1)):
            for j, q in enumerate(game.probabilities(2)):
                total += p * q * matrix[i, j]
        return _item(total)

    expression = Expression(s_expected_payoff(game, player))
    if not expression.is_constant:
        raise ValueError(f'Expected payoff "{expression}" depends on {sorted(expression.free_symbols)}; '
                         'use s_expected_payoff for symbolic games.')
    return expression.value


def counter_strategy(game: MatrixGame, player: int) -> list:
    """Expected payoff of player for each of their pure strategies, played against the opponent's
    current mixed strategy.

    The pure strategies are the distinct permutations of [1, 0, ..., 0], in canonical order, i.e.
    strategy 1 first.
    """
    if player not in (1, 2):
        raise ValueError(f'Player must be 1 or 2, got {player}.')
    opponent = 2 if player == 1 else 1
    size = game.shape[player - 1]
    payoffs = []
    for pure in np.eye(size, dtype=int).tolist():
        strategies = {player: pure, opponent: game.probabilities(opponent)}
        payoffs.append(expected_payoff(game.with_strategies(strategies), player))
    return payoffs


def play(game: MatrixGame, rng: Optional[np.random.Generator] = None,
         seed: Optional[int] = None) -> Tuple[Tuple[int, int], tuple]:
    """Play a single round: draw one pure strategy per player from their mixed strategies.

    Returns the (0-based) outcome coordinate (row, col) and the payoff pair (u1, u2).
    Pass a numpy Generator or a seed for reproducible draws.
    """
    game.check_probabilities()
    if rng is None:
        rng = np.random.default_rng(seed=seed)

    draws = []
    for player in (1, 2):
        sigma = np.array([float(value) for value in game.numeric_probabilities(player)])
        draws.append(int(rng.choice(len(sigma), p=sigma / sigma.sum())))
    row, col = draws
    return (row, col), (_item(game.row_payoff[row, col]), _item(game.col_payoff[row, col]))


def simulate(game: MatrixGame, rounds: int = 100, seed: Optional[int] = None, labels: bool = True) -> pd.DataFrame:
    """Play the game repeatedly with fixed mixed strategies. Inputs are
    rounds: the number of rounds played.
    seed: allows to set a seed for the random number generator, allowing results to be reproducible.
    labels: if True (default) actions are given by their strategy labels; if False, by their 0-based index.

    Returns a Pandas DataFrame with the following columns:
    round: the round to which the row refers
    action_[player], one for each player: the strategy played
    u_[player], one for each player: the payoff of this round
    V_[player], one for each player: total payoff up until and including the current round
    """
    rng = np.random.default_rng(seed=seed)
    players = game.player_labels if labels else ('1', '2')

    rows = []
    totals = [0, 0]
    for round_ in range(rounds):
        outcome, payoffs = play(game, rng=rng)
        row = {'round': round_}
        for player in range(2):
            strategy = outcome[player]
            row['action_' + players[player]] = game.strategy_labels[player][strategy] if labels else strategy
        for player in range(2):
            totals[player] = totals[player] + payoffs[player]
            row['u_' + players[player]] = payoffs[player]
            row['V_' + players[player]] = totals[player]
        rows.append(row)

    columns = ['round'] + ['action_' + p for p in players] + ['u_' + p for p in players] + ['V_' + p for p in players]
    return pd.DataFrame(rows, columns=columns)
