"""Two-person matrix game."""
from fractions import Fraction
from numbers import Number
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import DimensionMismatch, InvalidProbability
from .expression import Expression

MATCHING_PENNIES = [[1, -1], [-1, 1]]


def is_symbolic_value(value) -> bool:
    """Payoffs and probabilities are either numbers or expression strings."""
    return isinstance(value, (str, Expression))


def _is_float_value(value) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, (bool, np.bool_))


def _as_matrix(values, name: str) -> np.ndarray:
    """Bring a payoff matrix to a read-only 2D np.ndarray: float64 for plain real numbers, object otherwise
    (so Fractions and expression strings are kept as they are)."""
    matrix = np.array(values, dtype=object)
    if matrix.ndim != 2 or matrix.size == 0:
        raise DimensionMismatch(f'"{name}" must be a non-empty, rectangular 2D matrix, but has shape {matrix.shape}')
    for value in matrix.flat:
        if not (isinstance(value, (str, Fraction, Number, np.number)) or isinstance(value, Expression)):
            raise TypeError(f'"{name}" contains {value!r}, which is neither a number nor an expression string.')
    matrix = np.vectorize(lambda v: str(v) if isinstance(v, Expression) else v, otypes=[object])(matrix)
    if all(_is_float_value(value) for value in matrix.flat):
        matrix = matrix.astype(np.float64)
    matrix.setflags(write=False)
    return matrix


def _negate(value):
    if isinstance(value, str):
        return str(-Expression(value))
    return -value


def _negative_matrix(matrix: np.ndarray) -> np.ndarray:
    if matrix.dtype == object:
        negative = np.vectorize(_negate, otypes=[object])(matrix)
    else:
        negative = -matrix
    negative.setflags(write=False)
    return negative


def numeric_matrix(matrix: np.ndarray, operation: str = 'This operation') -> np.ndarray:
    """Payoff matrix with expression strings replaced by their exact values, so it can be compared and ordered.
    Raises ValueError if an expression has free variables."""
    if matrix.dtype != object:
        return matrix

    def value(cell):
        if isinstance(cell, str):
            expression = Expression(cell)
            if not expression.is_constant:
                raise ValueError(f'{operation} needs numeric payoffs, but "{cell}" has free variables.')
            return expression.value
        return cell

    return np.vectorize(value, otypes=[object])(matrix)


def _probability_value(value):
    """Exact value of an expression-string probability, or None if it has free variables."""
    if isinstance(value, str):
        expression = Expression(value)
        return expression.value if expression.is_constant else None
    return value


def _uniform(size: int) -> Dict[int, float]:
    return {k: 1 / size for k in range(1, size + 1)}


class MatrixGame:
    """A finite two-person game in matrix form.

    Player 1 chooses a row, player 2 a column. Payoffs are given either as

    - payoff:            a single matrix (zero-sum: player 2 receives -payoff), or
    - payoff1, payoff2:  one matrix per player (general-sum), of identical shape.

    Without any payoff matrix, the game defaults to matching pennies [[1, -1], [-1, 1]].
    Cells can be numbers (including fractions.Fraction for exact arithmetic) or expression strings.

    strategies:  the players' mixed strategies, as {player: {strategy: probability}} with players 1, 2 and
                 strategies numbered from 1; a list of two probability vectors is accepted as well.
                 Probabilities are numbers in [0, 1] or expression strings. Defaults to the uniform distribution.

    The game is an immutable snapshot: operations that remove strategies return a new game.
    """

    def __init__(self, payoff=None, payoff1=None, payoff2=None,
                 strategies: Optional[Union[dict, Sequence]] = None,
                 player_labels: Optional[Sequence[str]] = None,
                 strategy_labels: Optional[Sequence[Sequence[str]]] = None) -> None:

        if payoff1 is not None or payoff2 is not None:
            if payoff1 is None or payoff2 is None:
                raise DimensionMismatch('General-sum games need both "payoff1" and "payoff2"')
            if payoff is not None:
                raise DimensionMismatch('Pass either "payoff" (zero-sum) or "payoff1" and "payoff2" (general-sum), '
                                        'not both')
            self._payoff = None
            self._payoff1 = _as_matrix(payoff1, 'payoff1')
            self._payoff2 = _as_matrix(payoff2, 'payoff2')
            if self._payoff1.shape != self._payoff2.shape:
                raise DimensionMismatch('"payoff1" and "payoff2" must have the same shape',
                                        expected=self._payoff1.shape, found=self._payoff2.shape)
            self._row_payoff = self._payoff1
            self._col_payoff = self._payoff2
        else:
            self._payoff = _as_matrix(MATCHING_PENNIES if payoff is None else payoff, 'payoff')
            self._payoff1 = None
            self._payoff2 = None
            self._row_payoff = self._payoff
            self._col_payoff = _negative_matrix(self._payoff)

        self.num_rows, self.num_cols = self._row_payoff.shape
        self._strategies = self._read_strategies(strategies)

        # labels
        if player_labels is None:
            player_labels = ('player1', 'player2')
        if len(player_labels) != 2:
            raise DimensionMismatch('"player_labels" needs one label per player', expected=2, found=len(player_labels))
        self.player_labels = tuple(str(label) for label in player_labels)

        if strategy_labels is None:
            digits = len(str(max(self.shape)))
            strategy_labels = [[f'a{a:0{digits}}' for a in range(1, size + 1)] for size in self.shape]
        if len(strategy_labels) != 2:
            raise DimensionMismatch('"strategy_labels" needs one list per player', expected=2,
                                    found=len(strategy_labels))
        for player, (labels, size) in enumerate(zip(strategy_labels, self.shape), start=1):
            if len(labels) != size:
                raise DimensionMismatch(f'Player {player} needs one strategy label per strategy',
                                        expected=size, found=len(labels))
        self.strategy_labels = tuple(tuple(str(label) for label in labels) for labels in strategy_labels)

    def _read_strategies(self, strategies) -> Dict[int, Dict[int, object]]:
        if strategies is None:
            strategies = {}
        elif isinstance(strategies, (list, tuple)):
            if len(strategies) != 2:
                raise DimensionMismatch('"strategies" needs one entry per player', expected=2, found=len(strategies))
            strategies = {1: strategies[0], 2: strategies[1]}
        elif not isinstance(strategies, dict):
            raise TypeError('"strategies" must be a dict {player: {strategy: probability}} or a list of two vectors.')

        unknown = set(strategies) - {1, 2}
        if unknown:
            raise DimensionMismatch(f'Unknown players {sorted(unknown, key=str)} in "strategies"; players are 1 and 2')

        result = {}
        for player, size in ((1, self.num_rows), (2, self.num_cols)):
            given = strategies.get(player)
            if given is None:
                given = _uniform(size)
            elif isinstance(given, (list, tuple, np.ndarray)):
                given = {k: value for k, value in enumerate(given, start=1)}
            else:
                given = dict(given)

            if set(given) != set(range(1, size + 1)):
                raise DimensionMismatch(f'Player {player} must have strategies numbered 1 to {size} '
                                        f'(payoff matrix shape {self.shape}), but has {sorted(given, key=str)}',
                                        expected=size, found=len(given))
            given = {k: (str(value) if isinstance(value, Expression) else value) for k, value in sorted(given.items())}

            numeric = [_probability_value(value) for value in given.values()]
            if any(value is not None and not 0 <= value <= 1 for value in numeric):
                raise InvalidProbability(player, list(given.values()), reason='range')
            result[player] = given
        return result

    # %% accessors

    @property
    def payoff(self) -> Optional[np.ndarray]:
        """Zero-sum payoff matrix (None for general-sum games)."""
        return self._payoff

    @property
    def payoff1(self) -> Optional[np.ndarray]:
        return self._payoff1

    @property
    def payoff2(self) -> Optional[np.ndarray]:
        return self._payoff2

    @property
    def row_payoff(self) -> np.ndarray:
        """Payoffs of player 1: payoff1, or payoff in the zero-sum case."""
        return self._row_payoff

    @property
    def col_payoff(self) -> np.ndarray:
        """Payoffs of player 2: payoff2, or -payoff in the zero-sum case."""
        return self._col_payoff

    def payoff_matrix(self, player: int) -> np.ndarray:
        if player == 1:
            return self._row_payoff
        if player == 2:
            return self._col_payoff
        raise ValueError(f'Player must be 1 or 2, got {player}.')

    @property
    def shape(self) -> Tuple[int, int]:
        return self.num_rows, self.num_cols

    @property
    def is_zero_sum(self) -> bool:
        return self._payoff is not None

    @property
    def strategies(self) -> Dict[int, Dict[int, object]]:
        """Copy of the mixed strategies {player: {strategy: probability}}."""
        return {player: dict(probabilities) for player, probabilities in self._strategies.items()}

    def probabilities(self, player: int) -> list:
        """Mixed strategy of a player as list, ordered by strategy number."""
        if player not in (1, 2):
            raise ValueError(f'Player must be 1 or 2, got {player}.')
        return list(self._strategies[player].values())

    @property
    def is_symbolic(self) -> bool:
        """Whether any payoff or probability is an expression string."""
        cells = list(self._row_payoff.flat) + list(self._col_payoff.flat)
        cells += self.probabilities(1) + self.probabilities(2)
        return any(is_symbolic_value(value) for value in cells)

    def numeric_probabilities(self, player: int) -> list:
        """Mixed strategy of a player with constant expression strings replaced by their exact values.
        Raises InvalidProbability if a probability has free variables."""
        values = self.probabilities(player)
        numeric = [_probability_value(value) for value in values]
        if any(value is None for value in numeric):
            raise InvalidProbability(player, values, reason='symbolic')
        return numeric

    def check_probabilities(self, player: Optional[int] = None, atol: float = 1e-9) -> None:
        """Raise InvalidProbability unless the mixed strategies are numeric and sum to 1."""
        players = (1, 2) if player is None else (player,)
        for p in players:
            values = self.numeric_probabilities(p)
            if abs(float(sum(values)) - 1) > atol:
                raise InvalidProbability(p, self.probabilities(p), reason='sum')

    # %% derived games

    def _derive(self, **changes) -> 'MatrixGame':
        if self.is_zero_sum:
            fields = {'payoff': self._payoff}
        else:
            fields = {'payoff1': self._payoff1, 'payoff2': self._payoff2}
        fields.update(strategies=self._strategies, player_labels=self.player_labels,
                      strategy_labels=self.strategy_labels)
        fields.update(changes)
        return MatrixGame(**fields)

    def with_strategies(self, strategies: Union[dict, Sequence]) -> 'MatrixGame':
        """Same game, different mixed strategies."""
        return self._derive(strategies=strategies)

    def remove_strategies(self, player: int, indices: Sequence[int]) -> 'MatrixGame':
        """Return the game without the given (0-based) strategies of player.
        Payoffs, probabilities and labels of the removed strategies are dropped; the remaining strategies
        are renumbered from 1 in their original order.
        """
        size = self.shape[player - 1] if player in (1, 2) else None
        if size is None:
            raise ValueError(f'Player must be 1 or 2, got {player}.')
        removed = set(int(index) for index in indices)
        keep = [index for index in range(size) if index not in removed]
        if not removed:
            return self
        if not keep:
            raise DimensionMismatch(f'Cannot remove all strategies of player {player}')

        if player == 1:
            select = (keep, slice(None))
        else:
            select = (slice(None), keep)
        if self.is_zero_sum:
            matrices = {'payoff': self._payoff[select]}
        else:
            matrices = {'payoff1': self._payoff1[select], 'payoff2': self._payoff2[select]}

        probabilities = self.probabilities(player)
        strategies = self.strategies
        strategies[player] = {k: probabilities[index] for k, index in enumerate(keep, start=1)}
        strategy_labels = list(self.strategy_labels)
        strategy_labels[player - 1] = [self.strategy_labels[player - 1][index] for index in keep]
        return self._derive(strategies=strategies, strategy_labels=strategy_labels, **matrices)

    def transpose(self) -> 'MatrixGame':
        """The same game with the roles of the players exchanged."""
        strategies = {1: self._strategies[2], 2: self._strategies[1]}
        labels = {'strategies': strategies,
                  'player_labels': self.player_labels[::-1],
                  'strategy_labels': self.strategy_labels[::-1]}
        if self.is_zero_sum:
            return MatrixGame(payoff=self._col_payoff.T, **labels)
        return MatrixGame(payoff1=self._payoff2.T, payoff2=self._payoff1.T, **labels)

    @classmethod
    def random_game(cls, num_rows: int, num_cols: int, zero_sum: bool = False, low: int = -10, high: int = 10,
                    integer: bool = True, seed: Optional[int] = None) -> 'MatrixGame':
        """Creates a game of given size with random payoffs in [low, high] and random mixed strategies.
        Integer payoffs (the default) make ties, and thus multiple equilibria, reasonably likely.

        Passing a seed to the random number generator ensures that the game can be recreated at a
        later occasion or by other users.
        """
        rng = np.random.default_rng(seed=seed)

        def draw():
            if integer:
                return rng.integers(low=low, high=high, size=(num_rows, num_cols), endpoint=True)
            return rng.uniform(low, high, size=(num_rows, num_cols))

        strategies = {}
        for player, size in ((1, num_rows), (2, num_cols)):
            sigma = rng.exponential(scale=1, size=size)
            strategies[player] = (sigma / sigma.sum()).tolist()

        if zero_sum:
            return cls(payoff=draw(), strategies=strategies)
        return cls(payoff1=draw(), payoff2=draw(), strategies=strategies)

    # %% conversion

    @classmethod
    def from_table(cls, table: Union[pd.DataFrame, str]) -> 'MatrixGame':
        """Create a game from the tabular format.
        Input can be either a pandas.DataFrame, or a string containing the path to an excel file (.xlsx, .xls), a
        stata file (.dta), or a plain text file with comma separated values (.csv, .txt).
        """
        from matrixgame.utility.table_conversion import game_from_table
        return game_from_table(table)

    def to_table(self) -> pd.DataFrame:
        """Convert the game to the tabular format: one row per outcome, with columns a_[player] (strategy labels)
        and u_[player] (payoffs)."""
        from matrixgame.utility.table_conversion import game_to_table
        return game_to_table(self)

    def to_string(self, decimals: int = 2) -> str:
        """Renders the payoff table, with probabilities next to the strategy labels."""

        def fmt(value):
            if isinstance(value, str):
                return value
            if isinstance(value, Fraction):
                return str(value.numerator) if value.denominator == 1 else f'{value.numerator}/{value.denominator}'
            return np.format_float_positional(float(value), precision=decimals, trim='-')

        header = [f'{self.player_labels[0]} \\ {self.player_labels[1]}']
        header += [f'{label} ({fmt(p)})' for label, p in zip(self.strategy_labels[1], self.probabilities(2))]
        rows = [header]
        for r, (label, p) in enumerate(zip(self.strategy_labels[0], self.probabilities(1))):
            row = [f'{label} ({fmt(p)})']
            for c in range(self.num_cols):
                if self.is_zero_sum:
                    row.append(fmt(self._payoff[r, c]))
                else:
                    row.append(f'{fmt(self._payoff1[r, c])}, {fmt(self._payoff2[r, c])}')
            rows.append(row)
        widths = [max(len(row[i]) for row in rows) for i in range(len(header))]
        return '\n'.join(' | '.join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
                         for row in rows) + '\n'

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        kind = 'zero-sum' if self.is_zero_sum else 'general-sum'
        return f'<MatrixGame {self.num_rows}x{self.num_cols} {kind}>'
