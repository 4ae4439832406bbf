"""Mixed strategy equilibria of 2x2 games via first-order conditions on symbolic payoff equations."""

from typing import List, Optional, Tuple

import numpy as np

from matrixgame.errors import NoEquilibrium, UnsupportedShape
from matrixgame.game import MatrixGame
from matrixgame.payoff import s_expected_payoff
from matrixgame.expression import Expression


def mixed(game: MatrixGame) -> List[Expression]:
    """First-order conditions of both players: the derivative of player 1's payoff equation with respect to
    p, and of player 2's with respect to q."""
    return MixedStrategy(game).first_order_conditions()


class MixedStrategy:
    """Symbolic payoff equations of a matrix game, with one free probability variable per player.

    Each player's payoff is the bilinear sum over variables p_i (player 1) and q_j (player 2). Then p_k and
    q_k for k > 1 are replaced by (1 - x_1 - ... - x_(k-1)), from the highest index down to 2, and the
    remaining x_1 is renamed to x. For games with two strategies per player, this yields the usual
    parametrization (p, 1 - p) and (q, 1 - q).

    Setting the derivative of player 1's payoff with respect to p to zero gives the q that makes player 1
    indifferent, and vice versa; solve() does this for 2x2 games.

    parameters : dict
        Overrides the defaults below; may alternatively be passed as kwargs.
        Method .set_parameters() allows to adjust parameters after construction.

        row_variable : str
            Free variable of player 1, defaults to 'p'.
        col_variable : str
            Free variable of player 2, defaults to 'q'.
        exact : bool
            If True (the default), solve() reports Fractions, otherwise floats.
        verbose : int
            0 is silent (the default), 1 reports the equations and the solution.
    """

    default_parameters = {
        'row_variable': 'p',
        'col_variable': 'q',
        'exact': True,
        'verbose': 0,
    }

    def __init__(self, game: MatrixGame, parameters: Optional[dict] = None, **kwargs) -> None:
        self.game = game
        for key, value in self.default_parameters.items():
            setattr(self, key, value)
        self.set_parameters(parameters, **kwargs)
        self.equilibrium = None  # type: Optional[dict]

    def set_parameters(self, params: Optional[dict] = None, **kwargs) -> None:
        """Set multiple parameters at once, given as dictionary and/or as kwargs."""
        params = params or {}
        inputs = {**params, **kwargs}
        for key, value in inputs.items():
            if key not in self.default_parameters:
                raise ValueError(f'"{key}" is not a valid parameter.')
            setattr(self, key, value)
        Expression.symbol(self.row_variable)
        Expression.symbol(self.col_variable)
        if self.row_variable == self.col_variable:
            raise ValueError(f'Both players cannot use the same variable "{self.row_variable}".')
        self.equilibrium = None

    def _variables(self, variable: str, size: int) -> dict:
        return {k: f'{variable}_{k}' for k in range(1, size + 1)}

    def payoff_sum(self, player: int) -> Expression:
        """Bilinear payoff sum of player over the variables p_i and q_j, before substitution."""
        strategies = {1: self._variables(self.row_variable, self.game.num_rows),
                      2: self._variables(self.col_variable, self.game.num_cols)}
        return Expression(s_expected_payoff(self.game.with_strategies(strategies), player))

    def _substitute(self, expression: Expression, variable: str, size: int) -> Expression:
        for k in range(size, 1, -1):
            lower = ' - '.join(f'{variable}_{i}' for i in range(1, k))
            expression = expression.subs({f'{variable}_{k}': f'1 - {lower}'})
        return expression.subs({f'{variable}_1': Expression.symbol(variable)})

    def payoff_equations(self) -> List[Expression]:
        """Payoffs of both players as functions of the free variables p and q."""
        equations = []
        for player in (1, 2):
            expression = self.payoff_sum(player)
            expression = self._substitute(expression, self.row_variable, self.game.num_rows)
            expression = self._substitute(expression, self.col_variable, self.game.num_cols)
            equations.append(expression)
        return equations

    def first_order_conditions(self) -> List[Expression]:
        """Derivative of player 1's payoff with respect to p and of player 2's with respect to q."""
        u1, u2 = self.payoff_equations()
        return [u1.diff(self.row_variable), u2.diff(self.col_variable)]

    def equilibrium_payoff(self, p, q) -> Tuple:
        """Both players' payoffs at the given values of the free variables."""
        values = {self.row_variable: p, self.col_variable: q}
        return tuple(self._output(equation.evaluate(values)) for equation in self.payoff_equations())

    def _output(self, value):
        return value if self.exact else float(value)

    def _solve(self, condition: Expression, variable: str, player: int):
        if condition.degree(variable) == 0:
            raise NoEquilibrium(f'First-order condition "{condition} = 0" of player {player} does not determine '
                                f'{variable}: there is no interior mixed equilibrium.')
        value = condition.solve(variable)
        if not value.is_constant:
            raise ValueError(f'First-order condition "{condition} = 0" of player {player} has free variables '
                             f'{sorted(value.free_symbols)}.')
        value = value.value
        if not 0 <= value <= 1:
            raise NoEquilibrium(f'Solving "{condition} = 0" gives {variable} = {value}, which is not a probability: '
                                'there is no interior mixed equilibrium.')
        return value

    def solve(self) -> dict:
        """Solve the first-order conditions of a 2x2 game and store the result as .equilibrium:
        {'p': ..., 'q': ..., 'strategies': {1: [p, 1 - p], 2: [q, 1 - q]}, 'payoffs': (u1, u2)}.
        Raises NoEquilibrium if the game has no interior mixed equilibrium.
        """
        if self.game.shape != (2, 2):
            raise UnsupportedShape('MixedStrategy.solve', self.game.shape, required='2x2')

        condition1, condition2 = self.first_order_conditions()
        if self.verbose >= 1:
            u1, u2 = self.payoff_equations()
            print(f'u1 = {u1}\nu2 = {u2}')
            print(f'du1/d{self.row_variable} = {condition1}\ndu2/d{self.col_variable} = {condition2}')

        # player 1's condition pins down the opponent's mix, and vice versa
        q = self._solve(condition1, self.col_variable, player=1)
        p = self._solve(condition2, self.row_variable, player=2)
        payoffs = self.equilibrium_payoff(p, q)

        self.equilibrium = {
            self.row_variable: self._output(p),
            self.col_variable: self._output(q),
            'strategies': {1: [self._output(p), self._output(1 - p)], 2: [self._output(q), self._output(1 - q)]},
            'payoffs': payoffs,
        }
        if self.verbose >= 1:
            print(f'Mixed equilibrium: {self.row_variable} = {p}, {self.col_variable} = {q}, payoffs {payoffs}.')
        return self.equilibrium

    def plot(self, num_points: int = 101, show: bool = True):
        """Plots each player's payoff against their own free variable, one line per pure strategy of the
        opponent (the graphical solution of a 2x2 game). The equilibrium is marked if solve() was run."""
        try:
            import matplotlib.pyplot as plt
        except ModuleNotFoundError:
            print('Missing the python package matplotlib. Please install to plot.')
            return

        u1, u2 = self.payoff_equations()
        grid = np.linspace(0, 1, num_points)
        figure, axis = plt.subplots(nrows=1, ncols=2, figsize=(10, 4), squeeze=False)

        for ax, player, equation, own, other in ((axis[0, 0], 1, u1, self.row_variable, self.col_variable),
                                                  (axis[0, 1], 2, u2, self.col_variable, self.row_variable)):
            for pure in (1, 0):
                line = equation.subs({other: pure})
                ax.plot(grid, [float(line.evaluate({own: x})) for x in grid], label=f'{other} = {pure}')
            if self.equilibrium is not None:
                x = float(self.equilibrium[own])
                ax.axvline(x, color='grey', linestyle='--')
                ax.plot([x], [float(self.equilibrium['payoffs'][player - 1])], 'ko')
            ax.set_title(self.game.player_labels[player - 1])
            ax.set_xlabel(own)
            ax.set_ylabel(f'u{player}')
            ax.legend()
            ax.grid()

        figure.tight_layout()
        if show:
            plt.show()
        return figure
