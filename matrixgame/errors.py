"""Exceptions raised by the matrix game engine."""


class MatrixGameError(Exception):
    """Base class for all errors raised by matrixgame."""


class DimensionMismatch(MatrixGameError, ValueError):
    """Payoff matrices disagree with each other or with the declared strategies."""

    def __init__(self, message, expected=None, found=None):
        self.expected = expected
        self.found = found
        if expected is not None:
            message = f'{message} (expected {expected}, found {found})'
        super().__init__(message)


class InvalidProbability(MatrixGameError, ValueError):
    """A probability lies outside [0, 1], or a distribution does not sum to 1."""

    def __init__(self, player, values, reason='sum'):
        self.player = player
        self.values = values
        self.reason = reason
        if reason == 'range':
            self.message = f'Player {player} has probabilities outside [0, 1]: {values}.'
        elif reason == 'symbolic':
            self.message = f'Player {player} has non-numeric probabilities: {values}.'
        else:
            self.message = f'Probabilities of player {player} do not sum to 1: {values}.'
        super().__init__(self.message)

    def __str__(self):
        return self.message


class UnsupportedShape(MatrixGameError, ValueError):
    """Operation is not defined for the shape of the given payoff matrix."""

    def __init__(self, operation, shape, required=None):
        self.operation = operation
        self.shape = tuple(shape)
        message = f'{operation} is not defined for a {self.shape[0]}x{self.shape[1]} game'
        if required:
            message += f'; requires a {required} game'
        super().__init__(message + '.')


class NoEquilibrium(MatrixGameError, LookupError):
    """Search completed without finding an equilibrium of the requested kind.

    This is a "not found" signal, not a computation failure.
    """
