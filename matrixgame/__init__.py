"""Analysis of two-person matrix games."""

from .errors import MatrixGameError, DimensionMismatch, InvalidProbability, UnsupportedShape, NoEquilibrium
from .game import MatrixGame
from .expression import Expression
from .payoff import expected_payoff, s_expected_payoff, counter_strategy, play, simulate
from .dominance import reduce, row_reduce, col_reduce, dominated_strategies, iterated_reduction
from .equilibrium import saddlepoint, nash, oddments, mm_tally
from .pareto import pareto_optimal
from . import symbolic
from .symbolic import MixedStrategy, mixed
