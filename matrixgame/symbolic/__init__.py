from matrixgame.expression import Expression
from ._mixed import MixedStrategy, mixed
