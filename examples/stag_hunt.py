"""General-sum game with two pure equilibria and one mixed equilibrium: Stag Hunt"""


import matrixgame
from matrixgame.symbolic import MixedStrategy

payoff1 = [[4, 1],
           [3, 2]]
payoff2 = [[4, 3],
           [1, 2]]

game = matrixgame.MatrixGame(payoff1=payoff1, payoff2=payoff2,
                             strategy_labels=[['stag', 'hare'], ['stag', 'hare']])

print(matrixgame.nash(game))
# {'0,0': (4.0, 4.0), '1,1': (2.0, 2.0)}

# the mixed equilibrium makes each hunter indifferent between stag and hare
mixed = MixedStrategy(game, verbose=1)
mixed.solve()
print(mixed.equilibrium['strategies'])
# {1: [Fraction(1, 2), Fraction(1, 2)], 2: [Fraction(1, 2), Fraction(1, 2)]}
