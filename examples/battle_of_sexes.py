"""Symbolic payoffs: Battle of the Sexes with a general preference intensity"""


from fractions import Fraction

import matrixgame

payoff1 = [[2, 0],
           [0, 1]]
payoff2 = [[1, 0],
           [0, 2]]

game = matrixgame.MatrixGame(payoff1=payoff1, payoff2=payoff2,
                             strategies={1: {1: 'p', 2: '1 - p'}, 2: {1: 'q', 2: '1 - q'}},
                             strategy_labels=[['opera', 'football'], ['opera', 'football']])

# expected payoff of player 1 as a function of both mixing probabilities
print(matrixgame.s_expected_payoff(game))
# p * q * 2 + p * (1 - q) * 0 + (1 - p) * q * 0 + (1 - p) * (1 - q) * 1
print(matrixgame.Expression(matrixgame.s_expected_payoff(game)))
# 3*p*q - p - q + 1

exact = game.with_strategies({1: [Fraction(2, 3), Fraction(1, 3)], 2: [Fraction(1, 3), Fraction(2, 3)]})
print(matrixgame.expected_payoff(exact), matrixgame.expected_payoff(exact, player=2))
# both players get 2/3
