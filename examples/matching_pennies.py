"""Zero-sum game without saddlepoint: Matching Pennies"""


import matrixgame

# the default game is matching pennies, with both players mixing 50:50
game = matrixgame.MatrixGame()

print(game)

print(matrixgame.saddlepoint(game))
# {}

print(matrixgame.oddments(game))
# [[0.5, 0.5], [0.5, 0.5]]

print(matrixgame.expected_payoff(game))
# 0.0

print(matrixgame.mixed(game))
# [Expression('4*q - 2'), Expression('-4*p + 2')]

# play a few rounds with a fixed seed
print(matrixgame.simulate(game, rounds=5, seed=42))
