"""General-sum game: Prisoner's Dilemma"""


import matrixgame

payoff1 = [[3, 0],
           [5, 1]]
payoff2 = [[3, 5],
           [0, 1]]

# rows: player 1 cooperates / defects; columns: player 2 cooperates / defects
game = matrixgame.MatrixGame(payoff1=payoff1, payoff2=payoff2,
                             player_labels=['row', 'column'],
                             strategy_labels=[['cooperate', 'defect'], ['cooperate', 'defect']])

print(game)

# defecting strictly dominates cooperating for both players
reduced = matrixgame.iterated_reduction(game, verbose=1)
print(reduced.strategy_labels)
# (('defect',), ('defect',))

print(matrixgame.nash(game))
# {'1,1': (1.0, 1.0)}

print(matrixgame.pareto_optimal(game))
# {'0,0': (3.0, 3.0), '0,1': (0.0, 5.0), '1,0': (5.0, 0.0)}
