"""Test saddlepoints, pure Nash equilibria, oddments and security strategies."""


from fractions import Fraction

import numpy as np
import pytest

import matrixgame
from matrixgame import MatrixGame, NoEquilibrium, UnsupportedShape


class TestSaddlepoint:

    def test_saddlepoint(self):
        assert matrixgame.saddlepoint(MatrixGame(payoff=[[0, -1], [2, 3]])) == {'1,0': 2}

    def test_all_ties_reported(self):
        saddlepoints = matrixgame.saddlepoint(MatrixGame(payoff=[[1, 1], [0, 0]]))
        assert saddlepoints == {'0,0': 1, '0,1': 1}

    def test_no_saddlepoint(self):
        assert matrixgame.saddlepoint(MatrixGame()) == {}

    def test_general_sum_uses_payoff1(self):
        game = MatrixGame(payoff1=[[0, -1], [2, 3]], payoff2=[[9, 9], [9, 9]])
        assert matrixgame.saddlepoint(game) == {'1,0': 2}

    def test_3x3(self):
        game = MatrixGame(payoff=[[4, 2, 5], [3, 1, 0], [6, 2, 3]])
        assert matrixgame.saddlepoint(game) == {'0,1': 2, '2,1': 2}


class TestNash:

    dilemma = MatrixGame(payoff1=[[3, 0], [5, 1]], payoff2=[[3, 5], [0, 1]])
    stag_hunt = MatrixGame(payoff1=[[4, 1], [3, 2]], payoff2=[[4, 3], [1, 2]])

    def test_prisoners_dilemma(self):
        assert matrixgame.nash(self.dilemma) == {'1,1': (1, 1)}

    def test_multiple_equilibria(self):
        assert matrixgame.nash(self.stag_hunt) == {'0,0': (4, 4), '1,1': (2, 2)}

    def test_no_pure_equilibrium(self):
        assert matrixgame.nash(MatrixGame()) is None

    def test_zero_sum(self):
        # a saddlepoint is a pure equilibrium of the zero-sum game
        assert matrixgame.nash(MatrixGame(payoff=[[0, -1], [2, 3]])) == {'1,0': (2, -2)}

    def test_best_responses(self):
        from matrixgame.equilibrium import best_responses
        assert best_responses(self.dilemma, 1) == {(1, 0), (1, 1)}
        assert best_responses(self.dilemma, 2) == {(0, 1), (1, 1)}


class TestOddments:

    game = MatrixGame(payoff=[[5, -2], [1, 4]])

    def test_oddments(self):
        assert np.allclose(matrixgame.oddments(self.game), [[0.3, 0.7], [0.6, 0.4]])

    def test_exact(self):
        game = MatrixGame(payoff=[[Fraction(5), Fraction(-2)], [Fraction(1), Fraction(4)]])
        assert matrixgame.oddments(game) == [[Fraction(3, 10), Fraction(7, 10)], [Fraction(3, 5), Fraction(2, 5)]]

    def test_exact_from_strings(self):
        game = MatrixGame(payoff=[['5', '-2'], ['1', '2 * 2']])
        assert matrixgame.oddments(game) == [[Fraction(3, 10), Fraction(7, 10)], [Fraction(3, 5), Fraction(2, 5)]]

    def test_matching_pennies(self):
        assert matrixgame.oddments(MatrixGame()) == [[0.5, 0.5], [0.5, 0.5]]

    def test_consistent_with_expected_payoff(self):
        _, (q1, q2) = matrixgame.oddments(self.game)
        game = self.game.with_strategies([[1, 0], [q1, q2]])
        # player 2's mix makes player 1 indifferent between rows
        assert np.allclose(matrixgame.counter_strategy(game, 1), [2.2, 2.2])

    def test_unsupported_shape(self):
        with pytest.raises(UnsupportedShape):
            matrixgame.oddments(MatrixGame(payoff=[[1, 2, 3], [4, 5, 6]]))

    def test_saddlepoint_warning(self):
        with pytest.warns(RuntimeWarning):
            matrixgame.oddments(MatrixGame(payoff=[[4, 1], [2, 0]]))

    def test_undefined(self):
        with pytest.raises(NoEquilibrium):
            matrixgame.oddments(MatrixGame(payoff=[[1, 1], [1, 1]]))


class TestMMTally:

    def test_zero_sum(self):
        tally = matrixgame.mm_tally(MatrixGame(payoff=[[0, -1], [2, 3]]))
        assert tally == {1: {'strategy': [0, 1], 'value': 2}, 2: {'strategy': [1, 0], 'value': 2}}

    def test_general_sum(self):
        tally = matrixgame.mm_tally(MatrixGame(payoff1=[[3, 0], [5, 1]], payoff2=[[3, 5], [0, 1]]))
        assert tally == {1: {'strategy': [0, 1], 'value': 1}, 2: {'strategy': [0, 1], 'value': 1}}

    def test_ties_go_to_first_index(self):
        tally = matrixgame.mm_tally(MatrixGame())
        assert tally[1] == {'strategy': [1, 0], 'value': -1}
        assert tally[2] == {'strategy': [1, 0], 'value': 1}

    def test_rectangular(self):
        tally = matrixgame.mm_tally(MatrixGame(payoff=[[4, 2, 5], [3, 1, 0], [6, 2, 3]]))
        assert tally[1]['strategy'] == [1, 0, 0]
        assert tally[2]['strategy'] == [0, 1, 0]
        assert tally[1]['value'] == tally[2]['value'] == 2


# %% run


if __name__ == '__main__':

    for test_class in [TestSaddlepoint(), TestNash(), TestOddments(), TestMMTally()]:
        method_names = [method for method in dir(test_class)
                        if callable(getattr(test_class, method))
                        if method.startswith('test_') and method != 'test_saddlepoint_warning']
        for method in method_names:
            getattr(test_class, method)()
