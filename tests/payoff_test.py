"""Test expected payoffs and play."""


from fractions import Fraction

import numpy as np
import pandas as pd
import pytest

import matrixgame
from matrixgame import MatrixGame, InvalidProbability


class TestExpectedPayoff:

    game = MatrixGame(payoff=[[5, 0], [-1, 2]], strategies={1: {1: 0.2, 2: 0.8}, 2: {1: 0.3, 2: 0.7}})
    game_3x4 = MatrixGame(payoff=[[2, -1, -5, 3], [0, -2, 3, -3], [1, 0, 1, -2]],
                          strategies={1: [0.3, 0, 0.7], 2: [0.1, 0.2, 0.3, 0.4]})

    def test_expected_payoff(self):
        assert np.isclose(matrixgame.expected_payoff(self.game), 1.18)
        assert np.isclose(matrixgame.expected_payoff(self.game, player=2), -1.18)

    def test_expected_payoff_3x4(self):
        assert np.isclose(matrixgame.expected_payoff(self.game_3x4), -0.37)

    def test_bilinear_sum(self):
        rng = np.random.default_rng(seed=12)
        payoff = rng.integers(-5, 5, size=(2, 2), endpoint=True)
        for _ in range(10):
            p, q = rng.uniform(size=2)
            game = MatrixGame(payoff=payoff, strategies=[[p, 1 - p], [q, 1 - q]])
            direct = np.array([p, 1 - p]) @ payoff @ np.array([q, 1 - q])
            assert np.isclose(matrixgame.expected_payoff(game), direct)

    def test_general_sum(self):
        dilemma = MatrixGame(payoff1=[[3, 0], [5, 1]], payoff2=[[3, 5], [0, 1]], strategies=[[1, 0], [0, 1]])
        assert matrixgame.expected_payoff(dilemma, player=1) == 0
        assert matrixgame.expected_payoff(dilemma, player=2) == 5

    def test_exact_payoff(self):
        game = self.game.with_strategies({1: {1: '1/2', 2: '1/2'}})
        payoff = matrixgame.expected_payoff(game)
        assert isinstance(payoff, Fraction)
        assert payoff == Fraction(3, 2)

    def test_free_variables(self):
        game = self.game.with_strategies({1: {1: 'p', 2: '1 - p'}})
        with pytest.raises(ValueError):
            matrixgame.expected_payoff(game)


class TestSymbolicPayoff:

    game = MatrixGame(payoff=[[5, 0], [-1, 2]], strategies={1: {1: 0.2, 2: 0.8}, 2: {1: 0.3, 2: 0.7}})

    def test_numeric_terms(self):
        assert matrixgame.s_expected_payoff(self.game) == \
            '0.2 * 0.3 * 5 + 0.2 * 0.7 * 0 + 0.8 * 0.3 * -1 + 0.8 * 0.7 * 2'

    def test_symbolic_terms(self):
        game = self.game.with_strategies({1: {1: 'p', 2: '1 - p'}, 2: {1: 'q', 2: '1 - q'}})
        string = matrixgame.s_expected_payoff(game)
        assert string == 'p * q * 5 + p * (1 - q) * 0 + (1 - p) * q * -1 + (1 - p) * (1 - q) * 2'
        assert matrixgame.Expression(string) == '8*p*q - 2*p - 3*q + 2'

    def test_term_order_3x2(self):
        game = MatrixGame(payoff=[[1, 2], [3, 4], [5, 6]],
                          strategies={1: ['a', 'b', 'c'], 2: ['x', 'y']})
        assert matrixgame.s_expected_payoff(game) == \
            'a * x * 1 + a * y * 2 + b * x * 3 + b * y * 4 + c * x * 5 + c * y * 6'

    def test_symbolic_payoffs(self):
        game = MatrixGame(payoff1=[['v', 0], [0, 'w']], payoff2=[[0, 1], [1, 0]], strategies=[[1, 0], [1, 0]])
        assert matrixgame.s_expected_payoff(game) == '1 * 1 * v + 1 * 0 * 0 + 0 * 1 * 0 + 0 * 0 * w'
        assert matrixgame.Expression(matrixgame.s_expected_payoff(game)) == 'v'

    def test_matches_expected_payoff(self):
        value = matrixgame.Expression(matrixgame.s_expected_payoff(self.game)).value
        assert np.isclose(float(value), matrixgame.expected_payoff(self.game))


class TestCounterStrategy:

    game = MatrixGame(payoff=[[5, 0], [-1, 2]], strategies={1: {1: 0.2, 2: 0.8}, 2: {1: 0.3, 2: 0.7}})

    def test_row_player(self):
        assert np.allclose(matrixgame.counter_strategy(self.game, 1), [1.5, 1.1])

    def test_column_player(self):
        assert np.allclose(matrixgame.counter_strategy(self.game, 2), [-0.2, -1.6])

    def test_one_payoff_per_pure_strategy(self):
        game = MatrixGame.random_game(4, 3, seed=5)
        assert len(matrixgame.counter_strategy(game, 1)) == 4
        assert len(matrixgame.counter_strategy(game, 2)) == 3

    def test_invalid_player(self):
        with pytest.raises(ValueError):
            matrixgame.counter_strategy(self.game, 3)

    def test_mixed_strategy_is_average(self):
        payoffs = matrixgame.counter_strategy(self.game, 1)
        assert np.isclose(np.dot([0.2, 0.8], payoffs), matrixgame.expected_payoff(self.game))


class TestPlay:

    game = MatrixGame(payoff=[[5, 0], [-1, 2]], strategies={1: {1: 0.2, 2: 0.8}, 2: {1: 0.3, 2: 0.7}})

    def test_reproducible(self):
        assert matrixgame.play(self.game, seed=3) == matrixgame.play(self.game, seed=3)

    def test_pure_strategies(self):
        game = self.game.with_strategies([[1, 0], [0, 1]])
        (row, col), (u1, u2) = matrixgame.play(game)
        assert (row, col) == (0, 1)
        assert (u1, u2) == (0, 0)

    def test_payoffs_match_outcome(self):
        rng = np.random.default_rng(seed=0)
        for _ in range(20):
            (row, col), (u1, u2) = matrixgame.play(self.game, rng=rng)
            assert u1 == self.game.payoff[row, col]
            assert u2 == -u1

    def test_constant_expression_probabilities(self):
        game = self.game.with_strategies({1: {1: '1/2', 2: '1/2'}, 2: {1: '1', 2: '0'}})
        (row, col), (u1, u2) = matrixgame.play(game, seed=4)
        assert col == 0
        assert u1 == game.payoff[row, 0]
        assert len(matrixgame.simulate(game, rounds=5, seed=4)) == 5

    def test_invalid_distribution(self):
        game = self.game.with_strategies({2: [0.5, 0.6]})
        with pytest.raises(InvalidProbability):
            matrixgame.play(game)

    def test_simulate(self):
        df = matrixgame.simulate(self.game, rounds=25, seed=1)
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['round', 'action_player1', 'action_player2', 'u_player1', 'u_player2',
                                    'V_player1', 'V_player2']
        assert len(df) == 25
        assert set(df['action_player1']) <= {'a1', 'a2'}
        assert np.allclose(df['V_player1'], df['u_player1'].cumsum())
        assert np.allclose(df['u_player1'], -df['u_player2'])
        assert df.equals(matrixgame.simulate(self.game, rounds=25, seed=1))

    def test_simulate_indices(self):
        df = matrixgame.simulate(self.game, rounds=10, seed=2, labels=False)
        assert list(df.columns)[:3] == ['round', 'action_1', 'action_2']
        assert set(df['action_1']) <= {0, 1}


# %% run


if __name__ == '__main__':

    for test_class in [TestExpectedPayoff(), TestSymbolicPayoff(), TestCounterStrategy(), TestPlay()]:
        method_names = [method for method in dir(test_class)
                        if callable(getattr(test_class, method))
                        if method.startswith('test_')]
        for method in method_names:
            getattr(test_class, method)()
