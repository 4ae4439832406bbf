import itertools
from typing import Union

import numpy as np
import pandas as pd

from matrixgame import MatrixGame
from matrixgame.expression import Expression


def game_from_table(table: Union[str, pd.DataFrame]) -> MatrixGame:
    """Convert files to DataFrame if needed, then parse the DataFrame to create a MatrixGame."""
    if isinstance(table, pd.DataFrame):
        df = table.copy()
        row_offset = 0
    elif isinstance(table, str):
        if table[-5:] == '.xlsx' or table[-4:] == '.xls':
            # read header and body separately; this will preserve duplicate column names
            # otherwise, pandas renames those, leading to cryptic error messages
            cols = pd.read_excel(table, header=None, nrows=1).values[0]
            df = pd.read_excel(table, header=None, skiprows=1, keep_default_na=False)
            df.columns = cols
            row_offset = 2
        elif table[-4:] == '.dta':
            df = pd.read_stata(table)
            row_offset = 1
        elif table[-4:] in ['.csv', '.txt']:
            cols = pd.read_csv(table, header=None, nrows=1).values[0]
            df = pd.read_csv(table, header=None, skiprows=1, keep_default_na=False)
            df.columns = cols
            row_offset = 2
        else:
            raise ValueError(f'"{table}: Unknown file extension. (Use any of .xlsx/.xls, .dta, .csv/.txt).')
    else:
        raise ValueError('Table needs to be either a pandas DataFrame or a string containing a file path.')

    payoffs, player_labels, strategy_labels = _dataframe_to_game(df, row_offset)
    if len(payoffs) == 1:
        return MatrixGame(payoff=payoffs[0], player_labels=player_labels, strategy_labels=strategy_labels)
    return MatrixGame(payoff1=payoffs[0], payoff2=payoffs[1], player_labels=player_labels,
                      strategy_labels=strategy_labels)


def _parse_payoff(value):
    """Numbers are read as floats; anything else must be an expression string."""
    if isinstance(value, str):
        if not value.strip():
            raise ValueError
        try:
            return float(value)
        except ValueError:
            Expression(value)
            return value.strip()
    value = float(value)
    if np.isnan(value):
        raise ValueError
    return value


def _dataframe_to_game(df: pd.DataFrame, row_offset=0):
    """Parse the dataframe: two a_-columns with the strategy labels of each player, and one u_-column per player
    (general-sum) or a single u_-column for player 1 (zero-sum)."""
    # row_offset is to account for (i) header and (ii) 0-indexing; e.g. line 2 in .xlsx corresponds to index 0 of df
    df['idx_column'] = df.index

    action_col_list = [col for col in df.columns if str(col)[:2] == 'a_']
    player_list = [str(col)[2:] for col in action_col_list]
    if len(player_list) != 2:
        raise ValueError(f'Table needs exactly two "a_"-columns (one per player), but has {len(player_list)}.')
    if len(set(player_list)) != 2:
        raise ValueError('"a_-"-columns contain duplicate player suffixes.')

    u_player_list = [str(col)[2:] for col in df.columns if str(col)[:2] == 'u_']
    if len(u_player_list) != len(set(u_player_list)):
        raise ValueError('"u_-"-columns contain duplicate player suffixes.')
    if set(u_player_list) == set(player_list):
        u_col_list = ['u_' + player for player in player_list]
    elif u_player_list == player_list[:1]:
        # zero-sum: only the row player's payoff is given
        u_col_list = ['u_' + player_list[0]]
    else:
        raise ValueError('Player suffixes from "u_"-columns do not match player suffixes from "a_"-columns: '
                         'need a "u_"-column for both players, or for the first player only (zero-sum).')

    strategy_lists = [df[col].unique().tolist() for col in action_col_list]
    nums_s = [len(strategy_list) for strategy_list in strategy_lists]
    payoffs = [np.empty(nums_s, dtype=object) for _ in u_col_list]

    error_list = []
    for index, profile in zip(np.ndindex(*nums_s), itertools.product(*strategy_lists)):
        # find all rows with matching strategy profile:
        rows = df.merge(pd.DataFrame((profile,), columns=action_col_list))
        if len(rows) == 0:
            error_list.append(f'Missing strategy profile > strategies: {", ".join(map(str, profile))}')
            continue
        elif len(rows) > 1:
            row_no = ", ".join(map(str, list(rows['idx_column'] + row_offset)))
            error_list.append(f'Duplicate strategy profile > strategies: {", ".join(map(str, profile))} '
                              f'> rows: {row_no}')
            continue
        for payoff, u_col in zip(payoffs, u_col_list):
            try:
                payoff[index] = _parse_payoff(rows[u_col].iloc[0])
            except (ValueError, TypeError):
                row_no = ", ".join(map(str, list(rows['idx_column'] + row_offset)))
                error_list.append(f'Format ({u_col}) > strategies: {", ".join(map(str, profile))} > row: {row_no}')

    if error_list:  # now, raise an error if any strategy profiles had issues:
        message = 'The table has missing or duplicate strategy profiles; or missing/illegal payoffs:'
        for error in error_list:
            message += '\n' + error
        raise ValueError(message)

    strategy_labels = [[str(label) for label in strategy_list] for strategy_list in strategy_lists]
    return [payoff.tolist() for payoff in payoffs], player_list, strategy_labels


def game_to_table(game: MatrixGame) -> pd.DataFrame:
    """Convert MatrixGame to a DataFrame in the tabular format."""
    player_labels = game.player_labels
    strategy_labels = game.strategy_labels

    a_cols = [f'a_{p}' for p in player_labels]
    if game.is_zero_sum:
        u_cols = [f'u_{player_labels[0]}']
        matrices = [game.payoff]
    else:
        u_cols = [f'u_{p}' for p in player_labels]
        matrices = [game.payoff1, game.payoff2]

    rows = []
    for index, profile in zip(np.ndindex(*game.shape), itertools.product(*strategy_labels)):
        u = [matrix[index].item() if isinstance(matrix[index], np.generic) else matrix[index] for matrix in matrices]
        rows.append(list(profile) + u)
    return pd.DataFrame(rows, columns=a_cols + u_cols)
