import logging

import pandas as pd
from sklearn.model_selection import train_test_split

from lung_survival.config import OUTCOME, RANDOM_STATE, TRAIN_SIZE

logger = logging.getLogger(__name__)


class DataSplitter:
    def __init__(
        self,
        train_size: float = TRAIN_SIZE,
        random_state: int = RANDOM_STATE,
        stratify_col: str = OUTCOME,
    ):
        if not 0 < train_size < 1:
            raise ValueError(
                f"train_size doit être dans ]0, 1[ (reçu {train_size})"
            )
        self.train_size = train_size
        self.random_state = random_state
        self.stratify_col = stratify_col

    def split_indices(self, df: pd.DataFrame) -> tuple[pd.Index, pd.Index]:
        """
        Renvoie les index (train, test) d'un découpage stratifié sur
        stratify_col ; les deux ensembles sont disjoints et couvrent df.
        """
        train_idx, test_idx = train_test_split(
            df.index,
            train_size=self.train_size,
            stratify=df[self.stratify_col],
            random_state=self.random_state,
        )
        return pd.Index(train_idx), pd.Index(test_idx)

    def split(self, df: pd.DataFrame) -> tuple[pd.DataFrame, pd.DataFrame]:
        train_idx, test_idx = self.split_indices(df)
        train_df, test_df = df.loc[train_idx], df.loc[test_idx]
        logger.info(
            "Découpage (graine %d) : %d train (%.1f%% décès), %d test (%.1f%% décès)",
            self.random_state,
            len(train_df),
            100 * train_df[self.stratify_col].mean(),
            len(test_df),
            100 * test_df[self.stratify_col].mean(),
        )
        return train_df, test_df
