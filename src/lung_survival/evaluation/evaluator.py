import numpy as np
import pandas as pd
from sksurv.metrics import concordance_index_censored

from lung_survival.config import DURATION, OUTCOME
from lung_survival.errors import EvaluationError


class Evaluator:
    def __init__(self, event_col: str = OUTCOME, duration_col: str = DURATION):
        self.event_col = event_col
        self.duration_col = duration_col

    def evaluate(self, df: pd.DataFrame, risk_scores) -> float:
        """
        Calcule le C-index de Harrell pour un ensemble de patients.

        Parameters:
            df (pd.DataFrame): contient OUTCOME (0/1) et SURVIVAL_MONTHS.
            risk_scores: scores de risque prédits, dans l'ordre des lignes de df.

        Returns:
            float: Le C-index.
        """
        risk_scores = np.asarray(risk_scores, dtype=float)
        if len(risk_scores) != len(df):
            raise EvaluationError(
                f"{len(risk_scores)} scores pour {len(df)} patients"
            )
        if np.isnan(risk_scores).any():
            raise EvaluationError("Les scores de risque contiennent des NaN")

        # sksurv lève ValueError si tout est censuré ou sans paire comparable
        try:
            c_index = concordance_index_censored(
                df[self.event_col].astype(bool).to_numpy(),
                df[self.duration_col].astype(float).to_numpy(),
                risk_scores,
            )[0]
        except ValueError as e:
            raise EvaluationError(f"C-index impossible à calculer : {e}") from e
        return c_index

    def evaluate_both(
        self, train_df: pd.DataFrame, pred_train, test_df: pd.DataFrame, pred_test
    ) -> tuple:
        train_cindex = self.evaluate(train_df, pred_train)
        test_cindex = self.evaluate(test_df, pred_test)
        return train_cindex, test_cindex
