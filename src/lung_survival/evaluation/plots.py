import logging
import os
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd

from lung_survival.config import ID

logger = logging.getLogger(__name__)


def plot_survival_curves(long_df: pd.DataFrame, path: Optional[str] = None):
    """
    Trace une courbe de survie par patient à partir du format long
    (ID, TIME, SURVIVAL). Sauvegarde la figure si path est fourni.
    """
    fig, ax = plt.subplots(figsize=(10, 6))
    for pid, curve in long_df.groupby(ID, sort=False):
        curve = curve.sort_values("TIME")
        ax.step(
            curve["TIME"],
            curve["SURVIVAL"],
            where="post",
            alpha=0.6,
            label=f"Patient {pid}",
        )
    ax.set_xlabel("Temps (mois)")
    ax.set_ylabel("Probabilité de survie prédite")
    ax.set_title("Courbes de survie prédites (modèle de Cox), patients test")
    ax.set_ylim(0, 1.05)
    ax.grid(True, ls="--", alpha=0.3)
    if long_df[ID].nunique() <= 15:
        ax.legend(fontsize="small")
    fig.tight_layout()

    if path is not None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.savefig(path)
        logger.info("Figure sauvegardée : %s", path)
    return fig
