"""Dataset visualization functions."""

import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.figure import Figure

from wle_tlbx.data.partition import PartitionResult


def plot_class_distribution(
    partition: PartitionResult,
    figsize: tuple[int, int] = (10, 5),
) -> Figure:
    """Plot the label shares of the training and test subsets side by side.

    A stratified split shows (near) identical bars for both subsets.

    Args:
        partition: Result of :func:`~wle_tlbx.data.partition.stratified_split`.
        figsize: Figure size (width, height)

    Returns:
        matplotlib Figure object
    """
    shares = (
        partition.summary()[["train_share", "test_share"]]
        .rename(columns={"train_share": "train", "test_share": "test"})
        .reset_index()
        .melt(id_vars=partition.label_col, var_name="subset", value_name="share")
    )
    shares[partition.label_col] = shares[partition.label_col].astype(str)

    fig, ax = plt.subplots(figsize=figsize)
    sns.barplot(data=shares, x=partition.label_col, y="share", hue="subset", ax=ax)
    ax.set_ylabel("Share of rows")
    ax.set_title(
        f"Class Distribution (train n={len(partition.train)}, test n={len(partition.test)}, seed={partition.seed})",
    )

    plt.tight_layout()

    return fig
