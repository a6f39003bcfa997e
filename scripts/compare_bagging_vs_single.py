"""
Compare Bagging vs Single Classifiers
=====================================

Train a bagged ensemble and a single base classifier for every model type on
the same synthetic data, then tabulate and plot held-out accuracy for
majority and confidence-weighted voting.

Run with: python scripts/compare_bagging_vs_single.py [--output results/bagging_vs_single.png]
"""

import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from baggingensemble import BaggingClassifier, ModelType
from baggingensemble.data import make_classification_dataset, train_test_datasets
from baggingensemble.evaluation import accuracy, member_agreement


# Hyperparameter vectors per model type (see BaggingClassifier.set_subclassifier_hyperparameters)
HYPERPARAMETERS = {
    ModelType.DECISION_TREE: [0],
    ModelType.GRADIENT_DESCENT: [0, 2, 1, 1, 100],
    ModelType.KNN: [5],
    ModelType.PERCEPTRON: [50],
    ModelType.TWO_LAYER_NN: [10, 200],
}


def run_comparison(n_examples=400, m=15, sample_proportion=0.5, n_seeds=3):
    """Collect accuracies for every model type and seed."""
    rows = []
    for seed in range(n_seeds):
        data = make_classification_dataset(
            n_examples=n_examples, class_sep=1.0, flip_y=0.1, random_state=seed
        )
        train, test = train_test_datasets(data, test_fraction=0.3, random_state=seed)

        for model_type, params in HYPERPARAMETERS.items():
            ensemble = BaggingClassifier(
                model_type, m, sample_proportion,
                hyperparameters=params, random_state=seed
            )
            single = ensemble.get_single_classifier().train(train)
            ensemble.train(train)

            majority_acc = accuracy(ensemble, test)
            ensemble.set_use_confidence_voting(True)
            weighted_acc = accuracy(ensemble, test)

            rows.append({
                'model_type': model_type.name.lower(),
                'seed': seed,
                'single': accuracy(single, test),
                'bagging_majority': majority_acc,
                'bagging_confidence': weighted_acc,
                'agreement': member_agreement(ensemble, test),
            })
            print(f"  seed={seed} {model_type.name:<17s} "
                  f"single={rows[-1]['single']:.3f} "
                  f"majority={majority_acc:.3f} confidence={weighted_acc:.3f}")

    return pd.DataFrame(rows)


def create_comparison_plot(df, output_path=None):
    """Bar chart of mean accuracy per model type and method."""
    summary = df.groupby('model_type')[['single', 'bagging_majority', 'bagging_confidence']].mean()
    errors = df.groupby('model_type')[['single', 'bagging_majority', 'bagging_confidence']].std()

    fig, ax = plt.subplots(figsize=(10, 5))
    x = np.arange(len(summary))
    width = 0.27
    colors = {'single': '#1f77b4', 'bagging_majority': '#ff7f0e', 'bagging_confidence': '#2ca02c'}

    for i, column in enumerate(summary.columns):
        ax.bar(x + (i - 1) * width, summary[column], width,
               yerr=errors[column], label=column, color=colors[column], capsize=3)

    ax.set_xticks(x)
    ax.set_xticklabels(summary.index, rotation=15)
    ax.set_ylabel('Held-out accuracy')
    ax.set_ylim(0.5, 1.0)
    ax.set_title('Bagging vs Single Classifier', fontsize=13, fontweight='bold')
    ax.legend()
    ax.grid(True, axis='y', alpha=0.3)
    plt.tight_layout()

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(output_path, dpi=150)
        print(f"Saved plot to {output_path}")
    else:
        plt.show()


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('--n-examples', type=int, default=400)
    parser.add_argument('--m', type=int, default=15, help='Ensemble size')
    parser.add_argument('--sample-proportion', type=float, default=0.5)
    parser.add_argument('--seeds', type=int, default=3)
    parser.add_argument('--output', type=str, default=None, help='Save plot here instead of showing it')
    args = parser.parse_args()

    print("Running bagging comparison...")
    df = run_comparison(args.n_examples, args.m, args.sample_proportion, args.seeds)

    print()
    print(df.groupby('model_type').mean(numeric_only=True).drop(columns='seed').round(3))
    create_comparison_plot(df, args.output)


if __name__ == "__main__":
    main()
