"""
Learner registry: maps learner ids to their implementation.
"""
from typing import List, Optional

from sklearn.discriminant_analysis import LinearDiscriminantAnalysis, QuadraticDiscriminantAnalysis
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import KNeighborsClassifier
from sklearn.svm import SVC
from sklearn.tree import DecisionTreeClassifier

from .base import Learner, SklearnLearner, FeaturelessLearner
from .torch_mlp import TorchMLPLearner


# id -> (estimator class, default params, short name)
SKLEARN_LEARNERS = {
    "classif.lda": (LinearDiscriminantAnalysis, {}, "lda"),
    "classif.qda": (QuadraticDiscriminantAnalysis, {"reg_param": 0.01}, "qda"),
    "classif.rpart": (DecisionTreeClassifier, {"min_samples_split": 20, "ccp_alpha": 0.01}, "rpart"),
    "classif.randomForest": (RandomForestClassifier, {"n_estimators": 100}, "rf"),
    "classif.logreg": (LogisticRegression, {"max_iter": 1000}, "logreg"),
    "classif.naiveBayes": (GaussianNB, {}, "nbayes"),
    "classif.kknn": (KNeighborsClassifier, {"n_neighbors": 7, "weights": "distance"}, "kknn"),
    "classif.ksvm": (SVC, {"kernel": "rbf"}, "ksvm"),
}


def list_learners() -> List[str]:
    """Ids of all available learners."""
    return list(SKLEARN_LEARNERS) + ["classif.featureless", "classif.mlp"]


def make_learner(
    name: str,
    id: Optional[str] = None,
    predict_type: str = "response",
    short_name: Optional[str] = None,
    **params,
) -> Learner:
    """
    Construct a learner by registry id.

    Args:
        name: Registry id, e.g. 'classif.lda'.
        id: Learner id in results (defaults to name). Use it to benchmark
            the same algorithm with different settings.
        predict_type: 'response' or 'prob'.
        short_name: Display name for plots.
        **params: Hyperparameters overriding the registry defaults.

    Returns:
        Learner instance.
    """
    learner_id = id or name

    if name == "classif.featureless":
        return FeaturelessLearner(learner_id, predict_type=predict_type, short_name=short_name, **params)

    if name == "classif.mlp":
        return TorchMLPLearner(learner_id, predict_type=predict_type, short_name=short_name or "mlp", **params)

    if name not in SKLEARN_LEARNERS:
        raise ValueError(f"Unknown learner: {name}. Available: {', '.join(list_learners())}")

    estimator_cls, defaults, default_short = SKLEARN_LEARNERS[name]
    merged = {**defaults, **params}
    if estimator_cls is SVC and predict_type == "prob":
        merged.setdefault("probability", True)

    if short_name is None:
        short_name = default_short if id is None else learner_id.split(".", 1)[-1]

    return SklearnLearner(
        learner_id,
        estimator_cls,
        predict_type=predict_type,
        short_name=short_name,
        **merged,
    )
