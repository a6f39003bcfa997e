"""
Tests for BaggingClassifier.

Run with: pytest tests/test_bagging.py -v
"""

import warnings

import numpy as np
import pytest
from baggingensemble import (
    BaggingClassifier,
    Classifier,
    DataSet,
    Example,
    EstimatorClassifier,
    InvalidConfigurationError,
    ModelType,
    UntrainedModelError,
    make_classification_dataset
)


class ScriptedClassifier(Classifier):
    """Member that always predicts the same label with the same confidence."""

    def __init__(self, label, confidence=1.0, fail=False):
        self.label = label
        self.conf = confidence
        self.fail = fail
        self.trained_on = None

    def train(self, dataset):
        if self.fail:
            raise RuntimeError("member training failed")
        self.trained_on = dataset
        return self

    def classify(self, example):
        return self.label

    def confidence(self, example):
        return self.conf


class ScriptedFactory:
    """Hands out ScriptedClassifiers following a (label, confidence) script."""

    def __init__(self, script, fail_at=None):
        self.script = list(script)
        self.fail_at = fail_at
        self.created = []

    def get_classifier(self):
        i = len(self.created)
        label, confidence = self.script[i % len(self.script)]
        clf = ScriptedClassifier(label, confidence, fail=(i == self.fail_at))
        self.created.append(clf)
        return clf


@pytest.fixture
def data():
    return make_classification_dataset(n_examples=60, random_state=0)


@pytest.fixture
def probe():
    return Example([0.0] * 6)


def scripted_ensemble(script, data, **kwargs):
    """Ensemble trained with one scripted member per script entry."""
    ensemble = BaggingClassifier(m=len(script), **kwargs)
    ensemble.factory = ScriptedFactory(script)
    return ensemble.train(data)


class TestInitialization:
    """Test construction and configuration."""

    def test_defaults(self):
        ensemble = BaggingClassifier()

        assert ensemble.model_type == ModelType.DECISION_TREE
        assert ensemble.m == 10
        assert ensemble.sample_proportion == 0.5
        assert ensemble.use_confidence_voting is False
        assert ensemble.hyperparameters == ()
        assert len(ensemble) == 0
        assert not ensemble.is_trained

    def test_explicit(self):
        ensemble = BaggingClassifier(ModelType.KNN, 7, 0.8, hyperparameters=[3])

        assert ensemble.model_type == ModelType.KNN
        assert ensemble.m == 7
        assert ensemble.sample_proportion == 0.8
        assert ensemble.get_single_classifier().estimator.n_neighbors == 3

    def test_setters_do_not_validate(self):
        """Invalid values are accepted until train()."""
        ensemble = BaggingClassifier()
        ensemble.set_ensemble_size(0)
        ensemble.set_sample_proportion(2.0)
        ensemble.set_model_type("forest")

        assert ensemble.m == 0
        assert ensemble.sample_proportion == 2.0
        assert ensemble.model_type == "forest"

    def test_set_hyperparameters(self):
        ensemble = BaggingClassifier()
        ensemble.set_hyperparameters(ModelType.PERCEPTRON, 4, 0.3)

        assert ensemble.model_type == ModelType.PERCEPTRON
        assert ensemble.m == 4
        assert ensemble.sample_proportion == 0.3
        assert ensemble.get_single_classifier().model_type is ModelType.PERCEPTRON

    def test_set_use_confidence_voting(self):
        ensemble = BaggingClassifier()
        ensemble.set_use_confidence_voting(True)
        assert ensemble.use_confidence_voting is True

    def test_get_params(self):
        params = BaggingClassifier(ModelType.KNN, 3, 0.25, hyperparameters=[1]).get_params()

        assert params['model_type'] == ModelType.KNN
        assert params['m'] == 3
        assert params['sample_proportion'] == 0.25
        assert params['hyperparameters'] == (1,)
        assert params['accumulate'] is True


class TestSubclassifierHyperparameters:
    """Test hyperparameter pass-through to the factory."""

    def test_pass_through(self):
        ensemble = BaggingClassifier()
        ensemble.set_subclassifier_hyperparameters([5])

        clf = ensemble.get_single_classifier()
        assert isinstance(clf, EstimatorClassifier)
        assert clf.hyperparameters == (5,)
        assert clf.estimator.max_depth == 5

    def test_get_single_classifier_has_no_side_effect(self, data):
        ensemble = BaggingClassifier(m=3)
        clf = ensemble.get_single_classifier()

        assert len(ensemble) == 0
        clf.train(data)
        assert len(ensemble) == 0

    def test_single_classifier_is_fresh(self):
        ensemble = BaggingClassifier()
        assert ensemble.get_single_classifier() is not ensemble.get_single_classifier()

    def test_does_not_affect_trained_members(self, data):
        ensemble = BaggingClassifier(m=2, hyperparameters=[2], random_state=0).train(data)
        ensemble.set_subclassifier_hyperparameters([4])

        assert [c.estimator.max_depth for c in ensemble.classifiers] == [2, 2]

        ensemble.train(data)
        assert [c.estimator.max_depth for c in ensemble.classifiers] == [2, 2, 4, 4]

    def test_model_type_change_discards_hyperparameters(self):
        ensemble = BaggingClassifier()
        ensemble.set_subclassifier_hyperparameters([5])

        with pytest.warns(UserWarning, match="Discarding subclassifier hyperparameters"):
            ensemble.set_model_type(ModelType.KNN)

        assert ensemble.hyperparameters == ()
        assert ensemble.get_single_classifier().model_type is ModelType.KNN

    def test_same_model_type_keeps_hyperparameters(self):
        ensemble = BaggingClassifier(ModelType.KNN, hyperparameters=[3])

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            ensemble.set_model_type("knn")

        assert ensemble.get_single_classifier().estimator.n_neighbors == 3


class TestTraining:
    """Test bootstrap training."""

    def test_ensemble_size(self, data):
        for m in (1, 3, 10):
            ensemble = BaggingClassifier(m=m, random_state=0).train(data)
            assert len(ensemble) == m
            assert ensemble.n_classifiers == m

    def test_returns_self(self, data):
        ensemble = BaggingClassifier(m=2)
        assert ensemble.train(data) is ensemble

    def test_members_trained_on_bootstrap_samples(self, data):
        ensemble = scripted_ensemble([(0, 1.0)] * 4, data, sample_proportion=0.25)

        samples = [c.trained_on for c in ensemble.classifiers]
        assert all(len(s) == 15 for s in samples)
        assert len({id(s) for s in samples}) == 4
        assert not all(np.array_equal(samples[0].X, s.X) for s in samples[1:])

    def test_members_are_owned(self, data):
        ensemble = BaggingClassifier(m=3, random_state=0).train(data)

        members = ensemble.classifiers
        assert isinstance(members, tuple)
        assert len({id(c) for c in members}) == 3

    def test_repeated_train_accumulates(self, data):
        ensemble = BaggingClassifier(m=3, random_state=0)
        ensemble.train(data)
        first = ensemble.classifiers
        ensemble.train(data)

        assert len(ensemble) == 6
        assert ensemble.classifiers[:3] == first

    def test_repeated_train_replaces(self, data):
        ensemble = BaggingClassifier(m=3, accumulate=False, random_state=0)
        ensemble.train(data)
        first = ensemble.classifiers
        ensemble.train(data)

        assert len(ensemble) == 3
        assert all(c not in first for c in ensemble.classifiers)

    def test_reset(self, data):
        ensemble = BaggingClassifier(m=2).train(data)
        ensemble.reset()
        assert len(ensemble) == 0
        assert not ensemble.is_trained

    def test_single_label_sample_warns(self):
        data = DataSet(np.random.rand(10, 2), np.ones(10), random_state=0)
        ensemble = BaggingClassifier(m=2)

        with pytest.warns(RuntimeWarning, match="single label"):
            ensemble.train(data)

        assert ensemble.classify(data[0]) == 1.0

    @pytest.mark.parametrize("model_type", list(ModelType))
    def test_rare_label_small_samples(self, model_type):
        """Small bootstrap samples that miss the rare label still train."""
        y = np.zeros(30)
        y[0] = 1.0
        data = DataSet(np.random.RandomState(0).rand(30, 2), y, random_state=0)
        ensemble = BaggingClassifier(model_type, m=10, sample_proportion=0.2, random_state=0)

        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            ensemble.train(data)

        assert len(ensemble) == 10
        single_label = [
            c for c in ensemble.classifiers if len(c.model.classes_) == 1
        ]
        assert single_label
        for ex in list(data)[:5]:
            assert ensemble.classify(ex) in {0.0, 1.0}
            assert ensemble.classify_using_confidence(ex) in {0.0, 1.0}
            assert ensemble.confidence(ex) > 0

    def test_verbose(self, data, capsys):
        BaggingClassifier(m=2, verbose=True).train(data)

        out = capsys.readouterr().out
        assert "Training bagging ensemble" in out
        assert "Member   2/2" in out

    def test_parallel_matches_sequential(self):
        sequential = BaggingClassifier(m=6, random_state=0).train(
            make_classification_dataset(n_examples=80, random_state=1)
        )
        parallel = BaggingClassifier(m=6, random_state=0, n_jobs=2).train(
            make_classification_dataset(n_examples=80, random_state=1)
        )

        probe_data = make_classification_dataset(n_examples=30, random_state=2)
        np.testing.assert_array_equal(sequential.predict(probe_data), parallel.predict(probe_data))
        for a, b in zip(sequential.classifiers, parallel.classifiers):
            np.testing.assert_array_equal(
                a.estimator.tree_.feature, b.estimator.tree_.feature
            )


class TestConfigurationErrors:
    """Test configuration validation at train time."""

    @pytest.mark.parametrize("m", [0, -3, 2.5, True])
    def test_invalid_ensemble_size(self, data, m):
        ensemble = BaggingClassifier(m=m)
        with pytest.raises(InvalidConfigurationError, match="m must be a positive integer"):
            ensemble.train(data)

    @pytest.mark.parametrize("p", [0, 0.0, -0.5, 1.5, "half"])
    def test_invalid_sample_proportion(self, data, p):
        ensemble = BaggingClassifier(sample_proportion=p)
        with pytest.raises(InvalidConfigurationError, match="sample_proportion must be in"):
            ensemble.train(data)

    def test_full_proportion_is_valid(self, data):
        assert len(BaggingClassifier(m=2, sample_proportion=1.0).train(data)) == 2

    def test_invalid_model_type(self, data):
        ensemble = BaggingClassifier(model_type="forest")
        with pytest.raises(InvalidConfigurationError, match="Unknown model type"):
            ensemble.train(data)

    def test_is_value_error(self, data):
        with pytest.raises(ValueError):
            BaggingClassifier(m=0).train(data)

    def test_failed_validation_leaves_ensemble_untouched(self, data):
        ensemble = BaggingClassifier(m=2).train(data)
        ensemble.set_ensemble_size(-1)

        with pytest.raises(InvalidConfigurationError):
            ensemble.train(data)
        assert len(ensemble) == 2


class TestCollaboratorErrors:
    """Test that member failures propagate unchanged."""

    def test_member_train_failure_propagates(self, data):
        ensemble = BaggingClassifier(m=4)
        ensemble.factory = ScriptedFactory([(1, 1.0)], fail_at=2)

        with pytest.raises(RuntimeError, match="member training failed"):
            ensemble.train(data)
        assert len(ensemble) == 0

    def test_malformed_hyperparameters_propagate(self, data):
        ensemble = BaggingClassifier(ModelType.KNN, m=2, hyperparameters=[3, 4])

        with pytest.raises(ValueError, match="at most 1 hyperparameters"):
            ensemble.train(data)

    def test_estimator_failure_propagates(self, data):
        """k larger than the bootstrap sample fails inside scikit-learn."""
        ensemble = BaggingClassifier(ModelType.KNN, m=1, sample_proportion=0.05,
                                     hyperparameters=[10]).train(data)

        with pytest.raises(ValueError):
            ensemble.classify(data[0])


class TestUntrained:
    """Test queries on an empty ensemble."""

    @pytest.mark.parametrize("method", [
        "classify", "confidence", "classify_using_confidence", "vote_scores"
    ])
    def test_raises(self, probe, method):
        ensemble = BaggingClassifier()
        with pytest.raises(UntrainedModelError, match="not trained"):
            getattr(ensemble, method)(probe)

    def test_predict_raises(self, data):
        with pytest.raises(UntrainedModelError):
            BaggingClassifier().predict(data)

    def test_confidence_voting_raises(self, probe):
        ensemble = BaggingClassifier(use_confidence_voting=True)
        with pytest.raises(UntrainedModelError):
            ensemble.classify(probe)

    def test_after_reset(self, data, probe):
        ensemble = BaggingClassifier(m=1).train(data)
        ensemble.reset()
        with pytest.raises(UntrainedModelError):
            ensemble.classify(probe)

    def test_is_runtime_error(self, probe):
        with pytest.raises(RuntimeError):
            BaggingClassifier().classify(probe)


class TestMajorityVote:
    """Test classify with majority voting."""

    def test_strict_majority(self, data, probe):
        """3 members predict 1, 2 predict 0."""
        ensemble = scripted_ensemble([(1, 1.0), (0, 1.0), (1, 1.0), (0, 1.0), (1, 1.0)], data)

        assert ensemble.classify(probe) == 1
        assert ensemble.vote_scores(probe) == {0.0: 2.0, 1.0: 3.0}

    def test_ignores_confidence(self, data, probe):
        ensemble = scripted_ensemble([(1, 0.1), (1, 0.1), (0, 0.9)], data)
        assert ensemble.classify(probe) == 1

    def test_tie_break_stable(self, data, probe):
        for script in ([(1, 1.0), (0, 1.0)], [(0, 1.0), (1, 1.0)]):
            ensemble = scripted_ensemble(script, data)
            results = {ensemble.classify(probe) for _ in range(5)}
            assert results == {0.0}

    def test_multiclass_tie_break(self, data, probe):
        ensemble = scripted_ensemble([(2, 1.0), (3, 1.0), (3, 1.0), (2, 1.0), (0, 1.0)], data)
        assert ensemble.classify(probe) == 2

    def test_predict_batch(self, data):
        ensemble = scripted_ensemble([(1, 1.0), (1, 1.0), (0, 1.0)], data)

        predictions = ensemble.predict(data)
        assert predictions.shape == (len(data),)
        assert np.all(predictions == 1.0)

    def test_predict_examples_iterable(self, data):
        ensemble = scripted_ensemble([(2, 1.0)], data)
        assert list(ensemble.predict([data[0], data[1]])) == [2.0, 2.0]


class TestConfidenceVote:
    """Test confidence-weighted voting and ensemble confidence."""

    def test_weighted_correctness(self, data, probe):
        """{1: 0.9 + 0.1} beats {0: 0.5}; confidence is the summed 1.0."""
        ensemble = scripted_ensemble(
            [(1, 0.9), (1, 0.1), (0, 0.5)], data, use_confidence_voting=True
        )

        assert ensemble.classify(probe) == 1
        assert ensemble.confidence(probe) == pytest.approx(1.0)

    def test_classify_dispatches_on_flag(self, data, probe):
        ensemble = scripted_ensemble([(1, 0.1), (1, 0.1), (0, 0.9)], data)

        assert ensemble.classify(probe) == 1
        ensemble.set_use_confidence_voting(True)
        assert ensemble.classify(probe) == 0

    def test_classify_using_confidence_ignores_flag(self, data, probe):
        ensemble = scripted_ensemble([(1, 0.1), (1, 0.1), (0, 0.9)], data)
        assert ensemble.classify_using_confidence(probe) == 0

    def test_confidence_in_majority_mode(self, data, probe):
        """confidence() always reports the confidence-weighted winner's mass."""
        ensemble = scripted_ensemble([(1, 0.1), (1, 0.1), (0, 0.9)], data)
        assert ensemble.confidence(probe) == pytest.approx(0.9)

    def test_confidence_scales_with_agreement(self, data, probe):
        ensemble = scripted_ensemble([(1, 0.8)] * 5, data)
        assert ensemble.confidence(probe) == pytest.approx(4.0)

    def test_tie_break_stable(self, data, probe):
        ensemble = scripted_ensemble([(2, 0.5), (1, 0.5)], data, use_confidence_voting=True)
        assert {ensemble.classify(probe) for _ in range(5)} == {1.0}

    def test_vote_scores(self, data, probe):
        ensemble = scripted_ensemble(
            [(1, 0.25), (0, 0.5), (1, 0.5)], data, use_confidence_voting=True
        )
        assert ensemble.vote_scores(probe) == {0.0: pytest.approx(0.5), 1.0: pytest.approx(0.75)}


class TestEndToEnd:
    """Test the ensemble with scikit-learn backed members."""

    def test_deterministic_predictions(self):
        ensemble = BaggingClassifier(m=5, random_state=0).train(
            make_classification_dataset(n_examples=100, random_state=0)
        )
        ex = make_classification_dataset(n_examples=10, random_state=5)[3]

        assert len({ensemble.classify(ex) for _ in range(5)}) == 1

    def test_reproducible_across_runs(self):
        def run():
            data = make_classification_dataset(n_examples=100, random_state=0)
            ensemble = BaggingClassifier(m=5, hyperparameters=[3], random_state=0).train(data)
            return ensemble.predict(data)

        np.testing.assert_array_equal(run(), run())

    @pytest.mark.parametrize("model_type", list(ModelType))
    def test_every_model_type(self, model_type):
        data = make_classification_dataset(
            n_examples=150, class_sep=2.0, flip_y=0.0, random_state=0
        )
        ensemble = BaggingClassifier(model_type, m=5, sample_proportion=0.8, random_state=0)
        ensemble.train(data)

        predictions = ensemble.predict(data)
        assert np.mean(predictions == data.y) > 0.8

        ensemble.set_use_confidence_voting(True)
        ex = data[0]
        assert ensemble.classify(ex) in {0.0, 1.0}
        assert ensemble.confidence(ex) >= 0

    def test_confidence_bounded_by_size_for_probabilities(self):
        """With probability confidences, the summed mass is at most m."""
        data = make_classification_dataset(n_examples=80, random_state=0)
        ensemble = BaggingClassifier(ModelType.KNN, m=4, hyperparameters=[3]).train(data)

        for ex in list(data)[:10]:
            assert 0 < ensemble.confidence(ex) <= 4.0 + 1e-9

    def test_repr_and_summary(self, data):
        ensemble = BaggingClassifier(m=2).train(data)

        assert "n_classifiers=2" in repr(ensemble)
        summary = ensemble.summary()
        assert "BaggingClassifier Summary" in summary
        assert "majority" in summary
