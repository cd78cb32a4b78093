"""
Tests for the vision layer.

Tests:
- Prediction coercion from classifier output shapes
- Argmax selection and tie-breaking
- Scripted and passthrough classifiers
- Classifier loading by import path
- Static frame source
"""

import pytest

from ..catalog import TOOLS
from ..errors import ClassificationError, ClassifierLoadError
from ..vision import (
    CallableClassifier,
    ClassificationAdapter,
    PassthroughClassifier,
    Prediction,
    ScriptedClassifier,
    StaticFrameSource,
    best_prediction,
    load_classifier,
)


class TestPredictionCoerce:
    """Tests for Prediction.coerce()."""

    def test_pair(self):
        assert Prediction.coerce(("7-8", 0.9)) == Prediction("7-8", 0.9)

    def test_label_dict(self):
        assert Prediction.coerce({"label": "1-2", "probability": 0.4}) == Prediction("1-2", 0.4)

    def test_class_name_dict(self):
        """Teachable Machine style output."""
        item = {"className": "17-18", "probability": "0.75"}
        assert Prediction.coerce(item) == Prediction("17-18", 0.75)

    def test_prediction_passes_through(self):
        p = Prediction("9-10", 0.1)
        assert Prediction.coerce(p) is p

    @pytest.mark.parametrize("probability", [float("nan"), float("inf"), "nan"])
    def test_non_finite_probability(self, probability):
        with pytest.raises(ClassificationError):
            Prediction.coerce(("1-2", probability))

    def test_non_finite_prediction_instance(self):
        with pytest.raises(ClassificationError):
            Prediction.coerce(Prediction("1-2", float("nan")))

    @pytest.mark.parametrize("item", [
        "7-8",
        ("7-8",),
        {"label": "7-8"},
        {"probability": 0.5},
        ("7-8", "high"),
    ])
    def test_malformed(self, item):
        with pytest.raises(ClassificationError):
            Prediction.coerce(item)


class TestArgmax:
    """Tests for best_prediction() and the adapter."""

    def test_unsorted_output(self):
        predictions = [
            Prediction("1-2", 0.05),
            Prediction("13-14", 0.80),
            Prediction("7-8", 0.15),
        ]
        detection = best_prediction(predictions)
        assert detection.label == "13-14"
        assert detection.confidence == 0.80

    def test_tie_goes_to_first(self):
        predictions = [Prediction("9-10", 0.5), Prediction("11-12", 0.5)]
        assert best_prediction(predictions).label == "9-10"

    def test_empty_output_is_an_error(self):
        with pytest.raises(ClassificationError):
            best_prediction([])

    def test_adapter_propagates_errors(self):
        adapter = ClassificationAdapter(ScriptedClassifier([RuntimeError("boom")], labels=TOOLS))
        with pytest.raises(RuntimeError):
            adapter.classify(None)

    def test_nan_first_does_not_hide_detection(self):
        """A NaN output costs the frame instead of winning the argmax."""
        classifier = CallableClassifier(lambda frame: [("1-2", float("nan")), ("7-8", 0.9)])
        with pytest.raises(ClassificationError):
            ClassificationAdapter(classifier).classify(object())

    def test_adapter_over_callable(self):
        classifier = CallableClassifier(lambda frame: [("1-2", 0.2), ("7-8", 0.8)])
        detection = ClassificationAdapter(classifier).classify(object())
        assert detection.label == "7-8"


class TestScriptedClassifier:
    """Tests for ScriptedClassifier."""

    def test_target_label_wins(self):
        classifier = ScriptedClassifier([("7-8", 0.9)], labels=TOOLS)
        predictions = classifier.predict(None)
        assert len(predictions) == len(TOOLS)
        assert predictions[0] == Prediction("7-8", 0.9)
        assert sum(p.probability for p in predictions) == pytest.approx(1.0)
        assert best_prediction(predictions).label == "7-8"

    def test_none_yields_empty(self):
        assert ScriptedClassifier([None], labels=TOOLS).predict(None) == []

    def test_exhausted(self):
        classifier = ScriptedClassifier([("1-2", 0.9)], labels=TOOLS)
        classifier.predict(None)
        with pytest.raises(ClassificationError):
            classifier.predict(None)
        assert classifier.calls == 2

    def test_repeat(self):
        classifier = ScriptedClassifier([("1-2", 0.9), ("7-8", 0.9)], labels=TOOLS, repeat=True)
        labels = [best_prediction(classifier.predict(None)).label for _ in range(4)]
        assert labels == ["1-2", "7-8", "1-2", "7-8"]


class TestPassthroughClassifier:
    """Tests for PassthroughClassifier."""

    def test_frame_is_prediction_list(self):
        classifier = PassthroughClassifier()
        predictions = classifier.predict([{"className": "1-2", "probability": 0.99}])
        assert predictions == [Prediction("1-2", 0.99)]

    def test_missing_frame(self):
        with pytest.raises(ClassificationError):
            PassthroughClassifier().predict(None)


class TestLoadClassifier:
    """Tests for load_classifier()."""

    def test_classifier_subclass_is_instantiated(self):
        classifier = load_classifier("dtrquiz.vision:PassthroughClassifier")
        assert isinstance(classifier, PassthroughClassifier)

    def test_function_is_wrapped(self):
        classifier = load_classifier("dtrquiz.vision.classifier:best_prediction", labels=TOOLS)
        assert isinstance(classifier, CallableClassifier)
        assert classifier.labels() == TOOLS

    def test_instance_returned_as_is(self, tmp_path, monkeypatch):
        (tmp_path / "my_model.py").write_text(
            "from dtrquiz.vision import ScriptedClassifier\n"
            "MODEL = ScriptedClassifier([('7-8', 0.9)], labels=['7-8'])\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))
        classifier = load_classifier("my_model:MODEL")
        assert isinstance(classifier, ScriptedClassifier)

    @pytest.mark.parametrize("target", [
        "no_colon",
        "dtrquiz_missing_module:predict",
        "dtrquiz.vision:missing_attr",
        "dtrquiz.config:DEFAULT_BUFFER_SIZE",
    ])
    def test_bad_targets(self, target):
        with pytest.raises(ClassifierLoadError):
            load_classifier(target)


class TestStaticFrameSource:
    """Tests for StaticFrameSource."""

    def test_open_read_close(self):
        source = StaticFrameSource(frame="pixels")
        source.open()
        assert source.is_open
        assert source.read() == "pixels"
        source.close()
        assert not source.is_open
