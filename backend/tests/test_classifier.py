"""Tests for per-task outcome classification."""

import pytest

from conftest import outcome

from app.services.checks.models import CheckStatus, CheckWarning, Severity


def messages(warnings):
    return [(w.severity, w.message) for w in warnings]


class TestStatusGate:
    """Only closed checks produce warnings."""

    @pytest.mark.parametrize("status", [
        CheckStatus.OPEN, CheckStatus.PROCESSING, CheckStatus.ABORTED, CheckStatus.CANCELLED,
    ])
    def test_non_closed_is_silent(self, classifier, status):
        assert classifier.classify("address", outcome("address", "fail", {"quality": 10}), status=status) == []
        assert classifier.classify("mortality", outcome("mortality", "alert"), status=status) == []

    def test_closed_is_default(self, classifier):
        assert classifier.classify("address", outcome("address", "fail")) != []


class TestAddress:

    def test_fail(self, classifier):
        warnings = classifier.classify("address", outcome("address", "fail"))
        assert warnings == [CheckWarning(Severity.FAIL, "Address count less than 2")]
        assert warnings[0].icon == "cross"

    def test_low_quality(self, classifier):
        warnings = classifier.classify("address", outcome("address", "alert", {"quality": 79}))
        assert messages(warnings) == [(Severity.WARNING, "Address quality not sufficient")]

    def test_quality_threshold_inclusive(self, classifier):
        assert classifier.classify("address", outcome("address", "alert", {"quality": 80})) == []

    def test_fail_and_low_quality(self, classifier):
        warnings = classifier.classify("address", outcome("address", "fail", {"quality": 40}))
        assert messages(warnings) == [
            (Severity.FAIL, "Address count less than 2"),
            (Severity.WARNING, "Address quality not sufficient"),
        ]

    def test_non_numeric_quality_is_no_signal(self, classifier):
        assert classifier.classify("address", outcome("address", "alert", {"quality": "low"})) == []


class TestFacialSimilarity:

    def test_poor_match(self, classifier):
        warnings = classifier.classify("facial_similarity", outcome("facial_similarity", "alert", {"comparison": "poor_match"}))
        assert messages(warnings) == [(Severity.INFO, "Facial similarity only 60%")]

    def test_other_mismatch(self, classifier):
        warnings = classifier.classify("facial_similarity", outcome("facial_similarity", "alert", {"comparison": "fair_match"}))
        assert messages(warnings) == [(Severity.INFO, "Facial similarity only 80%")]

    def test_good_match(self, classifier):
        assert classifier.classify("facial_similarity", outcome("facial_similarity", "alert", {"comparison": "good_match"})) == []

    def test_no_comparison(self, classifier):
        assert classifier.classify("facial_similarity", outcome("facial_similarity", "fail")) == []


class TestDocument:

    def test_integrity_failed(self, classifier):
        warnings = classifier.classify("document", outcome("document", "fail", {"integrity": "failed"}))
        assert messages(warnings) == [(Severity.FAIL, "Document integrity failed")]

    def test_integrity_passed(self, classifier):
        assert classifier.classify("document", outcome("document", "alert", {"integrity": "passed"})) == []


class TestIdentity:

    def test_electronic_id_without_nfc(self, classifier):
        warnings = classifier.classify(
            "identity", outcome("identity", "alert", {"nfc_used": False}), check_type="electronic-id"
        )
        assert messages(warnings) == [(Severity.INFO, "Enhanced Downgrade")]

    def test_other_type_without_nfc(self, classifier):
        assert classifier.classify(
            "identity", outcome("identity", "alert", {"nfc_used": False}), check_type="idv-lite"
        ) == []

    def test_nfc_flag_absent(self, classifier):
        assert classifier.classify("identity", outcome("identity", "alert"), check_type="electronic-id") == []


class TestScreeningHits:

    def test_pep_hits(self, classifier):
        warnings = classifier.classify("peps", outcome("peps", "alert", {"total_hits": 3}))
        assert warnings == [CheckWarning(Severity.WARNING, "3 PEP hits")]

    def test_sanctions_hits(self, classifier):
        warnings = classifier.classify("sanctions", outcome("sanctions", "alert", {"total_hits": 1}))
        assert messages(warnings) == [(Severity.WARNING, "1 Sanctions hits")]

    def test_zero_hits(self, classifier):
        assert classifier.classify("peps", outcome("peps", "alert", {"total_hits": 0})) == []

    def test_missing_hits(self, classifier):
        assert classifier.classify("sanctions", outcome("sanctions", "fail")) == []


class TestDefaultRule:
    """Unrecognized task types."""

    def test_alert(self, classifier):
        warnings = classifier.classify("mortality", outcome("mortality", "alert"))
        assert messages(warnings) == [(Severity.WARNING, "mortality alert")]

    def test_fail(self, classifier):
        warnings = classifier.classify("bank", outcome("bank", "fail"))
        assert messages(warnings) == [(Severity.FAIL, "bank failed")]

    def test_clear(self, classifier):
        assert classifier.classify("mortality", outcome("mortality", "clear")) == []


class TestClearNeverWarns:
    """Clear results stay silent even with anomalous data."""

    @pytest.mark.parametrize("task_type,data", [
        ("address", {"quality": 10}),
        ("facial_similarity", {"comparison": "poor_match"}),
        ("document", {"integrity": "failed"}),
        ("identity", {"nfc_used": False}),
        ("peps", {"total_hits": 5}),
        ("sanctions", {"total_hits": 2}),
    ])
    def test_clear_is_silent(self, classifier, task_type, data):
        assert classifier.classify(task_type, outcome(task_type, "clear", data), check_type="electronic-id") == []
