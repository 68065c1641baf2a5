"""Tests for assessment aggregation."""

import pytest

from conftest import make_check, outcome

from app.services.checks.aggregator import assess_safe_harbour, derive_outcome, monitoring_enabled
from app.services.checks.models import (
    AssessmentOutcome,
    CheckStatus,
    CheckWarning,
    ExplicitAssessment,
    ProviderTask,
    SafeHarbour,
    Severity,
)


CLEAN_ENHANCED = [
    outcome("identity"),
    outcome("nfc", status="closed"),
    outcome("address"),
    outcome("peps"),
]


class TestOutcome:
    """Explicit assessment wins, otherwise derived from results."""

    def test_all_clear(self):
        check = make_check(outcomes=[outcome("document"), outcome("peps")])
        assert derive_outcome(check) == AssessmentOutcome.CLEAR

    def test_no_outcomes_is_clear(self):
        assert derive_outcome(make_check()) == AssessmentOutcome.CLEAR

    @pytest.mark.parametrize("result", ["alert", "fail"])
    def test_any_non_clear_is_consider(self, result):
        check = make_check(outcomes=[outcome("document"), outcome("mortality", result)])
        assert derive_outcome(check) == AssessmentOutcome.CONSIDER

    def test_explicit_clear_overrides_alerts(self, aggregator):
        check = make_check(
            outcomes=[outcome("peps", "alert", {"total_hits": 4})],
            explicit_assessment=ExplicitAssessment(outcome=AssessmentOutcome.CLEAR),
        )
        summary = aggregator.aggregate(check)
        assert summary.outcome == AssessmentOutcome.CLEAR
        # warnings are still derived from the outcomes
        assert [w.message for w in summary.warnings] == ["4 PEP hits"]

    def test_explicit_consider_overrides_clear(self):
        check = make_check(
            outcomes=[outcome("document")],
            explicit_assessment=ExplicitAssessment(outcome=AssessmentOutcome.CONSIDER, reasons=("manual",)),
        )
        assert derive_outcome(check) == AssessmentOutcome.CONSIDER


class TestWarnings:

    def test_electronic_id_scenario(self, aggregator):
        check = make_check(
            type="electronic-id",
            outcomes=[outcome("document"), outcome("peps", "alert", {"total_hits": 2})],
        )
        summary = aggregator.aggregate(check)

        assert summary.outcome == AssessmentOutcome.CONSIDER
        assert summary.warnings == [CheckWarning(Severity.WARNING, "2 PEP hits")]

    def test_recorded_order_kept(self, aggregator):
        check = make_check(outcomes=[
            outcome("peps", "alert", {"total_hits": 1}),
            outcome("mortality", "alert"),
            outcome("address", "fail"),
        ])
        warnings = aggregator.aggregate(check).warnings
        # not re-sorted by severity
        assert [w.message for w in warnings] == ["1 PEP hits", "mortality alert", "Address count less than 2"]

    def test_open_check_has_no_warnings(self, aggregator):
        check = make_check(status=CheckStatus.PROCESSING, outcomes=[outcome("address", "fail")])
        summary = aggregator.aggregate(check)
        assert summary.warnings == []
        assert summary.outcome == AssessmentOutcome.CONSIDER

    def test_nfc_unobtainable_downgrade(self, aggregator):
        check = make_check(outcomes=[outcome("identity"), outcome("nfc", "alert", status="unobtainable")])
        messages = [w.message for w in aggregator.aggregate(check).warnings]
        assert messages.count("Enhanced Downgrade") == 1

    def test_downgrade_not_duplicated(self, aggregator):
        check = make_check(outcomes=[
            outcome("identity", "alert", {"nfc_used": False}),
            outcome("nfc", "clear", status="unobtainable"),
        ])
        messages = [w.message for w in aggregator.aggregate(check).warnings]
        assert messages == ["Enhanced Downgrade"]

    def test_unknown_type_does_not_raise(self, aggregator):
        check = make_check(type="legacy", outcomes=[outcome("mortality", "fail")])
        summary = aggregator.aggregate(check)
        assert summary.label == "Verification Check"
        assert [w.message for w in summary.warnings] == ["mortality failed"]


class TestMonitoring:

    def test_monitored_pep_task(self):
        check = make_check(provider_tasks=(ProviderTask("report:peps", {"monitored": True}),))
        assert monitoring_enabled(check)

    def test_lite_screen_task(self):
        check = make_check(provider_tasks=(ProviderTask("report:screening:lite", {"monitored": True}),))
        assert monitoring_enabled(check)

    def test_unmonitored_pep_task(self):
        check = make_check(provider_tasks=(
            ProviderTask("report:peps", {"monitored": False}),
            ProviderTask("report:footprint", {"monitored": True}),
        ))
        assert not monitoring_enabled(check)

    def test_no_tasks(self, aggregator):
        assert aggregator.aggregate(make_check()).monitoring_enabled is False


class TestSafeHarbour:

    def test_clean_enhanced_check_is_compliant(self):
        safe_harbour = assess_safe_harbour(make_check(outcomes=CLEAN_ENHANCED))
        assert safe_harbour.is_compliant
        assert all(safe_harbour.criteria.values())

    def test_computation_ignores_type(self):
        assert assess_safe_harbour(make_check(type="kyb", outcomes=CLEAN_ENHANCED)).is_compliant

    def test_pep_alert_breaks_compliance(self):
        outcomes = CLEAN_ENHANCED[:-1] + [outcome("peps", "alert")]
        safe_harbour = assess_safe_harbour(make_check(outcomes=outcomes))
        assert not safe_harbour.is_compliant
        assert safe_harbour.criteria["peps_clear"] is False

    def test_no_nfc_not_compliant(self):
        assert not assess_safe_harbour(make_check(outcomes=[outcome("identity")])).is_compliant

    def test_skipped_proof_of_ownership(self):
        check = make_check(outcomes=CLEAN_ENHANCED, consider_reasons=("Skipped proof of ownership",))
        assert assess_safe_harbour(check).criteria["proof_of_ownership"] is False

    def test_badge_for_electronic_id(self, aggregator):
        summary = aggregator.aggregate(make_check(outcomes=CLEAN_ENHANCED))
        assert summary.safe_harbour_badge_visible
        assert summary.label == "Enhanced ID Check"
        assert summary.enhanced

    def test_badge_gated_by_type(self, aggregator):
        check = make_check(type="kyb", safe_harbour=SafeHarbour(is_compliant=True))
        summary = aggregator.aggregate(check)
        assert not summary.safe_harbour_badge_visible
        assert summary.label == "Know Your Business"

    def test_enhanced_only_for_electronic_id(self, aggregator):
        summary = aggregator.aggregate(make_check(type="kyb", outcomes=CLEAN_ENHANCED))
        assert summary.enhanced is False
        assert summary.label == "Know Your Business"
        assert assess_safe_harbour(make_check(type="kyb", outcomes=CLEAN_ENHANCED)).criteria["enhanced"]

    def test_supplied_designation_used(self, aggregator):
        check = make_check(outcomes=CLEAN_ENHANCED, safe_harbour=SafeHarbour(is_compliant=False))
        assert not aggregator.aggregate(check).safe_harbour_badge_visible

    def test_original_id_label(self, aggregator):
        check = make_check(outcomes=[outcome("nfc", status="unobtainable")])
        summary = aggregator.aggregate(check)
        assert summary.label == "Original ID Check"
        assert not summary.safe_harbour_badge_visible


class TestConsiderReasons:

    def test_check_reasons_preferred(self, aggregator):
        check = make_check(
            consider_reasons=("PEP hits",),
            explicit_assessment=ExplicitAssessment(AssessmentOutcome.CONSIDER, reasons=("other",)),
        )
        assert aggregator.aggregate(check).consider_reasons == ["PEP hits"]

    def test_falls_back_to_explicit_reasons(self, aggregator):
        check = make_check(explicit_assessment=ExplicitAssessment(AssessmentOutcome.CONSIDER, reasons=("manual review",)))
        assert aggregator.aggregate(check).consider_reasons == ["manual review"]
