"""Tests for the email local-part matcher.

Covers acceptance, every rejection rule, the run-scoped cache and the
threshold monotonicity guarantee."""

import pytest

from reconciler.core.models import DirectoryPerson
from reconciler.resolution.email_matcher import EmailMatchSession, EmailPatternMatcher
from reconciler.settings import ReconcilerSettings


def make_settings(**overrides):
    return ReconcilerSettings(_env_file=None, **overrides)


class TestEmailPatternMatcher:
    """Test single-identifier email matching"""

    @pytest.fixture
    def matcher(self, small_directory, settings):
        return EmailPatternMatcher(small_directory, settings)

    def test_full_name_local_part_is_accepted(self, matcher, mario_rossi):
        result = matcher.find_best_match("mario.rossi@x.com")

        assert result.is_resolved
        assert result.person == mario_rossi
        assert result.method == "email_pattern_match"
        assert result.metadata["score"] == pytest.approx(1.0)
        assert result.confidence == pytest.approx(1.0)

    def test_lastname_first_local_part(self, matcher):
        assert matcher.find_best_match("bianchi_giulia@comune.it").person.id == 2

    def test_separator_free_local_part(self, matcher):
        assert matcher.find_best_match("lucaverdi@x.com").person.id == 3

    def test_initial_local_part_for_unique_person(self, mario_rossi, settings):
        matcher = EmailPatternMatcher([mario_rossi], settings)

        result = matcher.find_best_match("m.rossi@x.com")

        assert result.person == mario_rossi
        assert result.confidence == pytest.approx(0.9)

    def test_close_candidates_are_rejected(self, rossi_family, settings):
        matcher = EmailPatternMatcher(rossi_family, settings)

        result = matcher.find_best_match("m.rossi@x.com")

        assert not result.is_resolved
        assert result.reason == "score_gap"

    def test_shared_ambiguous_pattern_is_rejected(self, rossi_family):
        matcher = EmailPatternMatcher(rossi_family, make_settings(email_score_gap=0.0))

        result = matcher.find_best_match("m.rossi@x.com")

        assert result.reason == "duplicate_pattern"
        assert result.metadata["pattern"] == "n.cognome"

    def test_lone_low_confidence_hit_is_rejected(self, mario_rossi):
        matcher = EmailPatternMatcher([mario_rossi], make_settings(email_similarity_threshold=0.7))

        result = matcher.find_best_match("mrosi@x.com")

        assert result.reason == "low_confidence"

    def test_weak_match_is_below_threshold(self, mario_rossi, settings):
        matcher = EmailPatternMatcher([mario_rossi], settings)

        result = matcher.find_best_match("mrosi@x.com")

        assert result.reason == "below_threshold"
        assert result.metadata["best_score"] == pytest.approx(0.75)

    def test_unrelated_local_part(self, matcher):
        assert matcher.find_best_match("segreteria@x.com").reason == "no_candidates"

    @pytest.mark.parametrize(
        ("identifier", "reason"),
        [
            ("mario.rossi", "malformed_email"),
            ("a@b@x.com", "malformed_email"),
            ("@x.com", "empty_local_part"),
        ],
    )
    def test_malformed_identifiers(self, matcher, identifier, reason):
        assert matcher.find_best_match(identifier).reason == reason

    def test_empty_directory(self, settings):
        matcher = EmailPatternMatcher([], settings)

        assert matcher.find_best_match("mario.rossi@x.com").reason == "no_candidates"


class TestEmailMatchSession:
    """Test the run-scoped cache and cross-identifier uniqueness"""

    def test_repeated_identifier_uses_cache(self, small_directory, settings):
        session = EmailMatchSession()
        matcher = EmailPatternMatcher(small_directory, settings, session)

        first = matcher.find_best_match("mario.rossi@x.com")
        second = matcher.find_best_match(" mario.rossi@x.com ")

        assert second is first
        assert session.owner_of(1) == "mario.rossi@x.com"

    def test_person_is_given_to_one_identifier_only(self, small_directory, settings):
        matcher = EmailPatternMatcher(small_directory, settings, EmailMatchSession())

        first = matcher.find_best_match("mario.rossi@x.com")
        second = matcher.find_best_match("rossi.mario@x.com")

        assert first.person.id == 1
        assert not second.is_resolved
        assert second.reason == "already_assigned"
        assert second.metadata["assigned_to"] == "mario.rossi@x.com"

    def test_fresh_session_forgets_owners(self, small_directory, settings):
        EmailPatternMatcher(small_directory, settings).find_best_match("mario.rossi@x.com")

        result = EmailPatternMatcher(small_directory, settings).find_best_match("rossi.mario@x.com")

        assert result.person.id == 1


class TestThresholdMonotonicity:
    """Raising the threshold can only remove suggestions"""

    IDENTIFIERS = [
        "mario.rossi@x.com",
        "m.rossi@x.com",
        "mrosi@x.com",
        "marco.rossi@x.com",
        "rossim@x.com",
        "giulia.b@x.com",
        "gbianchi@x.com",
        "verdi@x.com",
        "luca@x.com",
        "l.verdi@x.com",
    ]

    @pytest.fixture
    def directory(self, small_directory):
        return [*small_directory, DirectoryPerson(id=4, firstname="Marco", lastname="Rossi")]

    def resolved(self, directory, threshold):
        matcher = EmailPatternMatcher(directory, make_settings(email_similarity_threshold=threshold))
        results = {}
        for identifier in self.IDENTIFIERS:
            result = matcher.find_best_match(identifier)
            if result.is_resolved:
                results[identifier] = result.person.id
        return results

    def test_suggestions_shrink_as_threshold_grows(self, directory):
        thresholds = [0.7, 0.75, 0.8, 0.85, 0.9, 0.95, 1.0]
        outcomes = [self.resolved(directory, t) for t in thresholds]

        for lower, higher in zip(outcomes, outcomes[1:], strict=False):
            assert higher.items() <= lower.items()


class TestPatternDetails:
    def test_breakdown_for_one_person(self, mario_rossi, settings):
        matcher = EmailPatternMatcher([mario_rossi], settings)

        details = matcher.pattern_details("mario.rossi", mario_rossi)

        # original and inverted readings, 17 patterns each
        assert len(details) == 34
        hit = next(d for d in details if d["pattern_name"] == "nome.cognome" and d["firstname"] == "mario")
        assert hit["pattern_value"] == "mariorossi"
        assert hit["similarity"] == 1.0
        assert hit["would_suggest"] is True
        assert hit["ambiguity_check"] is False

    def test_score_candidates_sorted_by_tier(self, rossi_family, settings):
        matcher = EmailPatternMatcher(rossi_family, settings)

        candidates = matcher.score_candidates("m.rossi")

        keys = [(c.priority, -c.score) for c in candidates]
        assert keys == sorted(keys)
        assert {c.person.id for c in candidates} == {1, 2}
