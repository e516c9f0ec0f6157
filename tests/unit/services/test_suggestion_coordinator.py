"""Tests for the SuggestionCoordinator.

Covers merging of name and email results, skipping of applied records,
cross-record uniqueness, statistics, ordering and filtering."""

import pytest

from reconciler.core.models import ConfidenceLevel, RawIdentifier, SuggestionType
from reconciler.services.assignment_tracking import InMemoryAssignmentTracker
from reconciler.services.suggestion_coordinator import SuggestionCoordinator


def records(*texts, start=100):
    return [RawIdentifier(record_id=start + i, text=text) for i, text in enumerate(texts)]


class TestGenerateSuggestions:
    """Test one coordinator pass over a batch"""

    @pytest.fixture
    def coordinator(self, small_directory, settings):
        return SuggestionCoordinator(small_directory, settings=settings)

    def test_name_and_email_suggestions(self, coordinator):
        batch = records("Rossi, Mario", "giulia.bianchi@x.com", "Sconosciuto Utente")

        suggestions = coordinator.generate_suggestions(batch)

        assert set(suggestions) == {100, 101}

        by_name = suggestions[100]
        assert by_name.person.id == 1
        assert by_name.type is SuggestionType.NAME
        assert by_name.priority == 1
        assert by_name.confidence is ConfidenceLevel.HIGH
        assert by_name.metadata["phase"] == 1
        assert by_name.metadata["method"] == "phased_match"
        assert by_name.metadata["name_candidate"] == "comma_format"

        by_email = suggestions[101]
        assert by_email.person.id == 2
        assert by_email.type is SuggestionType.EMAIL
        assert by_email.priority == 2
        assert by_email.confidence is ConfidenceLevel.MEDIUM
        assert by_email.metadata["method"] == "email_pattern_match"

    def test_organizational_noise_is_ignored(self, coordinator):
        suggestions = coordinator.generate_suggestions(records("Dott. Mario Rossi - Comune di Milano"))

        assert suggestions[100].person.id == 1

    def test_initials_without_period(self, mario_rossi, settings):
        coordinator = SuggestionCoordinator([mario_rossi], settings=settings)

        suggestions = coordinator.generate_suggestions(records("Rossi M", "Mario R", "M Rossi"))

        assert set(suggestions) == {100, 101, 102}
        assert all(s.person == mario_rossi for s in suggestions.values())
        assert suggestions[100].metadata["phase"] == 4
        assert "name_candidate" not in suggestions[100].metadata

    def test_single_word_identifier_has_no_suggestion(self, coordinator):
        assert coordinator.generate_suggestions(records("Mario", "", "   ")) == {}

    def test_applied_records_are_skipped(self, small_directory, settings):
        tracker = InMemoryAssignmentTracker([100])
        coordinator = SuggestionCoordinator(small_directory, tracker, settings)

        suggestions = coordinator.generate_suggestions(records("Mario Rossi", "luca.verdi@x.com"))

        assert set(suggestions) == {101}

    def test_same_email_on_two_records(self, coordinator):
        suggestions = coordinator.generate_suggestions(records("mario.rossi@x.com", "mario.rossi@x.com"))

        assert set(suggestions) == {100}

    def test_person_suggested_once_by_email(self, coordinator):
        suggestions = coordinator.generate_suggestions(records("mario.rossi@x.com", "rossi.mario@x.com"))

        assert set(suggestions) == {100}

    def test_name_matches_may_share_a_person(self, coordinator):
        suggestions = coordinator.generate_suggestions(records("Mario Rossi", "Rossi Mario"))

        assert suggestions[100].person.id == suggestions[101].person.id == 1

    def test_name_and_email_may_share_a_person(self, coordinator):
        suggestions = coordinator.generate_suggestions(records("Mario Rossi", "mario.rossi@x.com"))

        assert suggestions[100].type is SuggestionType.NAME
        assert suggestions[101].type is SuggestionType.EMAIL

    def test_ambiguous_email_yields_nothing(self, rossi_family, settings):
        coordinator = SuggestionCoordinator(rossi_family, settings=settings)

        assert coordinator.generate_suggestions(records("m.rossi@x.com")) == {}

    def test_email_cache_does_not_survive_batches(self, coordinator):
        first = coordinator.generate_suggestions(records("mario.rossi@x.com"))
        second = coordinator.generate_suggestions(records("rossi.mario@x.com", start=200))

        assert first[100].person.id == second[200].person.id == 1


class TestPresentationHelpers:
    """Test statistics, ordering and filtering"""

    @pytest.fixture
    def batch(self):
        return records("segreteria@x.com", "luca.verdi@x.com", "Nessuno Qui", "Rossi, Mario", "Giulia Bianchi")

    @pytest.fixture
    def suggestions(self, small_directory, settings, batch):
        return SuggestionCoordinator(small_directory, settings=settings).generate_suggestions(batch)

    def test_statistics(self, suggestions):
        stats = SuggestionCoordinator.statistics(suggestions)

        assert stats.as_dict() == {
            "total": 3,
            "name_based": 2,
            "email_based": 1,
            "high_confidence": 2,
            "medium_confidence": 1,
        }

    def test_statistics_of_empty_map(self):
        assert SuggestionCoordinator.statistics({}).total == 0

    def test_sort_by_type(self, batch, suggestions):
        ordered = SuggestionCoordinator.sort_by_type(batch, suggestions)

        assert [r.record_id for r in ordered] == [103, 104, 101, 100, 102]

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            ("all", [100, 101, 102, 103, 104]),
            ("name", [103, 104]),
            ("email", [101]),
            ("none", [100, 102]),
            ("bogus", [100, 101, 102, 103, 104]),
        ],
    )
    def test_filter_by_type(self, batch, suggestions, kind, expected):
        filtered = SuggestionCoordinator.filter_by_type(batch, suggestions, kind)

        assert [r.record_id for r in filtered] == expected


class TestInMemoryAssignmentTracker:
    def test_mark_applied(self):
        tracker = InMemoryAssignmentTracker()
        assert not tracker.was_suggestion_applied(5)

        tracker.mark_applied(5)

        assert tracker.was_suggestion_applied(5)
        assert len(tracker) == 1
