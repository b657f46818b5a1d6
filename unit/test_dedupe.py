"""Test duplicate removal and ordering of raw actions."""

from timeline.normalizers import (
    chronological,
    comparable_text,
    deduplicate_actions,
    format_acted_at,
    is_duplicate,
    strip_links,
)
from unit.fixtures import SourceSystem
from unit.fixtures.action_factory import ActionFactory

LOC = SourceSystem.LIBRARY_OF_CONGRESS
PASSED = "Passed Senate without amendment by Unanimous Consent. (consideration: CR S1234)"
LOC_PASSED = "Passed/agreed to in Senate: Passed Senate without amendment by Unanimous Consent."


class TestDuplicateRule:
    """When an LOC action repeats its predecessor."""

    def test_loc_copy_with_prefix_is_dropped(self, action_factory: ActionFactory):
        """LOC text with a prefix and no references still matches."""
        prev = action_factory.raw(PASSED, source=SourceSystem.SENATE)
        item = action_factory.raw(LOC_PASSED, source=LOC)
        assert is_duplicate(item, prev)

    def test_non_loc_copy_is_kept(self, action_factory):
        """Only Library of Congress entries are treated as copies."""
        prev = action_factory.raw(PASSED, source=SourceSystem.SENATE)
        item = action_factory.raw(LOC_PASSED, source=SourceSystem.HOUSE_FLOOR)
        assert not is_duplicate(item, prev)

    def test_different_date_is_kept(self, action_factory):
        """Same text on another day is a different action."""
        prev = action_factory.raw(PASSED, acted_on="2019-03-07")
        item = action_factory.raw(LOC_PASSED, acted_on="2019-03-08", source=LOC)
        assert not is_duplicate(item, prev)

    def test_time_mismatch_is_kept(self, action_factory):
        """Both times present and different."""
        prev = action_factory.raw(PASSED, acted_at_time="10:00:00")
        item = action_factory.raw(LOC_PASSED, acted_at_time="11:00:00", source=LOC)
        assert not is_duplicate(item, prev)

    def test_missing_time_matches(self, action_factory):
        """A missing time on either side does not block the match."""
        prev = action_factory.raw(PASSED, acted_at_time="10:00:00")
        item = action_factory.raw(LOC_PASSED, source=LOC)
        assert is_duplicate(item, prev)

    def test_text_must_end_with_previous(self, action_factory):
        """Unrelated LOC text is kept."""
        prev = action_factory.raw(PASSED)
        item = action_factory.raw("Message on Senate action sent to the House.", source=LOC)
        assert not is_duplicate(item, prev)

    def test_first_action_is_never_a_duplicate(self, action_factory):
        """Nothing precedes the first action."""
        assert not is_duplicate(action_factory.raw(PASSED, source=LOC), None)


class TestDeduplicate:
    """Deduplication across a whole list."""

    def test_drops_empty_and_duplicate(self, action_factory):
        """Empty texts are skipped and never used for comparison."""
        actions = [
            action_factory.raw(PASSED, source=SourceSystem.SENATE),
            action_factory.raw("", source=SourceSystem.SENATE),
            action_factory.raw(LOC_PASSED, source=LOC),
        ]
        assert deduplicate_actions(actions) == [actions[0]]

    def test_compares_with_previous_source_action_not_previous_kept(self, action_factory):
        """A dropped action still serves as the next comparison point."""
        actions = [
            action_factory.raw("Motion to reconsider laid on the table.", source=SourceSystem.HOUSE_FLOOR),
            action_factory.raw("Floor: Motion to reconsider laid on the table.", source=LOC),
            action_factory.raw("Motion to reconsider laid on the table.", source=LOC),
        ]
        # The third matches the kept first action but not the dropped second.
        assert deduplicate_actions(actions) == [actions[0], actions[2]]

    def test_chronological_reverses(self, action_factory):
        """Document order is newest first."""
        actions = action_factory.newest_first(["first", "second", "third"])
        assert [a.text for a in chronological(actions)] == ["first", "second", "third"]


class TestTextNormalization:
    """Text helpers used before comparison and classification."""

    def test_strip_links(self):
        """Anchor tags are removed, their text kept."""
        text = 'Referred to the <a href="https://example.gov/c">Committee on Rules</a>.'
        assert strip_links(text) == "Referred to the Committee on Rules."

    def test_comparable_text(self):
        """Whitespace and trailing references are ignored."""
        assert comparable_text("Passed  Senate. (CR S12)") == "PassedSenate."


class TestTimestamps:
    """Formatting of action dates."""

    def test_date_only(self):
        """A date alone becomes midnight UTC."""
        assert format_acted_at("2019-03-08", None) == "2019-03-08T00:00:00.000Z"

    def test_date_and_time(self):
        """Times are kept to the second."""
        assert format_acted_at("2019-03-08", "14:31:05") == "2019-03-08T14:31:05.000Z"

    def test_malformed_date_passes_through(self):
        """Bad dates are not validated or corrected."""
        assert format_acted_at("2019-13-45", None) == "2019-13-45"
        assert format_acted_at(None, None) == ""
