"""Unit tests for EventEnvelope and EventEnvelopeBatch.

Tests that invariants are enforced at construction time.
"""

from datetime import datetime, timedelta, timezone

import pytest

from chronicle.interfaces.eventstore import (
    ConcurrencyConflictError,
    EventEnvelope,
    EventEnvelopeBatch,
    InvalidEnvelopeError,
)

# pylint: disable=magic-value-comparison


class TestEventEnvelope:
    """Unit tests for EventEnvelope invariants."""

    @staticmethod
    def test_event_id_not_26_char_raises_error(make_event):
        """event_id must be exactly 26 characters."""
        with pytest.raises(
            InvalidEnvelopeError, match="event_id must be a 26-character ULID"
        ):
            EventEnvelope(**make_event(event_id="short"))

    @pytest.mark.parametrize("bad_version", [-1, 0], ids=["negative", "zero"])
    @staticmethod
    def test_version_not_positive_raises_error(make_event, bad_version):
        """version <= 0 is rejected."""
        with pytest.raises(InvalidEnvelopeError, match="version must be >= 1"):
            EventEnvelope(**make_event(version=bad_version))

    @pytest.mark.parametrize("bad_global_seq", [-1, 0], ids=["negative", "zero"])
    @staticmethod
    def test_global_seq_not_positive_raises_error(make_event, bad_global_seq):
        """global_seq <= 0 is rejected."""
        with pytest.raises(InvalidEnvelopeError, match="global_seq must be >= 1"):
            EventEnvelope(**make_event(global_seq=bad_global_seq))

    @staticmethod
    def test_naive_recorded_at_raises_error(make_event):
        """recorded_at must carry a timezone."""
        with pytest.raises(InvalidEnvelopeError, match="recorded_at must be tz-aware"):
            EventEnvelope(**make_event(recorded_at=datetime.now()))

    @staticmethod
    def test_non_utc_recorded_at_raises_error(make_event):
        """recorded_at must be in UTC."""
        pst = timezone(timedelta(hours=-8))
        with pytest.raises(InvalidEnvelopeError, match="recorded_at must be UTC"):
            EventEnvelope(**make_event(recorded_at=datetime.now(pst)))

    @pytest.mark.parametrize(
        "field", ["stream_id", "stream_type", "event_type"]
    )
    @staticmethod
    def test_blank_identifiers_raise_error(make_event, field):
        """Blank stream_id, stream_type or event_type is rejected."""
        with pytest.raises(InvalidEnvelopeError, match="must be non-empty"):
            EventEnvelope(**make_event(**{field: "  "}))

    @staticmethod
    def test_insertable_row_excludes_store_fields(make_event):
        """Store-assigned columns are left out of the insert mapping."""
        row = make_event()
        envelope = EventEnvelope(
            **row, recorded_at=datetime.now(timezone.utc), global_seq=7
        )
        assert envelope.as_insertable_row() == row


class TestEventEnvelopeBatch:
    """Unit tests for EventEnvelopeBatch invariants."""

    @staticmethod
    def test_valid_batch_reports_resulting_count(make_envelope):
        """A contiguous batch after the expected count is accepted."""
        batch = EventEnvelopeBatch(
            stream_id="S1",
            expected_event_count=2,
            events=[make_envelope(version=3), make_envelope(version=4)],
        )
        assert batch.resulting_event_count == 4

    @staticmethod
    def test_empty_batch_allowed():
        """An empty batch only carries the count check."""
        batch = EventEnvelopeBatch(stream_id="S1", expected_event_count=5, events=[])
        assert batch.resulting_event_count == 5

    @staticmethod
    def test_negative_expected_count_rejected():
        """Counts cannot be negative."""
        with pytest.raises(InvalidEnvelopeError, match="expected_event_count"):
            EventEnvelopeBatch(stream_id="S1", expected_event_count=-1, events=[])

    @staticmethod
    def test_mixed_streams_rejected(make_envelope):
        """All events must target the batch's stream."""
        with pytest.raises(InvalidEnvelopeError, match="Mixed streams"):
            EventEnvelopeBatch(
                stream_id="S1",
                expected_event_count=0,
                events=[make_envelope(stream_id="S2")],
            )

    @staticmethod
    def test_persisted_events_rejected(make_event):
        """Events that already have a global_seq cannot be appended again."""
        with pytest.raises(InvalidEnvelopeError, match="global_seq must be None"):
            EventEnvelopeBatch(
                stream_id="S1",
                expected_event_count=0,
                events=[EventEnvelope(**make_event(global_seq=1))],
            )

    @staticmethod
    def test_duplicate_ids_in_batch_rejected(make_envelope):
        """event_id must be unique inside the batch."""
        event_id = "1" * 26
        with pytest.raises(InvalidEnvelopeError, match="Duplicate event_id"):
            EventEnvelopeBatch(
                stream_id="S1",
                expected_event_count=0,
                events=[
                    make_envelope(version=1, event_id=event_id),
                    make_envelope(version=2, event_id=event_id),
                ],
            )

    @pytest.mark.parametrize(
        "versions", [[2], [1, 3], [2, 1]], ids=["gap-at-start", "gap", "reversed"]
    )
    @staticmethod
    def test_versions_must_follow_expected_count(make_envelope, versions):
        """Versions must run contiguously from expected_event_count + 1."""
        with pytest.raises(InvalidEnvelopeError, match="start at 1"):
            EventEnvelopeBatch(
                stream_id="S1",
                expected_event_count=0,
                events=[make_envelope(version=v) for v in versions],
            )


def test_concurrency_conflict_error_details():
    """The conflict error names the stream and both counts."""
    error = ConcurrencyConflictError("user-1", 2, 3)
    assert (error.stream_id, error.expected_event_count, error.actual_event_count) == (
        "user-1",
        2,
        3,
    )
    assert str(error) == "Stream 'user-1': expected 2 committed events, found 3."
