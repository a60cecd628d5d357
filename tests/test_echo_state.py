#!/usr/bin/env python3
"""Tests for EchoState echo suppression and change detection."""
from superclip.echo_state import EchoState


def test_initial_state(echo_state: EchoState) -> None:
    """Test both hashes start as None."""
    assert echo_state.last_written_hash is None
    assert echo_state.last_seen_hash is None


def test_first_sample_is_a_change(echo_state: EchoState) -> None:
    """Test the first sampled value is never reported as unchanged."""
    assert echo_state.is_unchanged("h1") is False
    assert echo_state.last_seen_hash == "h1"


def test_repeated_sample_is_unchanged(echo_state: EchoState) -> None:
    """Test sampling the same value twice reports no change."""
    echo_state.is_unchanged("h1")
    assert echo_state.is_unchanged("h1") is True
    assert echo_state.is_unchanged("h2") is False


def test_consume_echo_matches_written_value_once(echo_state: EchoState) -> None:
    """Test the daemon's own write is recognized exactly once."""
    echo_state.record_written("h1")
    assert echo_state.consume_echo("h1") is True
    assert echo_state.last_written_hash is None
    assert echo_state.consume_echo("h1") is False


def test_consumed_echo_counts_as_seen(echo_state: EchoState) -> None:
    """Test an echo becomes the last sample, so the next poll is unchanged."""
    echo_state.record_written("h1")
    echo_state.consume_echo("h1")
    assert echo_state.is_unchanged("h1") is True


def test_previous_sample_keeps_the_record(echo_state: EchoState) -> None:
    """Test re-reading the value from before the write keeps the record."""
    echo_state.is_unchanged("h0")
    echo_state.record_written("h1")
    assert echo_state.consume_echo("h0") is False
    assert echo_state.last_written_hash == "h1"


def test_new_value_drops_the_record(echo_state: EchoState) -> None:
    """Test a value other than the write and the last sample clears the record."""
    echo_state.is_unchanged("h0")
    echo_state.record_written("h1")
    assert echo_state.consume_echo("h2") is False
    assert echo_state.last_written_hash is None
    assert echo_state.consume_echo("h1") is False


def test_record_seen_sets_baseline(echo_state: EchoState) -> None:
    """Test a recorded baseline makes the same sample unchanged."""
    echo_state.record_seen("h1")
    assert echo_state.is_unchanged("h1") is True


def test_clear_written(echo_state: EchoState) -> None:
    """Test clear_written forgets a failed write."""
    echo_state.record_written("h1")
    echo_state.clear_written()
    assert echo_state.consume_echo("h1") is False


def test_clear_resets_everything(echo_state: EchoState) -> None:
    """Test clear resets both hashes."""
    echo_state.record_written("h1")
    echo_state.is_unchanged("h2")
    echo_state.clear()
    assert echo_state.last_written_hash is None
    assert echo_state.last_seen_hash is None


def test_lock_is_not_a_field() -> None:
    """Test the internal lock does not take part in init or equality."""
    assert EchoState("a", "b") == EchoState("a", "b")
