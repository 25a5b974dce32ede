"""Tests for :mod:`visionary.services.prompts`."""

from __future__ import annotations

import random
import uuid

import pytest

from visionary.services.prompts import SAMPLE_PROMPTS, STATUS_MESSAGES, new_image_id, pick_random_prompt


def test_pick_random_prompt_returns_a_sample() -> None:
    rng = random.Random(0)

    picks = {pick_random_prompt(rng) for _ in range(200)}

    assert picks <= set(SAMPLE_PROMPTS)
    assert len(picks) == len(SAMPLE_PROMPTS)


def test_pick_random_prompt_accepts_custom_samples() -> None:
    assert pick_random_prompt(random.Random(3), ["only"]) == "only"


def test_pick_random_prompt_rejects_empty_samples() -> None:
    with pytest.raises(ValueError):
        pick_random_prompt(random.Random(), [])


def test_seeded_ids_are_repeatable_and_unique() -> None:
    first = [new_image_id(random.Random(42)) for _ in range(2)]
    rng = random.Random(42)
    batch = [new_image_id(rng) for _ in range(100)]

    assert first[0] == first[1] == batch[0]
    assert len(set(batch)) == 100
    assert uuid.UUID(batch[0]).version == 4


def test_default_ids_are_uuid7() -> None:
    ids = [new_image_id() for _ in range(10)]

    assert len(set(ids)) == 10
    assert all(uuid.UUID(value).version == 7 for value in ids)


def test_status_messages_rotate_through_more_than_one_entry() -> None:
    assert len(STATUS_MESSAGES) >= 2
    assert STATUS_MESSAGES[0] == "Analyzing your vision..."
