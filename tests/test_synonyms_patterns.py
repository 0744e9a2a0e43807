"""
Tests for query normalization helpers.

Covers synonym rewriting, particle stripping, the model-code heuristic
and the step-key delimiter check.
"""

import pytest

from config.patterns import has_step_delimiter, looks_like_model_name, strip_particles
from config.synonyms import SYNONYMS, normalize


class TestNormalize:
    """Synonym rewriting."""

    def test_contract_synonym(self):
        assert normalize("패널티 얼마에요") == "해약금 얼마에요"

    def test_lowercases_input(self):
        assert normalize("KB카드 혜택") == "국민카드 혜택"

    def test_typo_correction(self):
        assert normalize("롯데카드 혜액") == "롯데카드 혜택"

    def test_care_abbreviation(self):
        assert normalize("방관 주기") == "방문관리 주기"

    def test_longest_phrase_wins(self):
        # "한번에 내" is rewritten before the shorter "한번에" can match
        result = normalize("한번에 내고 싶어요")
        assert result.startswith("일시불")
        assert "한번에" not in result

    def test_unmapped_text_unchanged(self):
        assert normalize("해약금") == "해약금"

    def test_every_canonical_term_is_non_empty(self):
        assert all(value for value in SYNONYMS.values())


class TestStripParticles:
    """Particle suffix removal."""

    def test_topic_marker_and_ending(self):
        assert strip_particles("해약금은 얼마인가요") == ["해약금", "얼마"]

    def test_object_marker(self):
        assert strip_particles("명의변경을") == ["명의변경"]

    def test_plain_tokens_kept(self):
        assert strip_particles("결합할인 해지") == ["결합할인", "해지"]

    def test_particle_only_token_dropped(self):
        assert strip_particles("요") == []

    def test_empty(self):
        assert strip_particles("") == []


class TestLooksLikeModelName:
    """Model-code heuristic."""

    @pytest.mark.parametrize("text", ["A720WA", "a720wa", "OLED55B4KW", "A720WA.AKOR", "WD523ACB"])
    def test_model_codes(self, text):
        assert looks_like_model_name(text)

    @pytest.mark.parametrize("text", ["해약금", "ABC", "12345", "a7", ""])
    def test_not_model_codes(self, text):
        assert not looks_like_model_name(text)


class TestStepDelimiter:

    def test_detects_delimiter(self):
        assert has_step_delimiter("A720WA::방문관리")

    def test_single_colon_is_not_delimiter(self):
        assert not has_step_delimiter("시간: 9시")
