"""Tests for the detection orchestrator."""

import logging
from unittest.mock import patch

import pytest

from nahw.services.constructions import (
    CONSTRUCTION_TYPES,
    FIL_FAIL,
    HARF_NASB_ISMUHA,
    IDAFA,
    JAR_MAJRUR,
    group_by_type,
)
from nahw.services.detection import (
    DETECTORS,
    DetectionService,
    VerseContext,
    build_detection_service,
    detect_all,
)
from nahw.services.segments import Segment, SegmentSequence


def _seg(n, text, morphology, **kw):
    return Segment(id=f"16-90-{n + 1}-1", text=text, morphology=morphology, **kw)


# إِنَّ ٱللَّهَ يَأْمُرُ بِٱلْعَدْلِ
INNA_ALLAH = SegmentSequence([
    _seg(0, "إِنَّ", "particle", grammatical_role="accusative_particle"),
    _seg(1, "ٱللَّهَ", "noun", case="accusative"),
    _seg(2, "يَأْمُرُ", "verb", tense="imperfect"),
    _seg(3, "بِ", "particle", position_type="prefix", grammatical_role="preposition"),
    _seg(4, "ٱلْعَدْلِ", "noun", case="genitive"),
])

# قَالَ مُوسَىٰ لِقَوْمِهِ
QALA_MUSA = SegmentSequence([
    _seg(0, "قَالَ", "verb", tense="perfect"),
    _seg(1, "مُوسَىٰ", "noun", case="nominative"),
    _seg(2, "لِ", "particle", position_type="prefix", grammatical_role="preposition"),
    _seg(3, "قَوْمِهِ", "noun", case="genitive"),
])

VERSES = [INNA_ALLAH, QALA_MUSA]


class TestDetectAll:
    def test_results_in_fixed_type_order(self):
        result = detect_all(INNA_ALLAH)
        assert [c.type for c in result] == [IDAFA, JAR_MAJRUR, HARF_NASB_ISMUHA]

    def test_every_type_found(self):
        grouped = group_by_type(detect_all(QALA_MUSA))
        assert [c.spans for c in grouped[FIL_FAIL]] == [(0, 1)]
        assert [c.spans for c in grouped[JAR_MAJRUR]] == [(2, 3)]
        assert grouped[HARF_NASB_ISMUHA] == []

    def test_empty_sequence(self):
        assert detect_all([]) == []

    @pytest.mark.parametrize("verse", VERSES)
    def test_merge_is_concatenation_of_detectors(self, verse):
        expected = []
        for t in CONSTRUCTION_TYPES:
            expected.extend(DETECTORS[t](verse))
        assert detect_all(verse) == expected

    @pytest.mark.parametrize("verse", VERSES)
    def test_deterministic(self, verse):
        first, second = detect_all(verse), detect_all(verse)
        assert first == second
        assert [c.id for c in first] == [c.id for c in second]

    @pytest.mark.parametrize("verse", VERSES)
    def test_arity_and_range(self, verse):
        for c in detect_all(verse):
            assert len(c.spans) == 2
            assert all(0 <= i < len(verse) for i in c.spans)

    @pytest.mark.parametrize("verse", VERSES)
    def test_ids_unique(self, verse):
        ids = [c.id for c in detect_all(verse)]
        assert len(ids) == len(set(ids))


class TestDetectionService:
    def test_requested_order_does_not_matter(self):
        service = DetectionService()
        forward = service.detect_types(INNA_ALLAH, CONSTRUCTION_TYPES)
        backward = service.detect_types(INNA_ALLAH, list(reversed(CONSTRUCTION_TYPES)))
        assert forward == backward

    def test_selective_detection(self):
        service = DetectionService()
        result = service.detect_types(INNA_ALLAH, [HARF_NASB_ISMUHA])
        assert [c.type for c in result] == [HARF_NASB_ISMUHA]
        assert result == DETECTORS[HARF_NASB_ISMUHA](INNA_ALLAH)

    def test_no_types_requested(self):
        assert DetectionService().detect_types(INNA_ALLAH, []) == []

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown construction types"):
            DetectionService().detect_types(INNA_ALLAH, [IDAFA, "mubtada-khabar"])

    @pytest.mark.parametrize("verse", VERSES)
    def test_parallel_matches_sequential(self, verse):
        sequential = DetectionService().detect_all(verse)
        parallel = DetectionService(parallel=True, max_workers=4).detect_all(verse)
        assert parallel == sequential

    def test_accepts_plain_list(self):
        assert DetectionService().detect_all(list(QALA_MUSA)) == detect_all(QALA_MUSA)

    def test_context_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="nahw.services.detection"):
            DetectionService().detect_all(QALA_MUSA, context=VerseContext(7, 104))
        assert "7:104" in caplog.text

    def test_context_label_without_ids(self):
        assert VerseContext().label() == "unknown verse"


def test_build_detection_service_from_settings():
    with patch("nahw.config.settings") as mock_settings:
        mock_settings.parallel_detection = True
        mock_settings.detection_workers = 2
        service = build_detection_service()
    assert service.parallel is True
    assert service.max_workers == 2
