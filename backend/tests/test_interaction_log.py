import json
from unittest.mock import patch

from nahw.services.answer_validator import GrammarQuestion, validate_simple
from nahw.services.constructions import DEFINITE, IDAFA, make_construction
from nahw.services.interaction_logger import log_interaction, log_validation
from nahw.services.segments import Segment, SegmentSequence


def test_log_interaction(tmp_path):
    with patch("nahw.services.interaction_logger.settings") as mock_settings:
        mock_settings.log_dir = tmp_path
        mock_settings.log_interactions = True
        log_interaction(
            event="validate_simple",
            construction_type="idafa",
            score=90.0,
            feedback_kind="close",
            question_id="19:2",
            session_id="abc123",
        )

    log_files = list(tmp_path.glob("interactions_*.jsonl"))
    assert len(log_files) == 1

    with open(log_files[0]) as f:
        lines = f.readlines()
    assert len(lines) == 1

    entry = json.loads(lines[0])
    assert entry["event"] == "validate_simple"
    assert entry["construction_type"] == "idafa"
    assert entry["score"] == 90.0
    assert entry["feedback_kind"] == "close"
    assert entry["session_id"] == "abc123"
    assert "ts" in entry


def test_log_multiple_interactions(tmp_path):
    with patch("nahw.services.interaction_logger.settings") as mock_settings:
        mock_settings.log_dir = tmp_path
        mock_settings.log_interactions = True
        log_interaction(event="validate_simple", score=100.0)
        log_interaction(event="validate_roles", score=60.0)
        log_interaction(event="validate_roles", score=0.0)

    log_files = list(tmp_path.glob("interactions_*.jsonl"))
    assert len(log_files) == 1

    with open(log_files[0]) as f:
        lines = f.readlines()
    assert len(lines) == 3
    assert [json.loads(line)["score"] for line in lines] == [100.0, 60.0, 0.0]


def test_none_fields_omitted(tmp_path):
    with patch("nahw.services.interaction_logger.settings") as mock_settings:
        mock_settings.log_dir = tmp_path
        mock_settings.log_interactions = True
        log_interaction(event="validate_simple")

    entry = json.loads(next(tmp_path.glob("interactions_*.jsonl")).read_text())
    assert "score" not in entry
    assert "session_id" not in entry


def test_arabic_is_not_escaped(tmp_path):
    with patch("nahw.services.interaction_logger.settings") as mock_settings:
        mock_settings.log_dir = tmp_path
        mock_settings.log_interactions = True
        log_interaction(event="validate_simple", selection_text="ذِكْرُ")

    content = next(tmp_path.glob("interactions_*.jsonl")).read_text(encoding="utf-8")
    assert "ذِكْرُ" in content


def test_disabled(tmp_path):
    with patch("nahw.services.interaction_logger.settings") as mock_settings:
        mock_settings.log_dir = tmp_path
        mock_settings.log_interactions = False
        log_interaction(event="validate_simple", score=100.0)

    assert list(tmp_path.glob("interactions_*.jsonl")) == []


def test_log_validation(tmp_path):
    seq = SegmentSequence([
        Segment(id="19-2-1-1", text="ذِكْرُ", morphology="noun"),
        Segment(id="19-2-2-1", text="رَحْمَتِ", morphology="noun", case="genitive"),
    ])
    construction = make_construction(seq, IDAFA, (0, 1), ("mudaf", "mudaf-ilayh"), DEFINITE, "")
    question = GrammarQuestion(IDAFA, [construction], segments=seq, question_id="19:2")
    result = validate_simple(question, [1, 0])

    with patch("nahw.services.interaction_logger.settings") as mock_settings:
        mock_settings.log_dir = tmp_path
        mock_settings.log_interactions = True
        log_validation("validate_simple", question, result, session_id="s-9")

    entry = json.loads(next(tmp_path.glob("interactions_*.jsonl")).read_text())
    assert entry["event"] == "validate_simple"
    assert entry["question_id"] == "19:2"
    assert entry["is_correct"] is True
    assert entry["selected"] == [1, 0]
    assert entry["feedback_kind"] == "exact"
    assert "best_match" not in entry
