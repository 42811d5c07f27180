import pytest

from estate_crm.scoring import (
    ALL_STAGES,
    PIPELINES,
    calculate_rank,
    calculate_score,
    pipeline_summary,
    score_and_rank,
    stage_label,
    stages_for,
)

RENTAL_EXPECTED = {
    "R_ENQUIRY": 0,
    "R_VIEW": 0,
    "R_APP": 25,
    "R_SCREEN": 40,
    "R_APPROVE": 60,
    "R_CONTRACT": 80,
    "R_MOVEIN": 100,
}

SALES_EXPECTED = {
    "S_ENQUIRY": 0,
    "S_VIEW": 0,
    "S_LOI": 20,
    "S_DEPOSIT": 35,
    "S_DD": 60,
    "S_APPROVE": 80,
    "S_CONTRACT": 100,
    "S_CLOSING": 100,
}


@pytest.mark.parametrize("stage, expected", RENTAL_EXPECTED.items())
def test_rental_scores(stage, expected):
    assert calculate_score("RENTAL", stage) == expected
    assert calculate_score("RENTAL", stage) == calculate_score("RENTAL", stage)


@pytest.mark.parametrize("stage, expected", SALES_EXPECTED.items())
def test_sales_scores(stage, expected):
    assert calculate_score("SALES", stage) == expected


def test_unknown_stage_scores_zero():
    assert calculate_score("RENTAL", "S_CONTRACT") == 0
    assert calculate_score("SALES", "R_MOVEIN") == 0
    assert calculate_score("RENTAL", "NOPE") == 0
    assert calculate_score("LEASE", "R_MOVEIN") == 0


@pytest.mark.parametrize(
    "deal_type, score, expected",
    [
        ("RENTAL", 100, "A"),
        ("RENTAL", 85, "A"),
        ("RENTAL", 84, "B"),
        ("RENTAL", 55, "B"),
        ("RENTAL", 54, "C"),
        ("RENTAL", 0, "C"),
        ("SALES", 100, "A"),
        ("SALES", 80, "A"),
        ("SALES", 79, "B"),
        ("SALES", 45, "B"),
        ("SALES", 44, "C"),
        ("SALES", 0, "C"),
    ],
)
def test_rank_thresholds(deal_type, score, expected):
    assert calculate_rank(deal_type, score) == expected


def test_rental_contract_is_b_but_sales_approve_is_a():
    # 同じ 80 点でも賃貸は B、売買は A。
    assert score_and_rank("RENTAL", "R_CONTRACT") == (80, "B")
    assert score_and_rank("SALES", "S_APPROVE") == (80, "A")
    assert score_and_rank("RENTAL", "R_MOVEIN") == (100, "A")
    assert score_and_rank("RENTAL", "R_APP") == (25, "C")


def test_pipelines_are_ordered_and_complete():
    assert stages_for("RENTAL") == list(RENTAL_EXPECTED)
    assert stages_for("SALES") == list(SALES_EXPECTED)
    assert stages_for("UNKNOWN") == []
    assert len(ALL_STAGES) == 15
    assert len(PIPELINES["RENTAL"]) == 7
    assert len(PIPELINES["SALES"]) == 8


def test_stage_labels():
    assert stage_label("S_DD") == "Due Diligence"
    assert stage_label("R_MOVEIN") == "Move-in"
    assert stage_label("UNKNOWN") == "UNKNOWN"


def test_pipeline_summary_matches_tables():
    summary = pipeline_summary()
    assert [item["stage"] for item in summary["SALES"]] == list(SALES_EXPECTED)
    closing = summary["SALES"][-1]
    assert closing == {"stage": "S_CLOSING", "label": "Closing", "score": 100, "rank": "A"}
    assert summary["RENTAL"][2]["rank"] == "C"
