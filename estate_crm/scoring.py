"""案件ステージからスコア(0〜100)とランク(A/B/C)を導出するモジュール。

スコア表とステージ一覧は常に同じ内容で保つこと。表に無いステージは 0 点になる。
"""

from __future__ import annotations


class DealType:
    RENTAL = "RENTAL"
    SALES = "SALES"

    ALL = (RENTAL, SALES)


class Rank:
    A = "A"
    B = "B"
    C = "C"

    ALL = (A, B, C)


# パイプライン順に並べた (ステージコード, 表示名, スコア)。
RENTAL_PIPELINE = (
    ("R_ENQUIRY", "Enquiry", 0),
    ("R_VIEW", "Viewing", 0),
    ("R_APP", "Application", 25),
    ("R_SCREEN", "Screening", 40),
    ("R_APPROVE", "Approved", 60),
    ("R_CONTRACT", "Contract", 80),
    ("R_MOVEIN", "Move-in", 100),
)

SALES_PIPELINE = (
    ("S_ENQUIRY", "Enquiry", 0),
    ("S_VIEW", "Viewing", 0),
    ("S_LOI", "LOI", 20),
    ("S_DEPOSIT", "Deposit", 35),
    ("S_DD", "Due Diligence", 60),
    ("S_APPROVE", "Approved", 80),
    # 契約と決済はどちらも成約扱いで同点。
    ("S_CONTRACT", "Contract", 100),
    ("S_CLOSING", "Closing", 100),
)

PIPELINES = {
    DealType.RENTAL: RENTAL_PIPELINE,
    DealType.SALES: SALES_PIPELINE,
}

STAGE_SCORES: dict[str, dict[str, int]] = {
    deal_type: {code: score for code, _, score in pipeline}
    for deal_type, pipeline in PIPELINES.items()
}

STAGE_LABELS: dict[str, str] = {
    code: label for pipeline in PIPELINES.values() for code, label, _ in pipeline
}

# (A の下限, B の下限)。賃貸と売買で閾値が異なる。
RANK_THRESHOLDS: dict[str, tuple[int, int]] = {
    DealType.RENTAL: (85, 55),
    DealType.SALES: (80, 45),
}

ALL_STAGES = tuple(code for pipeline in PIPELINES.values() for code, _, _ in pipeline)


def stages_for(deal_type: str) -> list[str]:
    """指定種別のステージコードをパイプライン順で返す。未知の種別は空リスト。"""
    return [code for code, _, _ in PIPELINES.get(deal_type, ())]


def stage_label(stage: str) -> str:
    return STAGE_LABELS.get(stage, stage)


def calculate_score(deal_type: str, stage: str) -> int:
    return STAGE_SCORES.get(deal_type, {}).get(stage, 0)


def calculate_rank(deal_type: str, score: int) -> str:
    # 未知の種別は売買の閾値で判定する。
    a_floor, b_floor = RANK_THRESHOLDS.get(deal_type, RANK_THRESHOLDS[DealType.SALES])
    if score >= a_floor:
        return Rank.A
    if score >= b_floor:
        return Rank.B
    return Rank.C


def score_and_rank(deal_type: str, stage: str) -> tuple[int, str]:
    score = calculate_score(deal_type, stage)
    return score, calculate_rank(deal_type, score)


def pipeline_summary() -> dict[str, list[dict[str, object]]]:
    """クライアントのフォーム描画用に種別ごとのステージ情報を返す。"""
    return {
        deal_type: [
            {
                "stage": code,
                "label": label,
                "score": score,
                "rank": calculate_rank(deal_type, score),
            }
            for code, label, score in pipeline
        ]
        for deal_type, pipeline in PIPELINES.items()
    }
