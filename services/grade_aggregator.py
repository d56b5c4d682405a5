"""
services/grade_aggregator.py

- 성적 가중 평균 / 통과율 통계 계산
- 가중치: 시험 50% / 퀴즈 30% / 과제 20%
- 학습자별 · 반별 · 전체 조회가 모두 같은 계산 함수(weighted_average)를 사용

누락 유형 처리 정책 (MISSING_CATEGORY_POLICY)
- renormalize: 점수가 있는 유형의 가중치만 합쳐 다시 1로 맞춤
  (예: 시험 80, 퀴즈 90, 과제 없음 → (0.5*80 + 0.3*90) / 0.8)
- zero_fill: 없는 유형은 0점으로 보고 가중치는 그대로
- 인정되는 점수가 하나도 없으면 두 정책 모두 None (집계 대상에서 제외)
  기존 Mongo 파이프라인은 이 경우 null 합산 결과인 0을 냈으므로, zero_fill 도
  점수가 하나 이상 있는 학습자에 대해서만 기존 결과와 같음
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from models.grades import WEIGHTS
from schemas.grades import (
    ClassAverage,
    ClassStats,
    GlobalStats,
    GradeRecord,
    LearnerAverage,
    ScoreEntry,
    ScoreType,
)
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)

RENORMALIZE = "renormalize"
ZERO_FILL = "zero_fill"
POLICIES = (RENORMALIZE, ZERO_FILL)


# ==========================================================
# [공통] 유형별 분리 → 평균 → 가중 합산
# ==========================================================

def category_means(scores: Iterable[ScoreEntry]) -> Dict[ScoreType, float]:
    """유형별 산술 평균 (점수가 없는 유형은 키 자체가 없음)"""
    buckets: Dict[ScoreType, List[float]] = defaultdict(list)
    for entry in scores:
        buckets[entry.type].append(entry.score)
    return {t: sum(values) / len(values) for t, values in buckets.items() if values}


def weighted_average(scores: Iterable[ScoreEntry], policy: str = RENORMALIZE) -> Optional[float]:
    if policy not in POLICIES:
        raise ValueError(f"unknown missing-category policy: {policy}")

    means = category_means(scores)
    if not means:
        return None

    total = sum(WEIGHTS[t] * mean for t, mean in means.items())
    if policy == ZERO_FILL:
        return total

    present_weight = sum(WEIGHTS[t] for t in means)
    return total / present_weight


def group_weighted_averages(
    records: Iterable[GradeRecord],
    key: str,
    policy: str = RENORMALIZE,
) -> Dict[int, float]:
    """
    records의 점수를 key(learner_id / class_id) 기준으로 모아 가중 평균 계산
    - 점수가 하나도 없는 그룹은 결과에서 제외
    """
    grouped: Dict[int, List[ScoreEntry]] = defaultdict(list)
    for record in records:
        grouped[getattr(record, key)].extend(record.scores)

    averages = {}
    for group_id in sorted(grouped):
        avg = weighted_average(grouped[group_id], policy)
        if avg is not None:
            averages[group_id] = avg
    return averages


def count_above(averages: Iterable[float], threshold: float) -> Dict[str, float]:
    """기준점 '초과' 학습자 수와 비율(%) - 호출 측에서 빈 입력은 미리 걸러야 함"""
    values = list(averages)
    total = len(values)
    above = sum(1 for v in values if v > threshold)
    return {
        "total": total,
        "above": above,
        "percentage": above / total * 100,
    }


# ==========================================================
# [조회] 저장소 + 정책을 묶은 집계기
# ==========================================================

class GradeAggregator:
    def __init__(
        self,
        store,
        policy: str = RENORMALIZE,
        global_threshold: float = 50.0,
        class_threshold: float = 70.0,
    ):
        if policy not in POLICIES:
            raise ValueError(f"unknown missing-category policy: {policy}")
        self.store = store
        self.policy = policy
        self.global_threshold = global_threshold
        self.class_threshold = class_threshold

    # ✅ 특정 학습자의 반별 가중 평균 (기록이 없으면 빈 목록 = 정상)
    def learner_class_averages(self, learner_id: int) -> List[ClassAverage]:
        records = self.store.find_by_learner(learner_id)
        averages = group_weighted_averages(records, "class_id", self.policy)
        return [ClassAverage(class_id=cid, avg=avg) for cid, avg in averages.items()]

    # ✅ 특정 학습자의 전체(또는 특정 반) 가중 평균
    def learner_average(self, learner_id: int, class_id: Optional[int] = None) -> LearnerAverage:
        records = self.store.find_by_learner(learner_id, class_id)
        if not records:
            raise NotFoundError(f"No grades found for learner {learner_id}")

        scores = [entry for record in records for entry in record.scores]
        return LearnerAverage(
            learner_id=learner_id,
            class_id=class_id,
            weighted_average=weighted_average(scores, self.policy),
        )

    # ✅ 전체 학습자 통계 (기준점 global_threshold)
    def global_stats(self) -> GlobalStats:
        averages = group_weighted_averages(self.store.find_all(), "learner_id", self.policy)
        if not averages:
            raise NotFoundError("No data found")

        counts = count_above(averages.values(), self.global_threshold)
        logger.debug(f"전체 통계 계산: {counts}")
        return GlobalStats(
            total_learners=counts["total"],
            learners_above_threshold=counts["above"],
            percentage_above_threshold=counts["percentage"],
        )

    # ✅ 반별 학습자 통계 (기준점 class_threshold)
    def class_stats(self, class_id: int) -> ClassStats:
        records = self.store.find_by_class(class_id)
        averages = group_weighted_averages(records, "learner_id", self.policy)
        if not averages:
            raise NotFoundError(f"No learners found for class {class_id}")

        counts = count_above(averages.values(), self.class_threshold)
        logger.debug(f"반 통계 계산: class_id={class_id}, {counts}")
        return ClassStats(
            class_id=class_id,
            total_learners=counts["total"],
            learners_above_threshold=counts["above"],
            percentage_above_threshold=counts["percentage"],
        )
