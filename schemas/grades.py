from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScoreType(str, Enum):
    QUIZ = "quiz"
    EXAM = "exam"
    HOMEWORK = "homework"


# =========================================================
# 저장 문서 (grades 컬렉션)
# =========================================================

class ScoreEntry(BaseModel):
    type: ScoreType                          # 평가 유형 (quiz / exam / homework)
    score: float                             # 점수 (0~100)


class GradeRecord(BaseModel):
    learner_id: int                          # 학습자 ID
    class_id: int                            # 반 ID
    scores: List[ScoreEntry] = []            # 평가 점수 목록 (비어 있을 수 있음)


# =========================================================
# 응답 스키마 (기존 API 필드명 유지: avg, totalLearners ...)
# =========================================================

class ClassAverage(BaseModel):
    """한 학습자의 반별 가중 평균"""
    class_id: int
    avg: Optional[float] = None


class LearnerAverage(BaseModel):
    """한 학습자의 전체(또는 특정 반) 가중 평균"""
    learner_id: int
    class_id: Optional[int] = None
    weighted_average: Optional[float] = None


class GlobalStats(BaseModel):
    """
    전체 학습자 통계 (기준점 50)
    - totalLearners: 점수가 있는 학습자 수
    - learnersAbove50: 가중 평균이 50 초과인 학습자 수
    - percentageAbove50: 비율(%)
    """
    total_learners: int = Field(..., ge=0, alias="totalLearners")
    learners_above_threshold: int = Field(..., ge=0, alias="learnersAbove50")
    percentage_above_threshold: float = Field(..., alias="percentageAbove50")

    model_config = ConfigDict(populate_by_name=True)


class ClassStats(BaseModel):
    """반별 학습자 통계 (기준점 70)"""
    class_id: int
    total_learners: int = Field(..., ge=0, alias="totalLearners")
    learners_above_threshold: int = Field(..., ge=0, alias="learnersAbove70")
    percentage_above_threshold: float = Field(..., alias="percentageAbove70")

    model_config = ConfigDict(populate_by_name=True)
