from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from config.settings import settings
from database.db import get_grades_collection
from database.grade_store import GradeStore
from models.grades import BSON_INT_MAX, BSON_INT_MIN
from schemas.common import ErrorResponse
from schemas.grades import ClassAverage, ClassStats, GlobalStats, LearnerAverage
from services.grade_aggregator import GradeAggregator

router = APIRouter(
    prefix="/grades",
    tags=["grades"],
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

# ==========================================================
# [공통] 저장소 / 집계기 의존성
# ==========================================================
# Mongo에 저장 가능한 정수 범위 밖의 ID는 400 INVALID_INPUT
LearnerId = Annotated[int, Path(ge=BSON_INT_MIN, le=BSON_INT_MAX)]
ClassId = Annotated[int, Path(ge=BSON_INT_MIN, le=BSON_INT_MAX)]
ClassIdFilter = Annotated[Optional[int], Query(ge=BSON_INT_MIN, le=BSON_INT_MAX)]


def get_grade_store() -> GradeStore:
    return GradeStore(get_grades_collection())


def get_aggregator(store: GradeStore = Depends(get_grade_store)) -> GradeAggregator:
    return GradeAggregator(
        store,
        policy=settings.MISSING_CATEGORY_POLICY,
        global_threshold=settings.GLOBAL_PASS_THRESHOLD,
        class_threshold=settings.CLASS_PASS_THRESHOLD,
    )

# ==========================================================
# [학습자] 가중 평균 조회
# - 가중치: 시험 50% / 퀴즈 30% / 과제 20%
# ==========================================================

# ✅ 특정 학습자의 반별 가중 평균 (기록이 없으면 빈 배열)
@router.get("/learner/{learner_id}/class/average", response_model=List[ClassAverage])
def get_learner_class_averages(learner_id: LearnerId, agg: GradeAggregator = Depends(get_aggregator)):
    return agg.learner_class_averages(learner_id)

# ✅ 특정 학습자의 전체 가중 평균 (class_id 지정 시 해당 반만)
@router.get(
    "/learner/{learner_id}/average",
    response_model=LearnerAverage,
    responses={404: {"model": ErrorResponse}},
)
def get_learner_average(
    learner_id: LearnerId,
    class_id: ClassIdFilter = None,
    agg: GradeAggregator = Depends(get_aggregator),
):
    return agg.learner_average(learner_id, class_id)

# ==========================================================
# [통계] 기준점 초과 학습자 비율
# ==========================================================

# ✅ 전체 학습자 통계 (50점 초과)
@router.get("/stats", response_model=GlobalStats, responses={404: {"model": ErrorResponse}})
def get_global_stats(agg: GradeAggregator = Depends(get_aggregator)):
    return agg.global_stats()

# ✅ 반별 학습자 통계 (70점 초과)
@router.get("/stats/{class_id}", response_model=ClassStats, responses={404: {"model": ErrorResponse}})
def get_class_stats(class_id: ClassId, agg: GradeAggregator = Depends(get_aggregator)):
    return agg.class_stats(class_id)
