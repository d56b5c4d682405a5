from typing import List, Optional

from pymongo import ASCENDING, IndexModel

from schemas.grades import GradeRecord, ScoreEntry, ScoreType

# ✅ 컬렉션 필드명 (grades 컬렉션 문서 구조)
LEARNER_ID = "learner_id"    # 학습자 ID (Int32)
CLASS_ID = "class_id"        # 반 ID (Int32)
SCORES = "scores"            # [{ "type": "exam", "score": 78.3 }, ...]

# ✅ BSON 정수 범위 (Int64) - 범위를 벗어난 ID는 쿼리 인코딩 자체가 불가
BSON_INT_MIN = -(2 ** 63)
BSON_INT_MAX = 2 ** 63 - 1

# ✅ 유형별 가중치 (시험 50%, 퀴즈 30%, 과제 20%)
WEIGHTS = {
    ScoreType.EXAM: 0.5,
    ScoreType.QUIZ: 0.3,
    ScoreType.HOMEWORK: 0.2,
}

# ✅ 인덱스 정의 (학습자 / 반 / 학습자+반 복합)
GRADE_INDEXES: List[IndexModel] = [
    IndexModel([(LEARNER_ID, ASCENDING)], name="learner_id_1"),
    IndexModel([(CLASS_ID, ASCENDING)], name="class_id_1"),
    IndexModel(
        [(LEARNER_ID, ASCENDING), (CLASS_ID, ASCENDING)],
        name="learner_id_1_class_id_1",
        unique=True,               # 학습자+반 당 문서 1개
    ),
]


def parse_score_type(value) -> Optional[ScoreType]:
    try:
        return ScoreType(value)
    except ValueError:
        return None


def to_record(doc: dict) -> GradeRecord:
    """Mongo 문서 → GradeRecord (알 수 없는 유형, 점수가 없거나 숫자가 아닌 항목은 제외)"""
    entries: List[ScoreEntry] = []
    for item in doc.get(SCORES) or []:
        score_type = parse_score_type(item.get("type"))
        score = item.get("score")
        if score_type is None or score is None:
            continue
        try:
            value = float(score)
        except (TypeError, ValueError):
            continue
        entries.append(ScoreEntry(type=score_type, score=value))

    return GradeRecord(
        learner_id=int(doc[LEARNER_ID]),
        class_id=int(doc[CLASS_ID]),
        scores=entries,
    )
