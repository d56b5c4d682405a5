from typing import Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient

from main import app
from models.grades import to_record
from routers.grades_agg import get_grade_store
from schemas.grades import GradeRecord


def make_doc(learner_id: int, class_id: int, exam=(), quiz=(), homework=()) -> dict:
    scores = (
        [{"type": "exam", "score": s} for s in exam]
        + [{"type": "quiz", "score": s} for s in quiz]
        + [{"type": "homework", "score": s} for s in homework]
    )
    return {"learner_id": learner_id, "class_id": class_id, "scores": scores}


class FakeGradeStore:
    """GradeStore와 같은 조회 메서드를 가진 메모리 저장소"""

    def __init__(self, docs: Iterable[dict] = ()):
        self.records: List[GradeRecord] = [to_record(d) for d in docs]
        self.calls = 0

    def find_by_learner(self, learner_id: int, class_id: Optional[int] = None) -> List[GradeRecord]:
        self.calls += 1
        return [
            r for r in self.records
            if r.learner_id == learner_id and (class_id is None or r.class_id == class_id)
        ]

    def find_by_class(self, class_id: int) -> List[GradeRecord]:
        self.calls += 1
        return [r for r in self.records if r.class_id == class_id]

    def find_all(self) -> List[GradeRecord]:
        self.calls += 1
        return list(self.records)


@pytest.fixture
def sample_docs():
    return [
        # learner 1: 예제 (class 1 → 87, class 2 → 61)
        make_doc(1, 1, exam=[80], quiz=[90], homework=[100]),
        make_doc(1, 2, exam=[60], quiz=[70], homework=[50]),
        # learner 2, 3: 전체 평균 40 / 80
        make_doc(2, 1, exam=[40], quiz=[40], homework=[40]),
        make_doc(3, 2, exam=[80], quiz=[80], homework=[80]),
        # learner 4: 점수 없음 (통계에서 제외)
        make_doc(4, 3),
    ]


@pytest.fixture
def store(sample_docs):
    return FakeGradeStore(sample_docs)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_grade_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
