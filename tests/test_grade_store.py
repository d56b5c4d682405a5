from unittest.mock import MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from database.db import ensure_indexes
from database.grade_store import GradeStore
from models.grades import GRADE_INDEXES
from schemas.grades import ScoreType
from utils.errors import StoreUnavailableError


def make_collection(docs=()):
    collection = MagicMock()
    collection.find.return_value = iter(list(docs))
    return collection


def test_find_by_learner_filters_and_projects():
    collection = make_collection([
        {"learner_id": 7, "class_id": 3, "scores": [{"type": "exam", "score": 55}]},
    ])
    records = GradeStore(collection).find_by_learner(7)

    collection.find.assert_called_once_with({"learner_id": 7}, {"_id": 0})
    assert len(records) == 1
    assert records[0].class_id == 3
    assert records[0].scores[0].type == ScoreType.EXAM
    assert records[0].scores[0].score == 55.0


def test_find_by_learner_scoped_to_class():
    collection = make_collection()
    GradeStore(collection).find_by_learner(7, class_id=3)
    collection.find.assert_called_once_with({"learner_id": 7, "class_id": 3}, {"_id": 0})


def test_find_by_class_and_all():
    collection = make_collection()
    store = GradeStore(collection)
    store.find_by_class(4)
    collection.find.assert_called_with({"class_id": 4}, {"_id": 0})

    collection.find.return_value = iter([])
    store.find_all()
    collection.find.assert_called_with({}, {"_id": 0})


def test_unknown_score_types_and_missing_scores_are_skipped():
    collection = make_collection([
        {"learner_id": 1, "class_id": 1, "scores": [
            {"type": "quiz", "score": 70},
            {"type": "project", "score": 100},
            {"type": "homework"},
        ]},
        {"learner_id": 1, "class_id": 2},
    ])
    records = GradeStore(collection).find_by_learner(1)
    assert [len(r.scores) for r in records] == [1, 0]


def test_store_error_is_wrapped():
    collection = MagicMock()
    collection.find.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(StoreUnavailableError):
        GradeStore(collection).find_all()


def test_ensure_indexes_creates_all_three():
    collection = MagicMock()
    assert ensure_indexes(collection) is True
    collection.create_indexes.assert_called_once_with(GRADE_INDEXES)
    keys = [list(idx.document["key"]) for idx in GRADE_INDEXES]
    assert keys == [["learner_id"], ["class_id"], ["learner_id", "class_id"]]


def test_ensure_indexes_failure_does_not_raise():
    collection = MagicMock()
    collection.create_indexes.side_effect = ServerSelectionTimeoutError("no servers")
    assert ensure_indexes(collection) is False


def test_non_numeric_scores_are_skipped():
    collection = make_collection([
        {"learner_id": 1, "class_id": 1, "scores": [
            {"type": "exam", "score": "n/a"},
            {"type": "quiz", "score": [1, 2]},
            {"type": "homework", "score": "75"},
        ]},
    ])
    records = GradeStore(collection).find_by_learner(1)
    assert [(e.type, e.score) for e in records[0].scores] == [(ScoreType.HOMEWORK, 75.0)]


def test_learner_class_index_is_unique():
    compound = next(idx for idx in GRADE_INDEXES if idx.document["name"] == "learner_id_1_class_id_1")
    assert compound.document.get("unique") is True
