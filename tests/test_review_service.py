import pytest

from app.exceptions import ApiException, ErrorCode
from app.models.review import Review
from app.schemas.common import Pageable
from app.schemas.review import WriteReviewRequest
from app.services import review_service


@pytest.fixture
def alice(make_user):
    return make_user("alice@x.com", "alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob@x.com", "bob")


@pytest.fixture
def gathering_a(alice, make_gathering):
    return make_gathering(alice, name="gathering A")


def _review_count(db) -> int:
    return db.query(Review).count()


def test_host_cannot_review_own_gathering(db, alice, gathering_a):
    request = WriteReviewRequest(gathering_id=gathering_a.id, score=5, comment="mine")

    with pytest.raises(ApiException) as exc:
        review_service.write_review(db, request, "alice@x.com")
    db.rollback()

    assert exc.value.error_code is ErrorCode.CANNOT_WRITE_REVIEW_AS_ORGANIZER
    assert exc.value.status_code == 403
    assert _review_count(db) == 0


def test_participant_review_is_stored(db, bob, gathering_a):
    request = WriteReviewRequest(gathering_id=gathering_a.id, score=5, comment="good")

    review_service.write_review(db, request, "bob@x.com")
    db.commit()

    reviews = db.query(Review).all()
    assert len(reviews) == 1
    assert reviews[0].user_id == bob.id
    assert reviews[0].gathering_id == gathering_a.id
    assert reviews[0].score == 5
    assert reviews[0].comment == "good"


def test_review_for_missing_gathering_fails(db, bob):
    request = WriteReviewRequest(gathering_id=999, score=4, comment="?")

    with pytest.raises(ApiException) as exc:
        review_service.write_review(db, request, "bob@x.com")
    db.rollback()

    assert exc.value.error_code is ErrorCode.GATHERING_NOT_FOUND
    assert _review_count(db) == 0


def test_review_by_unknown_user_fails(db, gathering_a):
    request = WriteReviewRequest(gathering_id=gathering_a.id, score=4)

    with pytest.raises(ApiException) as exc:
        review_service.write_review(db, request, "ghost@x.com")

    assert exc.value.error_code is ErrorCode.USER_NOT_FOUND
    assert _review_count(db) == 0


def test_score_must_be_between_one_and_five():
    with pytest.raises(ValueError):
        WriteReviewRequest(gathering_id=1, score=6)
    with pytest.raises(ValueError):
        WriteReviewRequest(gathering_id=1, score=0)


def test_get_login_user_reviews(db, alice, bob, gathering_a, make_gathering, make_review):
    gathering_b = make_gathering(alice, name="gathering B")
    make_review(bob, gathering_a, 5, "good")
    make_review(bob, gathering_b, 3, "not bad")

    page = review_service.get_login_user_reviews(db, "bob@x.com", Pageable())

    assert page.current_page_size == 2
    assert page.has_next is False
    assert {r.comment for r in page.data} == {"good", "not bad"}
    assert all(r.user_name == "bob" for r in page.data)


def test_get_login_user_reviews_unknown_user(db):
    with pytest.raises(ApiException) as exc:
        review_service.get_login_user_reviews(db, "ghost@x.com", Pageable())
    assert exc.value.error_code is ErrorCode.USER_NOT_FOUND


def test_get_reviews_by_missing_gathering(db):
    with pytest.raises(ApiException) as exc:
        review_service.get_reviews_by_gathering_id(db, 12345, Pageable())
    assert exc.value.error_code is ErrorCode.GATHERING_NOT_FOUND
