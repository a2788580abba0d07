from datetime import datetime, timedelta, timezone

import pytest

from app.crud.user_gathering_crud import join_gathering, leave_gathering
from app.exceptions import ApiException, ErrorCode
from app.models.gathering import Gathering, GatheringStatus, GatheringType
from app.models.user_gathering import UserGathering
from app.schemas.common import Pageable
from app.schemas.gathering import CreateGatheringRequest
from app.services import gathering_service


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _request(**overrides) -> CreateGatheringRequest:
    data = dict(
        name=None,
        location="홍대입구",
        type="달램핏 마인드풀니스",
        date_time=_now() + timedelta(days=10),
        registration_end=_now() + timedelta(days=5),
        capacity=10,
        image_url="https://example.com/image.png",
    )
    data.update(overrides)
    return CreateGatheringRequest(**data)


@pytest.fixture
def host(make_user):
    return make_user("test@example.com", "Test User")


def test_create_gathering_registers_host_as_participant(db, host):
    gathering_service.create_gathering(db, _request(), host.email)
    db.commit()

    saved = db.query(Gathering).one()
    assert saved.name is None
    assert saved.host_user.email == host.email
    assert saved.type == GatheringType.MINDFULNESS.value
    assert saved.status == GatheringStatus.ONGOING.value

    participation = db.query(UserGathering).one()
    assert participation.user_id == host.id
    assert participation.gathering_id == saved.id


def test_create_gathering_rejects_registration_end_after_start(db, host):
    request = _request(
        type="WORKATION",
        location="건대입구",
        date_time=_now() + timedelta(days=5),
        registration_end=_now() + timedelta(days=10),
    )

    with pytest.raises(ApiException) as exc:
        gathering_service.create_gathering(db, request, host.email)
    db.rollback()

    assert exc.value.error_code is ErrorCode.INVALID_REGISTRATION_END
    assert "모집 종료일은 모임 시작일 이전이어야 합니다." in exc.value.message
    assert db.query(Gathering).count() == 0


def test_create_gathering_unknown_user(db):
    with pytest.raises(ApiException) as exc:
        gathering_service.create_gathering(db, _request(location="신림"), "nonexistent@example.com")

    assert exc.value.error_code is ErrorCode.USER_NOT_FOUND
    assert "유저정보를 찾을 수 없습니다." in exc.value.message


def test_create_gathering_unknown_type_and_location(db, host):
    with pytest.raises(ApiException) as type_exc:
        gathering_service.create_gathering(db, _request(type="요가"), host.email)
    with pytest.raises(ApiException) as location_exc:
        gathering_service.create_gathering(db, _request(location="판교"), host.email)

    assert type_exc.value.error_code is ErrorCode.GATHERING_TYPE_NOT_FOUND
    assert location_exc.value.error_code is ErrorCode.GATHERING_LOCATION_NOT_FOUND


def test_join_and_leave(db, host, make_user, make_gathering):
    guest = make_user("guest@example.com")
    gathering = make_gathering(host, participants=[host])

    assert join_gathering(db, gathering.id, guest.email) == 2
    db.commit()
    assert leave_gathering(db, gathering.id, guest.email) == 1
    db.commit()


def test_join_rejects_duplicates_and_full(db, host, make_user, make_gathering):
    guest = make_user("guest@example.com")
    late = make_user("late@example.com")
    gathering = make_gathering(host, capacity=2, participants=[host])

    join_gathering(db, gathering.id, guest.email)
    db.commit()

    with pytest.raises(ApiException) as dup:
        join_gathering(db, gathering.id, guest.email)
    db.rollback()
    with pytest.raises(ApiException) as full:
        join_gathering(db, gathering.id, late.email)
    db.rollback()

    assert dup.value.error_code is ErrorCode.ALREADY_JOINED
    assert full.value.error_code is ErrorCode.GATHERING_FULL


def test_join_rejects_closed_or_canceled(db, host, make_user, make_gathering):
    guest = make_user("guest@example.com")
    closed = make_gathering(
        host,
        date_time=_now() + timedelta(days=1),
        registration_end=_now() - timedelta(hours=1),
    )
    canceled = make_gathering(host, status=GatheringStatus.CANCELED)

    with pytest.raises(ApiException) as closed_exc:
        join_gathering(db, closed.id, guest.email)
    with pytest.raises(ApiException) as canceled_exc:
        join_gathering(db, canceled.id, guest.email)

    assert closed_exc.value.error_code is ErrorCode.REGISTRATION_CLOSED
    assert canceled_exc.value.error_code is ErrorCode.GATHERING_NOT_ONGOING


def test_leave_rules(db, host, make_user, make_gathering):
    guest = make_user("guest@example.com")
    gathering = make_gathering(host, participants=[host])

    with pytest.raises(ApiException) as host_exc:
        leave_gathering(db, gathering.id, host.email)
    with pytest.raises(ApiException) as not_joined:
        leave_gathering(db, gathering.id, guest.email)

    assert host_exc.value.error_code is ErrorCode.HOST_CANNOT_LEAVE
    assert not_joined.value.error_code is ErrorCode.NOT_JOINED


def test_cancel_gathering(db, host, make_user, make_gathering):
    guest = make_user("guest@example.com")
    gathering = make_gathering(host)

    with pytest.raises(ApiException) as not_host:
        gathering_service.cancel_gathering(db, gathering.id, guest.email)
    db.rollback()

    gathering_service.cancel_gathering(db, gathering.id, host.email)
    db.commit()
    db.refresh(gathering)

    with pytest.raises(ApiException) as twice:
        gathering_service.cancel_gathering(db, gathering.id, host.email)

    assert not_host.value.error_code is ErrorCode.NOT_GATHERING_HOST
    assert gathering.status == GatheringStatus.CANCELED.value
    assert twice.value.error_code is ErrorCode.INVALID_STATUS_TRANSITION
    assert twice.value.status_code == 409


def test_get_hosted_gatherings(db, host, make_gathering):
    for i in range(11):
        make_gathering(host, created_date=datetime(2030, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=i))

    page = gathering_service.get_hosted_gatherings(db, host.email, Pageable(page=0, size=10))

    assert page.current_page_size == 10
    assert page.has_next is True


def test_hosted_gatherings_newest_first_when_created_in_same_second(db, host):
    # created_date는 DB 기본값(초 단위)이라 연속 생성 시 값이 겹친다
    created = []
    for _ in range(11):
        created.append(gathering_service.create_gathering(db, _request(), host.email).id)
        db.commit()

    first = gathering_service.get_hosted_gatherings(db, host.email, Pageable(page=0, size=10))
    second = gathering_service.get_hosted_gatherings(db, host.email, Pageable(page=1, size=10))

    assert [g.id for g in first.data] == created[::-1][:10]
    assert [g.id for g in second.data] == [created[0]]
    assert second.has_next is False
