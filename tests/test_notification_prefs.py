"""Tests for email notification preference sync."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select

from registry_identity.core.app_exceptions import ValidationError
from registry_identity.db.upsert import upsert
from registry_identity.models.package import OwnerKind, Package, PackageOwner
from registry_identity.services.notification_prefs import (
    OwnerRow,
    build_candidate_rows,
    load_user_owner_rows,
    parse_notification_updates,
    sync_email_notifications,
)
from tests.helpers.seed import add_owner, create_test_package


@pytest.fixture
def owned(db, test_user):
    """test_user owns "alpha" (notifications on) and "beta" (off)."""
    alpha = create_test_package(db, "alpha")
    beta = create_test_package(db, "beta")
    add_owner(db, alpha, test_user.id, email_notifications=True)
    add_owner(db, beta, test_user.id, email_notifications=False)
    db.commit()
    return {"alpha": alpha.id, "beta": beta.id}


def _flags(db, owner_id: int, owner_kind: OwnerKind = OwnerKind.USER) -> dict[int, bool]:
    rows = db.execute(
        select(PackageOwner.package_id, PackageOwner.email_notifications).where(
            PackageOwner.owner_id == owner_id,
            PackageOwner.owner_kind == owner_kind.value,
        )
    ).all()
    return dict(rows)


def test_partial_update_leaves_omitted_packages(db, test_user, identity, owned):
    sync_email_notifications(
        db, identity, [{"id": owned["alpha"], "email_notifications": False}]
    )

    assert _flags(db, test_user.id) == {owned["alpha"]: False, owned["beta"]: False}


def test_sync_is_idempotent(db, test_user, identity, owned):
    payload = [
        {"id": owned["alpha"], "email_notifications": False},
        {"id": owned["beta"], "email_notifications": True},
    ]

    sync_email_notifications(db, identity, payload)
    once = _flags(db, test_user.id)
    sync_email_notifications(db, identity, payload)

    assert _flags(db, test_user.id) == once == {owned["alpha"]: False, owned["beta"]: True}


def test_unowned_packages_are_ignored(db, test_user, other_user, identity, owned):
    foreign = create_test_package(db, "gamma")
    add_owner(db, foreign, other_user.id, email_notifications=False)
    db.commit()

    result = sync_email_notifications(
        db,
        identity,
        [
            {"id": foreign.id, "email_notifications": True},
            {"id": 9999, "email_notifications": True},
        ],
    )

    assert result.ok is True
    assert _flags(db, other_user.id) == {foreign.id: False}
    assert _flags(db, test_user.id) == {owned["alpha"]: True, owned["beta"]: False}
    assert db.scalar(select(func.count()).select_from(PackageOwner)) == 3


def test_team_ownership_is_untouched(db, test_user, identity, owned):
    """A team sharing the user's id is a different owner."""
    team_package = create_test_package(db, "team-pkg")
    add_owner(db, team_package, test_user.id, email_notifications=True, owner_kind=OwnerKind.TEAM)
    db.commit()

    sync_email_notifications(
        db, identity, [{"id": team_package.id, "email_notifications": False}]
    )

    assert _flags(db, test_user.id, OwnerKind.TEAM) == {team_package.id: True}


def test_other_owners_of_same_package_are_independent(db, test_user, other_user, identity, owned):
    add_owner(db, db.get(Package, owned["alpha"]), other_user.id, email_notifications=True)
    db.commit()

    sync_email_notifications(db, identity, [{"id": owned["alpha"], "email_notifications": False}])

    assert _flags(db, other_user.id) == {owned["alpha"]: True}


def test_deleted_ownership_is_not_synced(db, test_user, identity):
    gone = create_test_package(db, "gone")
    add_owner(db, gone, test_user.id, email_notifications=True, deleted=True)
    db.commit()

    sync_email_notifications(db, identity, [{"id": gone.id, "email_notifications": False}])

    assert _flags(db, test_user.id) == {gone.id: True}
    assert load_user_owner_rows(db, test_user.id) == []


def test_user_without_packages_is_noop(db, test_user, identity):
    assert sync_email_notifications(db, identity, []).ok is True
    assert sync_email_notifications(db, identity, [{"id": 1, "email_notifications": True}]).ok


@pytest.mark.parametrize(
    "payload",
    [
        {"id": 1, "email_notifications": True},
        [{"id": "abc", "email_notifications": True}],
        [{"id": 1}],
        [{"email_notifications": False}],
        "not a list",
        None,
    ],
)
def test_invalid_payload_rejected(db, test_user, identity, owned, payload):
    with pytest.raises(ValidationError) as exc_info:
        sync_email_notifications(db, identity, payload)

    assert exc_info.value.message == "invalid json request"
    assert _flags(db, test_user.id) == {owned["alpha"]: True, owned["beta"]: False}


def test_parse_last_duplicate_wins():
    updates = parse_notification_updates(
        [
            {"id": 1, "email_notifications": True},
            {"id": 1, "email_notifications": False},
        ]
    )
    assert updates == {1: False}


def test_build_candidate_rows_passes_through_current_values():
    current = [
        OwnerRow(package_id=1, owner_id=7, owner_kind=0, email_notifications=True),
        OwnerRow(package_id=2, owner_id=7, owner_kind=0, email_notifications=False),
    ]

    candidates = build_candidate_rows(current, {1: False, 3: True})

    assert candidates == [
        OwnerRow(package_id=1, owner_id=7, owner_kind=0, email_notifications=False),
        OwnerRow(package_id=2, owner_id=7, owner_kind=0, email_notifications=False),
    ]


def test_upsert_rejects_unknown_dialect():
    session = MagicMock()
    session.get_bind.return_value.dialect.name = "mysql"

    with pytest.raises(ValueError, match="mysql"):
        upsert(session, PackageOwner, ["package_id"], ["email_notifications"])
