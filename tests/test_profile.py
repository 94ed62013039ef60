"""Tests for profile assembly and the update feed."""

from datetime import datetime, timedelta, timezone

from registry_identity.common.pagination import PaginationParams
from registry_identity.models.package import OwnerKind
from registry_identity.services.profile import get_profile, get_update_feed
from tests.helpers.seed import (
    add_owner,
    create_test_email,
    create_test_package,
    follow,
    publish_version,
)

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_profile_without_email(db, test_user, identity):
    profile = get_profile(db, identity)

    assert profile.user.id == test_user.id
    assert profile.user.login == "alice"
    assert profile.user.email is None
    assert profile.user.email_verified is False
    assert profile.user.email_verification_sent is False
    assert profile.owned_packages == []


def test_profile_unverified_with_token_counts_as_sent(db, test_user, identity):
    create_test_email(db, test_user, "alice@example.com", token="t1", token_generated_at=BASE_TIME)
    db.commit()

    user = get_profile(db, identity).user

    assert user.email == "alice@example.com"
    assert user.email_verified is False
    assert user.email_verification_sent is True


def test_profile_unverified_without_timestamp_not_sent(db, test_user, identity):
    create_test_email(db, test_user, "alice@example.com", token="t1")
    db.commit()

    assert get_profile(db, identity).user.email_verification_sent is False


def test_profile_verified_is_always_sent(db, test_user, identity):
    create_test_email(db, test_user, "alice@example.com", token="t1", verified=True)
    db.commit()

    user = get_profile(db, identity).user

    assert user.email_verified is True
    assert user.email_verification_sent is True


def test_profile_lists_owned_packages_by_name(db, test_user, other_user, identity):
    zeta = create_test_package(db, "zeta")
    alpha = create_test_package(db, "alpha")
    team_only = create_test_package(db, "middle")
    foreign = create_test_package(db, "foreign")
    add_owner(db, zeta, test_user.id, email_notifications=False)
    add_owner(db, alpha, test_user.id, email_notifications=True)
    add_owner(db, team_only, test_user.id, owner_kind=OwnerKind.TEAM)
    add_owner(db, foreign, other_user.id)
    db.commit()

    owned = get_profile(db, identity).owned_packages

    assert [(p.name, p.email_notifications) for p in owned] == [
        ("alpha", True),
        ("zeta", False),
    ]


def _seed_feed(db, test_user, other_user):
    followed = create_test_package(db, "followed")
    also_followed = create_test_package(db, "also-followed")
    ignored = create_test_package(db, "ignored")
    follow(db, test_user, followed)
    follow(db, test_user, also_followed)

    publish_version(db, followed, "1.0.0", BASE_TIME, published_by=other_user)
    publish_version(db, also_followed, "0.1.0", BASE_TIME + timedelta(hours=1))
    publish_version(db, followed, "1.1.0", BASE_TIME + timedelta(hours=2), published_by=test_user)
    publish_version(db, ignored, "9.9.9", BASE_TIME + timedelta(hours=3))
    db.commit()


def test_feed_newest_first(db, test_user, other_user, identity):
    _seed_feed(db, test_user, other_user)

    feed = get_update_feed(db, identity, PaginationParams(page=1, per_page=10))

    assert [(v.package, v.num) for v in feed.versions] == [
        ("followed", "1.1.0"),
        ("also-followed", "0.1.0"),
        ("followed", "1.0.0"),
    ]
    assert feed.meta.more is False
    assert feed.versions[0].published_by.login == "alice"
    assert feed.versions[1].published_by is None
    assert feed.versions[2].published_by.login == "bob"


def test_feed_pagination_more_flag(db, test_user, other_user, identity):
    _seed_feed(db, test_user, other_user)

    first = get_update_feed(db, identity, PaginationParams(page=1, per_page=2))
    second = get_update_feed(db, identity, PaginationParams(page=2, per_page=2))

    assert [v.num for v in first.versions] == ["1.1.0", "0.1.0"]
    assert first.meta.more is True
    assert [v.num for v in second.versions] == ["1.0.0"]
    assert second.meta.more is False


def test_feed_exact_page_has_no_more(db, test_user, other_user, identity):
    _seed_feed(db, test_user, other_user)

    feed = get_update_feed(db, identity, PaginationParams(page=1, per_page=3))

    assert len(feed.versions) == 3
    assert feed.meta.more is False


def test_feed_empty_without_follows(db, test_user, identity):
    feed = get_update_feed(db, identity, PaginationParams())

    assert feed.versions == []
    assert feed.meta.more is False
