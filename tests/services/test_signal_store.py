# tests/services/test_signal_store.py
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from post_scoring.models import (
    Bookmark,
    Comment,
    Gift,
    Like,
    ModerationLog,
    PostTag,
    PostView,
    Profile,
    Report,
)
from post_scoring.models.engagement import COMMENT_STATUS_PENDING
from post_scoring.models.post import POST_STATUS_DRAFT
from post_scoring.services.errors import SignalFetchError
from post_scoring.services.signal_store import SqlSignalSource
from post_scoring.services.signals import CommentRecord, GiftRecord, ViewRecord
from tests.factories import AUTHOR_ID, FIXED_NOW


@pytest.fixture
def store(session_factory):
    return SqlSignalSource(session_factory)


@pytest.mark.asyncio
async def test_post_scoped_counts(store, add_post, add_rows):
    post_id = await add_post()
    other_id = await add_post()
    await add_rows(
        PostTag(post_id=post_id, tag_id=1),
        PostTag(post_id=post_id, tag_id=2),
        PostTag(post_id=other_id, tag_id=1),
        Report(content_type="post", content_id=post_id),
        Report(content_type="comment", content_id=post_id),
        Report(content_type="post", content_id=other_id),
    )

    assert await store.count_tags(post_id) == 2
    assert await store.count_reports(post_id) == 1


@pytest.mark.asyncio
async def test_list_views_is_capped_and_ordered(store, add_post, add_rows):
    post_id = await add_post()
    await add_rows(
        *(
            PostView(post_id=post_id, viewer_id=f"v{i}", read_duration=i, ip_address="10.0.0.1")
            for i in range(5)
        )
    )

    views = await store.list_views(post_id, 3)

    assert views == [
        ViewRecord("v0", 0.0, 0.0, False, "10.0.0.1"),
        ViewRecord("v1", 1.0, 0.0, False, "10.0.0.1"),
        ViewRecord("v2", 2.0, 0.0, False, "10.0.0.1"),
    ]


@pytest.mark.asyncio
async def test_only_approved_comments_are_listed(store, add_post, add_rows):
    post_id = await add_post()
    await add_rows(Comment(id=1, post_id=post_id, author_id="u1", content="first"))
    await add_rows(
        Comment(id=2, post_id=post_id, author_id="u2", parent_id=1, content="reply"),
        Comment(id=3, post_id=post_id, author_id="u3", status=COMMENT_STATUS_PENDING),
        Comment(id=4, post_id=post_id, author_id="u4", content=None),
    )

    comments = await store.list_approved_comments(post_id, 10)

    assert comments == [
        CommentRecord("u1", None, "first"),
        CommentRecord("u2", 1, "reply"),
        CommentRecord("u4", None, ""),
    ]


@pytest.mark.asyncio
async def test_engagement_reads(store, add_post, add_rows):
    post_id = await add_post()
    await add_rows(
        Gift(post_id=post_id, sender_id="g1", coins=5),
        Gift(post_id=post_id, sender_id=None, coins=1),
        Like(post_id=post_id, user_id="l1"),
        Like(post_id=post_id, user_id="l2"),
        Bookmark(post_id=post_id, user_id="b1"),
        ModerationLog(target_type="post", target_id=str(post_id), action="hide"),
        ModerationLog(target_type="user", target_id=str(post_id), action="warn"),
    )

    assert sorted(await store.list_gifts(post_id), key=str) == sorted(
        [GiftRecord("g1"), GiftRecord(None)], key=str
    )
    assert sorted(await store.list_liker_ids(post_id, 10)) == ["l1", "l2"]
    assert len(await store.list_liker_ids(post_id, 1)) == 1
    assert await store.list_saver_ids(post_id, 10) == ["b1"]
    assert await store.list_moderation_actions(post_id, 5) == ["hide"]


@pytest.mark.asyncio
async def test_profiles(store, add_rows, author_profile):
    await add_rows(author_profile, Profile(user_id="v1", profile_score=25))

    author = await store.get_profile(AUTHOR_ID)
    assert author.profile_score == 80
    assert author.is_verified
    assert await store.get_profile("missing") is None

    viewers = await store.get_profiles(["v1", "missing"])
    assert [(p.user_id, p.profile_score, p.trust_level) for p in viewers] == [("v1", 25, 0)]
    assert await store.get_profiles([]) == []


@pytest.mark.asyncio
async def test_author_history_excludes_current_unscored_and_drafts(store, add_post):
    current = await add_post(quality_score=90.0)
    await add_post(quality_score=40.0, published_at=FIXED_NOW - timedelta(days=5))
    await add_post(quality_score=60.0, published_at=FIXED_NOW - timedelta(days=2))
    await add_post(quality_score=0.0)
    await add_post(quality_score=70.0, status=POST_STATUS_DRAFT)
    await add_post(author_id="someone-else", quality_score=99.0)

    scores = await store.list_author_quality_scores(AUTHOR_ID, current, 20)
    assert scores == [60.0, 40.0]
    assert await store.list_author_quality_scores(AUTHOR_ID, current, 1) == [60.0]


@pytest.mark.asyncio
async def test_database_errors_become_signal_fetch_errors(mocker):
    failing_session = mocker.AsyncMock()
    failing_session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))
    factory = mocker.MagicMock()
    factory.return_value.__aenter__.return_value = failing_session
    factory.return_value.__aexit__.return_value = False

    with pytest.raises(SignalFetchError) as excinfo:
        await SqlSignalSource(factory).list_views(1, 10)
    assert excinfo.value.signal == "views"
