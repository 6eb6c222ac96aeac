# tests/services/test_aggregator.py
import asyncio
import logging

import pytest

from post_scoring.core.settings import ScoringLimits
from post_scoring.services.aggregator import SignalAggregator, sample_viewer_ids
from post_scoring.services.signals import (
    CommentRecord,
    GiftRecord,
    ProfileRecord,
    ViewRecord,
)
from tests.factories import AUTHOR_ID, FakeSignalSource, fetch_error, make_post


@pytest.fixture
def populated_source():
    return FakeSignalSource(
        tag_count=3,
        views=[
            ViewRecord("v1", read_duration=40),
            ViewRecord(AUTHOR_ID),
            ViewRecord("v2"),
        ],
        comments=[CommentRecord("v1", content="thoughtful")],
        gifts=[GiftRecord("v2")],
        report_count=1,
        moderation_actions=["hide"],
        liker_ids=["v1"],
        saver_ids=["v2"],
        profiles=[ProfileRecord(AUTHOR_ID, profile_score=80), ProfileRecord("v1", profile_score=30)],
        author_quality_scores=[55.0, 65.0],
    )


def test_sample_viewer_ids_skips_author_and_duplicates():
    views = [
        ViewRecord("a"),
        ViewRecord(AUTHOR_ID),
        ViewRecord("a"),
        ViewRecord(None),
        ViewRecord("b"),
    ]
    assert sample_viewer_ids(views, AUTHOR_ID, 200) == ["a", "b"]


def test_sample_viewer_ids_respects_the_cap():
    views = [ViewRecord(f"v{i}") for i in range(300)]
    sample = sample_viewer_ids(views, AUTHOR_ID, 200)
    assert len(sample) == 200
    assert sample[0] == "v0"


@pytest.mark.asyncio
async def test_collect_reads_every_signal(populated_source, limits):
    snapshot = await SignalAggregator(populated_source, limits).collect(make_post(id=7))

    assert snapshot.tag_count == 3
    assert len(snapshot.views) == 3
    assert snapshot.comments == [CommentRecord("v1", content="thoughtful")]
    assert snapshot.gifts == [GiftRecord("v2")]
    assert snapshot.report_count == 1
    assert snapshot.moderation_actions == ["hide"]
    assert snapshot.liker_ids == ["v1"]
    assert snapshot.saver_ids == ["v2"]
    assert snapshot.author.profile_score == 80
    assert snapshot.author_quality_scores == [55.0, 65.0]
    assert [p.user_id for p in snapshot.viewer_profiles] == ["v1"]
    assert snapshot.failed_signals == []


@pytest.mark.asyncio
async def test_collect_passes_configured_caps(populated_source):
    limits = ScoringLimits(view_sample_limit=2, moderation_log_limit=5, author_history_limit=20)
    await SignalAggregator(populated_source, limits).collect(make_post(id=7))

    calls = dict(populated_source.calls)
    assert calls["list_views"] == (7, 2)
    assert calls["list_moderation_actions"] == (7, 5)
    assert calls["list_author_quality_scores"] == (AUTHOR_ID, 7, 20)
    # Only the two sampled views feed the viewer lookup.
    assert calls["get_profiles"] == (("v1",),)


@pytest.mark.asyncio
async def test_viewer_profiles_are_fetched_once_for_a_sample(limits):
    views = [ViewRecord(f"v{i}") for i in range(250)] + [ViewRecord(AUTHOR_ID)]
    source = FakeSignalSource(views=views)
    await SignalAggregator(source, limits).collect(make_post())

    lookups = [args for name, args in source.calls if name == "get_profiles"]
    assert len(lookups) == 1
    (viewer_ids,) = lookups[0]
    assert len(viewer_ids) == limits.viewer_sample_limit
    assert AUTHOR_ID not in viewer_ids


@pytest.mark.asyncio
async def test_no_viewer_lookup_without_viewers(limits):
    source = FakeSignalSource(views=[ViewRecord(AUTHOR_ID), ViewRecord(None)])
    snapshot = await SignalAggregator(source, limits).collect(make_post())

    assert "get_profiles" not in [name for name, _ in source.calls]
    assert snapshot.viewer_profiles == []


@pytest.mark.asyncio
async def test_failed_reads_fall_back_to_empty_values(populated_source, limits, caplog):
    populated_source.failures = {
        "list_views": fetch_error("views"),
        "count_reports": RuntimeError("boom"),
        "get_profile": fetch_error("author_profile"),
    }
    with caplog.at_level(logging.DEBUG, logger="post_scoring.services.aggregator"):
        snapshot = await SignalAggregator(populated_source, limits).collect(make_post())

    assert snapshot.views == []
    assert snapshot.report_count == 0
    assert snapshot.author is None
    assert sorted(snapshot.failed_signals) == ["author_profile", "reports", "views"]
    # Surviving reads are unaffected.
    assert snapshot.tag_count == 3
    assert snapshot.liker_ids == ["v1"]
    # No views means no viewer sample.
    assert snapshot.viewer_profiles == []
    assert "Unexpected error reading reports" in caplog.text


@pytest.mark.asyncio
async def test_viewer_profile_failure_is_contained(populated_source, limits):
    populated_source.failures = {"get_profiles": fetch_error("viewer_profiles")}
    snapshot = await SignalAggregator(populated_source, limits).collect(make_post())

    assert snapshot.viewer_profiles == []
    assert snapshot.failed_signals == ["viewer_profiles"]
    assert len(snapshot.views) == 3


@pytest.mark.asyncio
async def test_slow_read_times_out_without_blocking_the_rest(populated_source):
    populated_source.delays = {"list_gifts": 5.0}
    limits = ScoringLimits(read_timeout_seconds=0.05)
    snapshot = await asyncio.wait_for(
        SignalAggregator(populated_source, limits).collect(make_post()), timeout=2
    )

    assert snapshot.gifts == []
    assert snapshot.failed_signals == ["gifts"]
    assert snapshot.tag_count == 3


@pytest.mark.asyncio
async def test_phase_one_reads_run_concurrently(populated_source):
    slow = {
        name: 0.2
        for name in ("count_tags", "list_views", "list_gifts", "count_reports", "list_liker_ids")
    }
    populated_source.delays = slow
    limits = ScoringLimits(read_timeout_seconds=1.0)
    loop = asyncio.get_running_loop()
    started = loop.time()
    snapshot = await SignalAggregator(populated_source, limits).collect(make_post())

    assert loop.time() - started < 0.2 * len(slow)
    assert snapshot.failed_signals == []
