"""Ranked listings and vote aggregates."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from linkboard.core.errors import ValidationError
from linkboard.models import Post
from linkboard.schemas import SortMode
from linkboard.services import RankingEngine


async def _backdate(database, post_id, **delta):
    created = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(**delta)
    async with database.session() as session:
        await session.execute(update(Post).where(Post.id == post_id).values(created_at=created))
        await session.commit()


@pytest.fixture
async def voters(auth):
    return [await auth.register(f"voter{i}", "pw") for i in range(5)]


async def _vote_many(content, post_id, voters, directions):
    for user_id, direction in zip(voters, directions):
        await content.cast_vote(post_id, user_id, direction)


async def test_single_post_scenario(auth, content, ranking):
    alice = await auth.register("alice", "pw1")
    cats = await content.create_subreddit("cats")
    post_id = await content.create_post(alice, "x", "http://x", cats)
    await content.cast_vote(post_id, alice, 1)

    (post,) = await ranking.list_posts()
    assert post.id == post_id
    assert (post.vote_score, post.num_upvotes, post.num_downvotes) == (1, 1, 0)
    assert post.user.username == "alice"
    assert post.subreddit.name == "cats"


async def test_post_without_votes_scores_zero(content, ranking, alice, cats):
    await content.create_post(alice, "x", "http://x", cats)
    (post,) = await ranking.list_posts()
    assert (post.vote_score, post.num_upvotes, post.num_downvotes) == (0, 0, 0)


async def test_aggregate_identities(content, ranking, alice, cats, voters):
    post_id = await content.create_post(alice, "x", "http://x", cats)
    directions = [1, 1, -1, 0, 1]
    await _vote_many(content, post_id, voters, directions)

    post = await ranking.get_post(post_id)
    assert post.vote_score == post.num_upvotes - post.num_downvotes == 2
    assert post.num_upvotes + post.num_downvotes == sum(1 for d in directions if d != 0)


async def test_changed_vote_recomputes_aggregates(content, ranking, alice, cats):
    post_id = await content.create_post(alice, "x", "http://x", cats)
    await content.cast_vote(post_id, alice, 1)
    await content.cast_vote(post_id, alice, -1)
    post = await ranking.get_post(post_id)
    assert (post.vote_score, post.num_upvotes, post.num_downvotes) == (-1, 0, 1)


async def test_get_post_not_found(ranking):
    assert await ranking.get_post(404) is None


async def test_new_orders_by_creation_time(database, content, ranking, alice, cats):
    old = await content.create_post(alice, "old", "http://old", cats)
    mid = await content.create_post(alice, "mid", "http://mid", cats)
    new = await content.create_post(alice, "new", "http://new", cats)
    await _backdate(database, old, hours=2)
    await _backdate(database, mid, hours=1)

    posts = await ranking.list_posts(mode="new")
    assert [p.id for p in posts] == [new, mid, old]
    created = [p.created_at for p in posts]
    assert created == sorted(created, reverse=True)


async def test_default_mode_is_new(database, content, ranking, alice, cats):
    old = await content.create_post(alice, "old", "http://old", cats)
    new = await content.create_post(alice, "new", "http://new", cats)
    await _backdate(database, old, hours=1)
    assert [p.id for p in await ranking.list_posts()] == [new, old]


async def test_top_orders_by_score(content, ranking, alice, cats, voters):
    low = await content.create_post(alice, "low", "http://low", cats)
    high = await content.create_post(alice, "high", "http://high", cats)
    mid = await content.create_post(alice, "mid", "http://mid", cats)
    await _vote_many(content, low, voters, [-1, -1])
    await _vote_many(content, high, voters, [1, 1, 1])
    await _vote_many(content, mid, voters, [1])

    posts = await ranking.list_posts(mode=SortMode.TOP)
    assert [p.id for p in posts] == [high, mid, low]
    scores = [p.vote_score for p in posts]
    assert scores == sorted(scores, reverse=True)


async def test_hot_favours_recent_posts(database, content, ranking, alice, cats, voters):
    old_popular = await content.create_post(alice, "old", "http://old", cats)
    fresh = await content.create_post(alice, "fresh", "http://fresh", cats)
    await _vote_many(content, old_popular, voters, [1, 1, 1, 1, 1])
    await _vote_many(content, fresh, voters, [1, 1])
    await _backdate(database, old_popular, hours=10)
    await _backdate(database, fresh, minutes=10)

    assert [p.id for p in await ranking.list_posts(mode="top")] == [old_popular, fresh]
    assert [p.id for p in await ranking.list_posts(mode="hot")] == [fresh, old_popular]


async def test_hot_handles_brand_new_posts(content, ranking, alice, cats):
    post_id = await content.create_post(alice, "now", "http://now", cats)
    await content.cast_vote(post_id, alice, 1)
    (post,) = await ranking.list_posts(mode="hot")
    assert post.vote_score == 1


async def test_hot_ties_break_by_creation_time(database, content, ranking, alice, cats):
    older = await content.create_post(alice, "older", "http://older", cats)
    newer = await content.create_post(alice, "newer", "http://newer", cats)
    await _backdate(database, older, hours=3)
    await _backdate(database, newer, hours=1)
    assert [p.id for p in await ranking.list_posts(mode="hot")] == [newer, older]


async def test_subreddit_filter(content, ranking, alice, cats):
    dogs = await content.create_subreddit("dogs")
    cat_post = await content.create_post(alice, "cat", "http://cat", cats)
    await content.create_post(alice, "dog", "http://dog", dogs)

    posts = await ranking.list_posts(subreddit_id=cats)
    assert [p.id for p in posts] == [cat_post]
    assert len(await ranking.list_posts()) == 2


async def test_listing_is_capped(content, ranking, alice, cats):
    for i in range(30):
        await content.create_post(alice, f"post {i}", f"http://{i}", cats)
    assert len(await ranking.list_posts()) == 25


async def test_custom_limit(database, content, alice, cats):
    for i in range(5):
        await content.create_post(alice, f"post {i}", f"http://{i}", cats)
    assert len(await RankingEngine(database, limit=3).list_posts()) == 3


async def test_unknown_mode_rejected(ranking):
    with pytest.raises(ValidationError):
        await ranking.list_posts(mode="controversial")


@pytest.mark.parametrize("floor, expected", [(1.0, "fresh_first"), (3600.0, "old_first")])
async def test_hot_age_floor_changes_order(database, content, alice, cats, voters, floor, expected):
    fresh = await content.create_post(alice, "fresh", "http://fresh", cats)
    old = await content.create_post(alice, "old", "http://old", cats)
    await content.cast_vote(fresh, voters[0], 1)
    await _vote_many(content, old, voters, [1, 1, 1])
    await _backdate(database, old, hours=2)

    posts = await RankingEngine(database, hot_age_floor_seconds=floor).list_posts(mode="hot")

    order = [fresh, old] if expected == "fresh_first" else [old, fresh]
    assert [p.id for p in posts] == order


@pytest.mark.parametrize("floor", [0.0, -1.0])
def test_hot_age_floor_must_be_positive(database, floor):
    with pytest.raises(ValueError):
        RankingEngine(database, hot_age_floor_seconds=floor)
