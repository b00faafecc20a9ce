import asyncio
from datetime import datetime, timezone

import pytest

from wordfragments.core import SessionNotFound
from wordfragments.services.fragments import fragment_key
from wordfragments.services.sessions import INACTIVE_MESSAGE, game_key
from wordfragments.services.words import PREFIX

pytestmark = pytest.mark.anyio

POST = "t3_post"
TODAY = "2025-03-14"


@pytest.fixture
async def st_day(store):
    await store.set(fragment_key(TODAY), "st", ttl=7 * 24 * 60 * 60)


async def test_start_creates_fresh_active_session(services, st_day):
    game = await services.games.start(POST, "ann")

    assert game.fragment == "st"
    assert game.date == TODAY
    assert (game.score, game.best_word, game.current_word) == (0, "", "")
    assert game.time_left == 60
    assert game.active is True
    assert await services.games.get(POST, "ann") == game


async def test_start_discards_unfinished_session(services, st_day):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "stupendous")

    game = await services.games.start(POST, "ann")
    assert game.score == 0
    assert game.best_word == ""
    assert (await services.games.get(POST, "ann")).score == 0


async def test_sessions_are_scoped_per_post_and_player(services, st_day):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "story")

    assert await services.games.get(POST, "bob") is None
    assert await services.games.get("t3_other", "ann") is None


async def test_submit_valid_word_scores_and_tracks_best(services, st_day):
    await services.games.start(POST, "ann")

    result = await services.games.submit(POST, "ann", "stupendous")
    assert result.valid is True
    assert result.points == 20
    assert result.score == 20
    assert "20 points" in result.message

    result = await services.games.submit(POST, "ann", "stories")
    assert result.score == 31
    assert result.session.current_word == "stories"
    assert result.session.best_word == "stupendous"


async def test_best_word_ties_keep_earlier_word(services, st_day):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "story")
    result = await services.games.submit(POST, "ann", "stone")
    assert result.session.best_word == "story"


async def test_invalid_word_leaves_score_but_refreshes_ttl(services, store, clock, st_day):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "story")
    clock.advance(minutes=4)

    result = await services.games.submit(POST, "ann", "bear")
    assert result.valid is False
    assert result.reason == PREFIX
    assert result.points == 0
    assert result.score == 5
    assert '"st"' in result.message

    clock.advance(minutes=4)
    assert await services.games.get(POST, "ann") is not None


async def test_session_expires_after_ttl(services, clock, st_day):
    await services.games.start(POST, "ann")
    clock.advance(minutes=5, seconds=1)

    assert await services.games.get(POST, "ann") is None
    with pytest.raises(SessionNotFound):
        await services.games.submit(POST, "ann", "story")
    assert await services.games.end(POST, "ann") is None


async def test_submit_without_session_raises(services):
    with pytest.raises(SessionNotFound):
        await services.games.submit(POST, "ghost", "story")


async def test_submit_after_end_is_rejected_without_changes(services, st_day):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "story")
    await services.games.end(POST, "ann")

    result = await services.games.submit(POST, "ann", "stupendous")
    assert result.valid is False
    assert result.message == INACTIVE_MESSAGE
    assert result.session.score == 5
    assert result.session.best_word == "story"
    assert (await services.games.get(POST, "ann")).score == 5


@pytest.fixture
def recorded(services, monkeypatch):
    calls = []
    original = services.leaderboard.record_result

    async def counting(*args):
        calls.append(args)
        await original(*args)

    monkeypatch.setattr(services.leaderboard, "record_result", counting)
    return calls


async def test_end_submits_to_leaderboard_exactly_once(services, st_day, recorded):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "story")

    first = await services.games.end(POST, "ann")
    second = await services.games.end(POST, "ann")
    assert first.active is False and first.time_left == 0
    assert second == first
    assert recorded == [(TODAY, "ann", 5, "story")]

    boards = await services.leaderboard.daily_boards(TODAY)
    assert [(e.username, e.score) for e in boards.score_board] == [("ann", 5)]


async def test_concurrent_end_calls_record_once(services, st_day, recorded):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "story")

    results = await asyncio.gather(*(services.games.end(POST, "ann") for _ in range(4)))

    assert all(game.active is False for game in results)
    assert recorded == [(TODAY, "ann", 5, "story")]


async def test_end_without_score_skips_leaderboard(services, st_day):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "bear")
    await services.games.end(POST, "ann")

    boards = await services.leaderboard.daily_boards(TODAY)
    assert boards.score_board == []
    assert boards.word_board == []


async def test_tick_counts_down_and_ends_once(services, st_day):
    await services.games.start(POST, "ann")
    await services.games.submit(POST, "ann", "stupendous")

    game = await services.games.tick(POST, "ann", 45)
    assert game.active is True
    assert game.time_left == 15

    game = await services.games.tick(POST, "ann", 20)
    assert game.active is False
    assert game.time_left == 0

    await services.games.tick(POST, "ann")
    await services.games.end(POST, "ann")
    boards = await services.leaderboard.daily_boards(TODAY)
    assert [(e.username, e.score) for e in boards.word_board] == [("ann", 20)]


async def test_tick_rejects_negative_elapsed(services, st_day):
    await services.games.start(POST, "ann")
    with pytest.raises(ValueError):
        await services.games.tick(POST, "ann", -1)


async def test_game_across_midnight_counts_for_start_day(services, clock, st_day):
    clock.set(datetime(2025, 3, 14, 23, 59, 30, tzinfo=timezone.utc))
    await services.games.start(POST, "ann")
    clock.advance(seconds=45)
    await services.games.submit(POST, "ann", "story")
    await services.games.end(POST, "ann")

    assert [e.username for e in (await services.leaderboard.daily_boards(TODAY)).score_board] == ["ann"]
    assert (await services.leaderboard.daily_boards("2025-03-15")).score_board == []


async def test_malformed_session_is_treated_as_missing(services, store):
    await store.set(game_key(POST, "ann"), '{"fragment": "st"', ttl=300)

    assert await services.games.get(POST, "ann") is None
    with pytest.raises(SessionNotFound):
        await services.games.submit(POST, "ann", "story")


async def test_end_to_end_daily_play(services, st_day):
    game = await services.games.start(POST, "player1")
    assert game.fragment == "st"

    first = await services.games.submit(POST, "player1", "story")
    assert (first.valid, first.points, first.session.best_word) == (True, 5, "story")

    second = await services.games.submit(POST, "player1", "stupendous")
    assert (second.valid, second.points, second.score) == (True, 20, 25)
    assert second.session.best_word == "stupendous"

    await services.games.end(POST, "player1")

    boards = await services.leaderboard.daily_boards(TODAY)
    expected = [("player1", 25)]
    assert [(e.username, e.score) for e in boards.score_board] == expected
    assert [(e.username, e.score) for e in boards.word_board] == expected
    # Words are still hidden at noon; the word board leader is the teaser.
    assert boards.word_board[0].best_word == "stupendous"
