"""Daily word-fragment game: sessions, scoring and leaderboards."""
