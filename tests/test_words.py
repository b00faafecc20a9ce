import pytest

from wordfragments.services.words import (
    CHARACTERS,
    LENGTH,
    PREFIX,
    UNKNOWN_WORD,
    WordList,
    WordValidator,
    score_word,
)


@pytest.mark.parametrize(
    "word, expected",
    [("cat", 3), ("story", 5), ("stories", 11), ("alternate", 17), ("stupendous", 20)],
)
def test_score_rewards_length_past_five(word, expected):
    assert score_word(word) == expected
    assert WordValidator.score(word) == expected


def test_validate_accepts_prefixed_words_case_insensitively():
    validator = WordValidator()
    assert validator.validate("antelope", "an")
    assert validator.validate("Antelope", "AN")


def test_validate_rejections_carry_reason():
    validator = WordValidator()
    assert validator.check("bear", "an").reason == PREFIX
    assert validator.check("an", "an").reason == LENGTH
    assert validator.check("an" + "t" * 19, "an").reason == LENGTH
    assert validator.check("an-t", "an").reason == CHARACTERS
    assert validator.check("anté", "an").reason == CHARACTERS
    assert not validator.validate("bear", "an")


def test_length_bounds_are_inclusive():
    validator = WordValidator()
    assert validator.validate("ant", "an")
    assert validator.validate("an" + "t" * 18, "an")


def test_lexicon_restricts_to_known_words():
    validator = WordValidator(WordList(["Antelope", "anthem"]))
    assert validator.validate("antelope", "an")
    assert validator.check("antzzz", "an").reason == UNKNOWN_WORD


def test_word_list_from_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("# sample\nStory\n\nstupendous\n", encoding="utf-8")

    words = WordList.from_file(path)
    assert len(words) == 2
    assert "STORY" in words
    assert "# sample" not in words


def test_word_list_cannot_be_empty():
    with pytest.raises(ValueError):
        WordList(["", "  "])
