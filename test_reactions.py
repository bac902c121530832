#!/usr/bin/env python3
"""
Reaction vs agreement detection.
"""
from thread_topics.reactions import is_agreement, is_reaction


def test_reactions():
    for text in ["", "   ", "lol", "😂😂", "whoa", "so good", "!!!"]:
        assert is_reaction(text), text


def test_titles_are_not_reactions():
    assert not is_reaction("Die Hard is my favorite movie of all time")
    assert not is_reaction("Die Hard")


def test_agreement():
    for text in ["yes absolutely", "this!", "same", "👏👏", "came here to say this", "Agreed."]:
        assert is_agreement(text), text


def test_amusement_and_surprise_are_not_agreement():
    for text in ["", "lol", "😂", "whoa", "omg"]:
        assert not is_agreement(text), text


def test_long_text_is_not_agreement():
    assert not is_agreement("yes, and also the one where they go to the beach and the dog runs off")


if __name__ == "__main__":
    test_reactions()
    test_agreement()
    print("ok")
