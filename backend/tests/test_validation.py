"""
Tests for email and collaborator validation.
"""

import pytest

from validation import is_valid_email, clean_collaborators


@pytest.mark.parametrize("value", ["x@y.com", "alice@sample.com", "first.last+tag@mail.sample.org"])
def test_valid_emails(value):
    assert is_valid_email(value) is True


@pytest.mark.parametrize("value", ["", "bad-email", "no-at-sign.com", "a@", "@sample.com", "a b@sample.com"])
def test_invalid_emails(value):
    assert is_valid_email(value) is False


def test_blank_collaborators_are_dropped():
    emails, errors = clean_collaborators(["", "x@y.com", "   "])

    assert errors == []
    assert emails == ["x@y.com"]


def test_one_bad_collaborator_fails_the_list():
    emails, errors = clean_collaborators(["", "bad-email", "x@y.com"])

    assert errors == ["Bad email: bad-email"]


def test_every_bad_collaborator_is_reported():
    _, errors = clean_collaborators(["nope", "x@y.com", "also nope"])

    assert errors == ["Bad email: nope", "Bad email: also nope"]


def test_collaborator_order_kept_and_repeats_collapsed():
    emails, errors = clean_collaborators(["b@sample.com", "a@sample.com", "b@sample.com"])

    assert errors == []
    assert emails == ["b@sample.com", "a@sample.com"]


def test_only_three_collaborators_considered():
    emails, _ = clean_collaborators(["a@sample.com", "b@sample.com", "c@sample.com", "d@sample.com"])

    assert emails == ["a@sample.com", "b@sample.com", "c@sample.com"]
