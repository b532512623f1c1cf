#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for @mention resolution on the usertext surface."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from surfacemark import InvalidArgument, register_resolver, render, set_username_callbacks


USERS = {"bob": "Bobby", "ann": "Ann"}


@pytest.fixture
def known_users():
    calls = []

    def exists(name):
        calls.append(("exists", name))
        return name in USERS

    def display(name):
        calls.append(("display", name))
        return USERS[name]

    register_resolver(exists, display)
    return calls


# -----------------------------------------------------------------------------

def test_no_resolver_leaves_text():
    assert render("hi @bob") == "<p>hi @bob</p>\n"


def test_known_user_becomes_link(known_users):
    html = render("hi @bob")
    assert html == '<p>hi <a href="/u/bob" class="mention">@Bobby</a></p>\n'


def test_unknown_user_stays_text(known_users):
    html = render("hi @eve")
    assert html == "<p>hi @eve</p>\n"
    assert ("display", "eve") not in known_users


def test_calls_in_document_order(known_users):
    render("@ann then @eve then @bob")
    assert known_users == [
        ("exists", "ann"), ("display", "ann"),
        ("exists", "eve"),
        ("exists", "bob"), ("display", "bob"),
    ]


def test_no_caching_across_repeated_mentions(known_users):
    render("@bob @bob")
    assert known_users.count(("exists", "bob")) == 2


def test_email_address_is_not_a_mention(known_users):
    html = render("mail bob@example.com")
    assert 'class="mention"' not in html
    assert known_users == []


def test_mention_inside_link_text_is_plain(known_users):
    html = render("[@bob](http://example.com)")
    assert 'class="mention"' not in html
    assert "@bob</a>" in html


def test_mention_link_is_not_decorated(known_users):
    html = render("@bob", nofollow=True, target="_blank")
    assert html == '<p><a href="/u/bob" class="mention">@Bobby</a></p>\n'


def test_display_name_is_escaped():
    register_resolver(lambda n: True, lambda n: "<b>x</b>")
    assert "@&lt;b&gt;x&lt;/b&gt;</a>" in render("@bob")


def test_exists_failure_fails_closed():
    def exists(name):
        raise RuntimeError("directory down")

    register_resolver(exists, lambda n: "Bobby")
    assert render("@bob") == "<p>@bob</p>\n"


def test_display_failure_fails_open():
    def display(name):
        raise RuntimeError("directory down")

    register_resolver(lambda n: True, display)
    assert render("@bob") == '<p><a href="/u/bob" class="mention">@bob</a></p>\n'


def test_wiki_surface_ignores_resolver(known_users):
    assert render("@bob", surface="wiki") == "<p>@bob</p>\n"
    assert known_users == []


def test_reregistration_replaces_previous_pair(known_users):
    register_resolver(lambda n: True, lambda n: n.upper())
    assert '@BOB</a>' in render("@bob")
    assert known_users == []


def test_clearing_callbacks():
    set_username_callbacks(lambda n: True, None)
    assert 'class="mention"' in render("@bob")
    assert set_username_callbacks(None, None) is True
    assert render("@bob") == "<p>@bob</p>\n"


def test_register_rejects_non_callable():
    with pytest.raises(InvalidArgument, match=r"parameter:<username_exists> must be callable"):
        set_username_callbacks("nope", None)
    with pytest.raises(TypeError, match=r"parameter:<username_to_display_name> must be callable"):
        set_username_callbacks(None, 3)


def test_failed_registration_keeps_previous_pair(known_users):
    with pytest.raises(InvalidArgument):
        register_resolver(lambda n: True, "nope")
    assert '@Bobby</a>' in render("@bob")


# -----------------------------------------------------------------------------
