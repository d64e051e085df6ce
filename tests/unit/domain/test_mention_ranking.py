"""Tests for preview mention selection."""

from fakes import NOW, make_comment, make_post
from repshield.domain.entities.scan import ProviderSearchResult
from repshield.domain.policies.mention_ranking import (
    build_mentions,
    extract_top_mentions,
    rank_mentions,
)
from repshield.domain.value_objects.enums import MentionType, Sentiment


def _result(posts=(), comments=()):
    return ProviderSearchResult(
        posts=list(posts),
        comments=list(comments),
        total_found=len(posts) + len(comments),
        risk_score=0,
        sentiment=Sentiment.NEUTRAL,
    )


def test_ranks_by_absolute_score():
    result = _result(
        posts=[make_post(0, score=10, created=NOW), make_post(1, score=-50, created=NOW)],
        comments=[make_comment(0, score=30, created=NOW)],
    )
    top = extract_top_mentions(result, 3, NOW)
    assert [m.score for m in top] == [-50, 30, 10]


def test_recency_breaks_ties():
    older = make_post(0, score=10, created=1000)
    newer = make_post(1, score=10, created=2000)
    ranked = rank_mentions(build_mentions(_result(posts=[older, newer]), NOW))
    assert ranked[0].url.endswith("/p1/")


def test_limit_applied():
    result = _result(posts=[make_post(i, score=i) for i in range(10)])
    assert len(extract_top_mentions(result, 3, NOW)) == 3
    assert len(extract_top_mentions(result, 5, NOW)) == 5


def test_none_result_or_zero_limit():
    assert extract_top_mentions(None, 3, NOW) == []
    assert extract_top_mentions(_result(posts=[make_post()]), 0, NOW) == []


def test_post_mention_content_and_url():
    post = make_post(0, title="Acme is a scam", selftext="x" * 300, subreddit="scams")
    mention = build_mentions(_result(posts=[post]), NOW)[0]
    assert mention.type == MentionType.POST
    assert mention.content == "Acme is a scam " + "x" * 150
    assert mention.url == "https://reddit.com/r/scams/comments/p0/"
    assert mention.subreddit == "scams"


def test_comment_mention_truncated():
    comment = make_comment(0, body="y" * 400)
    mention = build_mentions(_result(comments=[comment]), NOW)[0]
    assert mention.type == MentionType.COMMENT
    assert len(mention.content) == 150


def test_absolute_permalink_kept():
    post = make_post(0)
    post.permalink = "https://www.reddit.com/r/test/comments/abc/"
    assert build_mentions(_result(posts=[post]), NOW)[0].url == post.permalink


def test_missing_fields_get_defaults():
    post = make_post(0, subreddit="", created=0)
    mention = build_mentions(_result(posts=[post]), NOW)[0]
    assert mention.subreddit == "unknown"
    assert mention.created == NOW
