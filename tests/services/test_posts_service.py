import datetime

import pytest

from blogposts.schemas.post import PostDetail, PostSummary
from blogposts.services.posts_service import (
    PostsService,
    _derive_title,
    _normalize_tags,
    parse_post,
)
from tests.conftest import write_post


@pytest.fixture
def corpus(posts_dir):
    write_post(
        posts_dir,
        "2019/http-caching.md",
        """
        ---
        title: "HTTP caching, explained"
        date: 2019-06-02T09:30:00+02:00
        draft: false
        tags: [http, caching]
        summary: How Cache-Control and ETags fit together.
        ---
        Caching body with ![diagram](img/etag.png).
        """,
    )
    write_post(
        posts_dir,
        "2018/shopify-oauth.md",
        """
        +++
        date = "2018-11-20T21:15:03-05:00"
        draft = false
        title = "Shopify OAuth middleware"
        +++
        OAuth body.
        """,
    )
    write_post(
        posts_dir,
        "2020/composition.md",
        """
        ---
        title: Functional composition
        date: 2020-01-15T08:00:00Z
        draft: true
        ---
        Still writing this one.
        """,
    )
    write_post(
        posts_dir,
        "undated.md",
        """
        ---
        title: Undated
        draft: false
        ---
        No date yet.
        """,
    )
    write_post(posts_dir, "broken.md", "---\ntitle: [oops\n---\nbody\n")
    return posts_dir


def _service(repo):
    return PostsService(
        repo, words_per_minute=200, images_url="http://localhost:8000/images"
    )


def test_list_posts_excludes_drafts_and_sorts_newest_first(repo, corpus):
    result = _service(repo).list_posts()

    assert [post.slug for post in result] == [
        "2019/http-caching",
        "2018/shopify-oauth",
        "undated",
    ]
    assert all(isinstance(post, PostSummary) for post in result)
    assert all(post.draft is False for post in result)


def test_list_posts_can_include_drafts(repo, corpus):
    result = _service(repo).list_posts(include_drafts=True)

    assert [post.slug for post in result] == [
        "2020/composition",
        "2019/http-caching",
        "2018/shopify-oauth",
        "undated",
    ]
    assert result[0].draft is True


def test_list_posts_maps_front_matter_fields(repo, corpus):
    caching = _service(repo).list_posts()[0]

    assert caching.title == "HTTP caching, explained"
    assert caching.date == "2019-06-02T09:30:00+02:00"
    assert caching.tags == ["http", "caching"]
    assert caching.summary == "How Cache-Control and ETags fit together."
    assert caching.readingTime == "1 min"


def test_get_post_returns_detail_with_rewritten_images(repo, corpus):
    post = _service(repo).get_post("2019/http-caching")

    assert isinstance(post, PostDetail)
    assert post.content == (
        "Caching body with "
        "![diagram](http://localhost:8000/images/2019/img/etag.png)."
    )


def test_get_post_hides_drafts_unless_asked(repo, corpus):
    service = _service(repo)

    assert service.get_post("2020/composition") is None
    draft = service.get_post("2020/composition", include_drafts=True)
    assert draft is not None
    assert draft.draft is True


def test_get_post_returns_none_for_missing_or_broken(repo, corpus):
    service = _service(repo)

    assert service.get_post("nope") is None
    assert service.get_post("broken") is None
    assert service.get_post("../outside") is None


def test_get_post_serves_page_bundles(repo, posts_dir):
    write_post(
        posts_dir,
        "bundle-post/index.md",
        """
        ---
        title: Bundle
        date: 2021-01-01T00:00:00Z
        ---
        ![cover](cover.png)
        """,
    )

    post = _service(repo).get_post("bundle-post")

    assert post.slug == "bundle-post"
    assert post.content == (
        "![cover](http://localhost:8000/images/bundle-post/cover.png)"
    )


def test_load_posts_skips_unparseable_files(repo, corpus, caplog):
    posts = _service(repo).load_posts()

    assert "broken" not in [post.slug for post in posts]
    assert len(posts) == 4
    assert "Failed to parse post broken" in caplog.text


def test_parse_post_reads_fields(repo, corpus):
    post = parse_post(corpus / "2018" / "shopify-oauth.md", repo=repo)

    assert post.path == "2018/shopify-oauth.md"
    assert post.slug == "2018/shopify-oauth"
    assert post.title == "Shopify OAuth middleware"
    assert post.format == "toml"
    assert post.draft is False
    assert post.date == datetime.datetime(
        2018, 11, 20, 21, 15, 3, tzinfo=datetime.timezone(datetime.timedelta(hours=-5))
    )
    assert post.body.strip() == "OAuth body."


def test_parse_post_treats_invalid_draft_flag_as_draft(repo, posts_dir):
    path = write_post(
        posts_dir,
        "odd.md",
        """
        ---
        title: Odd
        draft: sometimes
        ---
        body
        """,
    )

    post = parse_post(path, repo=repo)

    assert post.draft is True


def test_parse_post_accepts_string_draft_flag(repo, posts_dir):
    path = write_post(posts_dir, "quoted.md", '---\ntitle: Q\ndraft: "false"\n---\nx\n')

    assert parse_post(path, repo=repo).draft is False


def test_untitled_post_gets_title_from_slug(repo, posts_dir):
    write_post(posts_dir, "my_first-post.md", "---\ndate: 2020-01-01\n---\nbody\n")

    result = _service(repo).list_posts()

    assert result[0].title == "My First Post"


def test_naive_and_aware_dates_sort_together(repo, posts_dir):
    write_post(posts_dir, "naive.md", "---\ntitle: N\ndate: 2020-01-02\n---\nx\n")
    write_post(
        posts_dir,
        "aware.md",
        "---\ntitle: A\ndate: 2020-01-01T23:00:00-05:00\n---\nx\n",
    )

    result = _service(repo).list_posts()

    # 2020-01-01T23:00-05:00 is 2020-01-02T04:00Z, later than naive midnight UTC
    assert [post.slug for post in result] == ["aware", "naive"]


def test_reading_time_uses_words_per_minute(repo, posts_dir):
    write_post(posts_dir, "long.md", "---\ntitle: L\n---\n" + "word " * 450)

    result = PostsService(repo, words_per_minute=200).list_posts()

    assert result[0].readingTime == "3 min"


def test_derive_title_prefers_metadata():
    assert _derive_title("Given", "2019/slug-here") == "Given"
    assert _derive_title("", "2019/slug-here") == "Slug Here"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, []),
        ("solo", ["solo"]),
        (["a", "", "b"], ["a", "b"]),
        (("x",), ["x"]),
        (7, ["7"]),
    ],
)
def test_normalize_tags(value, expected):
    assert _normalize_tags(value) == expected


def test_list_posts_lists_one_file_per_slug(repo, posts_dir, caplog):
    write_post(posts_dir, "oauth.md", "---\ntitle: Served\n---\nA.\n")
    write_post(posts_dir, "oauth.markdown", "---\ntitle: Shadowed\n---\nB.\n")

    result = _service(repo).list_posts()

    assert [(p.slug, p.title) for p in result] == [("oauth", "Served")]
    assert _service(repo).get_post("oauth").title == "Served"
    assert "oauth.markdown" in caplog.text
