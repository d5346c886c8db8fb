from datetime import datetime

from bramble.collections import LabelIndex, PostCollection, build_label_index


class FakePost:
    def __init__(self, slug, date=None, tags=(), categories=()):
        self.slug = slug
        self.date = date or datetime(2024, 1, 1)
        self.tags = tuple(tags)
        self.categories = tuple(categories)

    def __repr__(self):
        return f"FakePost({self.slug})"


def test_every_declared_label_lists_the_post():
    a = FakePost("a", tags=["go", "web"], categories=["code"])
    b = FakePost("b", tags=["web"])
    c = FakePost("c")
    posts = [a, b, c]

    tags = build_label_index(posts, "tags")
    categories = build_label_index(posts, "categories")

    assert set(tags) == {"go", "web"}
    assert list(tags["go"]) == [a]
    assert list(tags["web"]) == [a, b]
    assert list(categories) == ["code"]
    assert list(categories["code"]) == [a]
    # undeclared labels never list the post
    for label, bucket in tags.items():
        for post in bucket:
            assert label in post.tags
    assert all(c not in bucket for bucket in tags.values())


def test_buckets_keep_discovery_order_not_date_or_name():
    late = FakePost("zeta", date=datetime(2024, 6, 1), tags=["release"])
    early = FakePost("alpha", date=datetime(2023, 1, 1), tags=["release"])
    mid = FakePost("mid", date=datetime(2024, 3, 1), tags=["release"])
    tags = build_label_index([late, early, mid], "tags")
    assert [p.slug for p in tags["release"]] == ["zeta", "alpha", "mid"]


def test_each_post_appears_once_per_label():
    post = FakePost("dup", tags=["go", "go"])
    other = FakePost("other", tags=["go"])
    tags = build_label_index([post, other], "tags")
    assert list(tags["go"]) == [post, other]


def test_empty_post_list():
    index = build_label_index([], "tags")
    assert isinstance(index, LabelIndex)
    assert len(index) == 0
    assert index.get("missing") is None


def test_post_collection_helpers():
    a = FakePost("a", date=datetime(2024, 1, 2), tags=["go"], categories=["code"])
    b = FakePost("b", date=datetime(2024, 1, 3))
    c = FakePost("c", date=datetime(2024, 1, 1), tags=["go"])
    posts = PostCollection([a, b, c])

    assert len(posts) == 3
    assert [p.slug for p in posts.sorted()] == ["b", "a", "c"]
    assert [p.slug for p in posts.sorted(reverse=False)] == ["c", "a", "b"]
    # sorting leaves the original order alone
    assert [p.slug for p in posts] == ["a", "b", "c"]
    assert [p.slug for p in posts.latest(2)] == ["b", "a"]
    assert isinstance(posts.latest(2), PostCollection)
    assert [p.slug for p in posts.with_tag("go")] == ["a", "c"]
    assert [p.slug for p in posts.in_category("code")] == ["a"]
    assert posts[0] is a
    assert isinstance(posts[1:], PostCollection)
