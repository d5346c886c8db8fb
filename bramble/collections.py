from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from .content import Post


class PostCollection(Sequence[Post]):
    """Lightweight helper for working with lists of posts in templates and code."""

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PostCollection(self._posts[item])
        return self._posts[item]

    def with_tag(self, tag: str) -> PostCollection:
        return PostCollection(p for p in self._posts if tag in p.tags)

    def in_category(self, category: str) -> PostCollection:
        return PostCollection(p for p in self._posts if category in p.categories)

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort posts by date, then by slug.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new PostCollection; this one keeps discovery order.
        """
        return PostCollection(
            sorted(self._posts, key=lambda p: (p.date, p.slug), reverse=reverse)
        )

    def latest(self, count: int = 5) -> PostCollection:
        return self.sorted()[:count]

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"


class LabelIndex(Mapping[str, PostCollection]):
    """Mapping of tag or category name to the posts carrying it."""

    def __init__(self, mapping: Mapping[str, Iterable[Post]]):
        self._mapping = {k: PostCollection(v) for k, v in mapping.items()}

    def __getitem__(self, key: str) -> PostCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"LabelIndex({len(self._mapping)} labels)"


def build_label_index(posts: Iterable[Post], attribute: str) -> LabelIndex:
    """Build an index mapping each label to the posts that declare it.

    Buckets keep post-list order and hold each post at most once.

    Args:
        posts: Posts in discovery order.
        attribute: "tags" or "categories".

    Returns:
        LabelIndex of label to PostCollection.
    """
    index: dict[str, list[Post]] = {}
    for post in posts:
        for label in dict.fromkeys(getattr(post, attribute)):
            index.setdefault(label, []).append(post)
    return LabelIndex(index)
