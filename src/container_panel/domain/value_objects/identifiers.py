"""Container panel value objects."""

from typing import NewType

ImageId = NewType("ImageId", str)

NAME_SEPARATOR = "/"
DIGEST_PREFIX = "sha256:"
NO_TAG = "<none>"


def display_name(engine_name: str) -> str:
    """Strip the single leading separator the engine puts on names.

    Args:
        engine_name: Name as listed by the engine, e.g. "/web-1".

    Returns:
        Display name, e.g. "web-1". "//web-1" becomes "/web-1".
    """
    if engine_name.startswith(NAME_SEPARATOR):
        return engine_name[len(NAME_SEPARATOR):]
    return engine_name


def strip_digest_prefix(image_id: str) -> ImageId:
    """Remove the hash-algorithm tag from a content-addressed image ID.

    Args:
        image_id: Engine image ID, e.g. "sha256:abc...".

    Returns:
        Bare digest, or the input unchanged when it carries no prefix.
    """
    if image_id.startswith(DIGEST_PREFIX):
        return ImageId(image_id[len(DIGEST_PREFIX):])
    return ImageId(image_id)


def split_repo_tag(repo_tags: list[str]) -> tuple[str, str]:
    """Split the first repo tag into repository and tag.

    Splits on the first colon only. Missing tags, or an empty side of
    the split, yield the "<none>" placeholder.

    Args:
        repo_tags: Engine ``RepoTags`` list, possibly empty.

    Returns:
        (repository, tag).
    """
    if not repo_tags:
        return NO_TAG, NO_TAG
    repository, _, tag = repo_tags[0].partition(":")
    return repository or NO_TAG, tag or NO_TAG
