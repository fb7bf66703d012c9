"""Version request resolution."""

import beartype

import grrsetup.github

LATEST = "latest"


@beartype.beartype
def resolve_version(
    request: str, client: grrsetup.github.GitHubClient, repo: str
) -> str:
    """Turn a version request into a concrete tag.

    "latest" costs one release-index query. Any other value is returned as
    is; a tag that does not exist shows up later as a failed download.
    """
    if request != LATEST:
        return request
    return client.get_latest_tag(repo)
