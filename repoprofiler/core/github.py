"""GitHub repository reference helpers."""

from __future__ import annotations


def parse_repo_url(repo_url: str) -> tuple[str, str]:
    """Extract (owner, repo) from a GitHub URL or an ``owner/repo`` shorthand.

    Raises ValueError if the reference cannot be parsed.
    """
    result = _extract_owner_repo(repo_url)
    if result is None:
        raise ValueError(f"cannot parse GitHub repo reference: {repo_url!r}")
    owner, repo = result.split("/", 1)
    return owner, repo


def _extract_owner_repo(repo_url: str) -> str | None:
    """Extract 'owner/repo' from a GitHub reference.

    Handles:
      - owner/repo
      - https://github.com/owner/repo
      - https://github.com/owner/repo.git
      - https://github.com/owner/repo/tree/main/src
      - git@github.com:owner/repo.git
    """
    repo_url = repo_url.strip().rstrip("/")
    if repo_url.endswith(".git"):
        repo_url = repo_url[:-4]
    if not repo_url:
        return None

    # SSH format: git@github.com:owner/repo
    if repo_url.startswith("git@"):
        colon_idx = repo_url.find(":")
        if colon_idx == -1:
            return None
        return _join(repo_url[colon_idx + 1 :].split("/"))

    # HTTPS format: keep the two segments after the host
    if "://" in repo_url:
        _, _, rest = repo_url.partition("://")
        segments = rest.split("/")[1:]
        return _join(segments[:2])

    if repo_url.startswith("github.com/"):
        return _join(repo_url.split("/")[1:3])

    return _join(repo_url.split("/"))


def _join(parts: list[str]) -> str | None:
    if len(parts) == 2 and all(parts):
        return f"{parts[0]}/{parts[1]}"
    return None
