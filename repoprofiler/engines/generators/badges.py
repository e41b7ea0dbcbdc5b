"""Shields.io badge descriptors conditioned on detected facets."""

from __future__ import annotations

import posixpath

from repoprofiler.models import (
    Badge,
    CicdConfig,
    DeploymentConfig,
    RepositoryMetadata,
    TestConfig,
)

SHIELDS = "https://img.shields.io"


def generate_badges(
    owner: str,
    repository: RepositoryMetadata,
    *,
    cicd: CicdConfig | None = None,
    tests: TestConfig | None = None,
    deployment: DeploymentConfig | None = None,
) -> list[Badge]:
    """License, social, build, coverage and deploy badges, in that order.

    The build badge is emitted for GitHub Actions only and the deploy badge
    for Vercel only; stars and forks are always present.
    """
    slug = f"{owner}/{repository.name}"
    html_url = repository.html_url
    branch = repository.default_branch
    badges: list[Badge] = []

    if repository.license:
        badges.append(
            Badge(
                name="License",
                url=f"{SHIELDS}/github/license/{slug}",
                link=f"{html_url}/blob/{branch}/LICENSE",
                category="license",
            )
        )

    badges.append(
        Badge(
            name="Stars",
            url=f"{SHIELDS}/github/stars/{slug}?style=social",
            link=f"{html_url}/stargazers",
            category="social",
        )
    )
    badges.append(
        Badge(
            name="Forks",
            url=f"{SHIELDS}/github/forks/{slug}?style=social",
            link=f"{html_url}/network/members",
            category="social",
        )
    )

    if cicd is not None and cicd.platform == "github-actions" and cicd.config_files:
        workflow = posixpath.basename(cicd.config_files[0])
        badges.append(
            Badge(
                name="CI",
                url=f"{SHIELDS}/github/actions/workflow/status/{slug}/{workflow}?branch={branch}",
                link=f"{html_url}/actions",
                category="build",
            )
        )

    if tests is not None and tests.coverage:
        badges.append(
            Badge(
                name="Coverage",
                url=f"{SHIELDS}/codecov/c/github/{slug}",
                link=f"https://codecov.io/gh/{slug}",
                category="coverage",
            )
        )

    if deployment is not None and deployment.platform == "vercel":
        badges.append(
            Badge(
                name="Deploy",
                url=f"{SHIELDS}/badge/deploy-vercel-black?logo=vercel",
                link=f"https://vercel.com/new/clone?repository-url={html_url}",
                category="deployment",
            )
        )

    return badges
