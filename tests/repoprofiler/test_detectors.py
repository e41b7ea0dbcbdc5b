"""Tests for the heuristic detectors and their isolated fan-out."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from repoprofiler.engines.detectors import (
    DetectionContext,
    detect_cicd,
    detect_deployment,
    detect_test_config,
    extract_api_endpoints,
    extract_env_variables,
    run_detectors,
)
from repoprofiler.engines.detectors.endpoints import dedupe_endpoints, extract_parameters
from repoprofiler.engines.detectors.env_vars import parse_env_example, scan_env_reads
from repoprofiler.engines.manifest import ManifestData
from repoprofiler.models import ApiEndpoint, CodeSnippet


def _ctx(source, tree, **kwargs) -> DetectionContext:
    return DetectionContext(client=source, owner="acme", repo="demo", tree=tree, **kwargs)


def _snippet(file_name: str, content: str) -> CodeSnippet:
    return CodeSnippet(file_name=file_name, content=content)


CI_WORKFLOW = """\
name: CI
on: push
jobs:
  build:
    runs-on: ubuntu-22.04
    steps:
      - uses: actions/checkout@v4
      - run: npm ci
      - run: npm test
      - run: npm run deploy
"""

LINT_WORKFLOW = """\
name: Lint
on: pull_request
jobs:
  lint:
    runs-on: ubuntu-22.04
    steps:
      - run: npm run lint
"""


# ── CI/CD ─────────────────────────────────────────────────────────────────


class TestCicd:
    @pytest.mark.anyio
    async def test_github_actions_test_and_deploy(self, fake_source, make_tree):
        tree = make_tree(".github/", ".github/workflows/", ".github/workflows/ci.yml")
        source = fake_source(tree, {".github/workflows/ci.yml": CI_WORKFLOW})
        config = await detect_cicd(_ctx(source, tree))
        assert config is not None
        assert config.platform == "github-actions"
        assert config.has_testing
        assert config.has_deployment
        assert config.workflows == ("CI",)
        assert config.config_files == (".github/workflows/ci.yml",)
        assert config.jobs[0].name == "build"
        assert [step.run for step in config.jobs[0].steps][1:] == ["npm ci", "npm test", "npm run deploy"]

    @pytest.mark.anyio
    async def test_no_markers(self, fake_source, make_tree):
        tree = make_tree(".github/workflows/lint.yaml")
        source = fake_source(tree, {".github/workflows/lint.yaml": LINT_WORKFLOW})
        config = await detect_cicd(_ctx(source, tree))
        assert config is not None
        assert not config.has_testing
        assert not config.has_deployment

    @pytest.mark.anyio
    async def test_broken_workflow_is_skipped(self, fake_source, make_tree):
        tree = make_tree(".github/workflows/broken.yml", ".github/workflows/ci.yml")
        files = {
            ".github/workflows/broken.yml": "jobs: [unclosed",
            ".github/workflows/ci.yml": CI_WORKFLOW,
        }
        config = await detect_cicd(_ctx(fake_source(tree, files), tree))
        assert config is not None
        assert config.workflows == ("CI",)
        assert config.has_testing

    @pytest.mark.anyio
    async def test_only_first_workflows_are_read(self, fake_source, make_tree):
        paths = [f".github/workflows/w{i}.yml" for i in range(5)]
        tree = make_tree(*paths)
        source = fake_source(tree, {path: LINT_WORKFLOW for path in paths})
        config = await detect_cicd(_ctx(source, tree))
        assert len(source.content_calls) == 3
        assert len(config.config_files) == 3

    @pytest.mark.anyio
    async def test_absent_content_is_not_detected(self, fake_source, make_tree):
        tree = make_tree(".github/workflows/ci.yml")
        assert await detect_cicd(_ctx(fake_source(tree), tree)) is None

    @pytest.mark.anyio
    async def test_no_config(self, fake_source, make_tree):
        tree = make_tree("README.md")
        assert await detect_cicd(_ctx(fake_source(tree), tree)) is None

    @pytest.mark.anyio
    async def test_gitlab_fallback(self, fake_source, make_tree):
        tree = make_tree(".gitlab-ci.yml")
        content = "stages: [check]\nunit:\n  stage: check\n  script:\n    - pytest -q\n.base:\n  script: echo\n"
        config = await detect_cicd(_ctx(fake_source(tree, {".gitlab-ci.yml": content}), tree))
        assert config.platform == "gitlab-ci"
        assert [job.name for job in config.jobs] == ["unit"]
        assert config.has_testing
        assert not config.has_deployment

    @pytest.mark.anyio
    async def test_jenkins_stages(self, fake_source, make_tree):
        tree = make_tree("Jenkinsfile")
        content = "pipeline {\n  stages {\n    stage('Build') {}\n    stage(\"Deploy\") {}\n  }\n}\n"
        config = await detect_cicd(_ctx(fake_source(tree, {"Jenkinsfile": content}), tree))
        assert config.platform == "jenkins"
        assert [job.name for job in config.jobs] == ["Build", "Deploy"]
        assert config.has_deployment


# ── tests ─────────────────────────────────────────────────────────────────


class TestTestConfig:
    @pytest.mark.anyio
    async def test_jest_from_manifest(self, fake_source, make_tree):
        tree = make_tree("package.json", "src/App.test.js")
        manifest = ManifestData(
            file_name="package.json",
            package_managers=("npm",),
            dependencies={"react": "^18.0.0", "jest": "^29.0.0"},
            scripts={"test": "jest", "build": "next build"},
        )
        config = await detect_test_config(_ctx(fake_source(tree), tree, manifest=manifest))
        assert config.framework == "Jest"
        assert config.unit_tests
        assert not config.e2e_tests
        assert config.commands == ("npm test",)
        assert config.test_files == ("src/App.test.js",)

    @pytest.mark.anyio
    async def test_browser_framework_sets_e2e(self, fake_source, make_tree):
        tree = make_tree("package.json")
        manifest = ManifestData(
            file_name="package.json",
            package_managers=("yarn",),
            dependencies={"@playwright/test": "1.44"},
            scripts={"test:e2e": "playwright test", "coverage": "c8"},
        )
        config = await detect_test_config(_ctx(fake_source(tree), tree, manifest=manifest))
        assert config.framework == "Playwright"
        assert config.e2e_tests
        assert config.coverage
        assert config.commands == ("yarn run test:e2e",)

    @pytest.mark.anyio
    async def test_language_default_command(self, fake_source, make_tree):
        tree = make_tree("tests/test_app.py")
        config = await detect_test_config(_ctx(fake_source(tree), tree, language="Python"))
        assert config.framework == "Unknown"
        assert config.unit_tests
        assert config.commands == ("pytest",)

    @pytest.mark.anyio
    async def test_test_files_are_capped(self, fake_source, make_tree):
        tree = make_tree(*(f"tests/test_{i}.py" for i in range(15)))
        config = await detect_test_config(_ctx(fake_source(tree), tree))
        assert len(config.test_files) == 10

    @pytest.mark.anyio
    async def test_no_signal(self, fake_source, make_tree):
        tree = make_tree("src/index.js", "package.json")
        assert await detect_test_config(_ctx(fake_source(tree), tree)) is None


# ── deployment ────────────────────────────────────────────────────────────


class TestDeployment:
    @pytest.mark.anyio
    async def test_vercel_with_env_example(self, fake_source, make_tree):
        tree = make_tree("vercel.json", ".env.example", "package.json")
        vercel = json.dumps({"framework": "nextjs", "build": {"command": "next build"}})
        config = await detect_deployment(_ctx(fake_source(tree, {"vercel.json": vercel}), tree))
        assert config.platform == "vercel"
        assert config.requires_env
        assert config.build_command == "next build"
        assert config.platform_config.framework == "nextjs"
        assert config.config_files == ("vercel.json",)

    @pytest.mark.anyio
    async def test_priority_order(self, fake_source, make_tree):
        tree = make_tree("Dockerfile", "netlify.toml")
        content = '[build]\ncommand = "npm run build"\npublish = "dist"\n'
        config = await detect_deployment(_ctx(fake_source(tree, {"netlify.toml": content}), tree))
        assert config.platform == "netlify"
        assert config.build_command == "npm run build"
        assert config.platform_config.output_directory == "dist"
        assert not config.requires_env

    @pytest.mark.anyio
    async def test_parseable_marker_preferred_over_tree_order(self, fake_source, make_tree):
        tree = make_tree("_redirects", "netlify.toml")
        content = '[build]\ncommand = "npm run build"\npublish = "dist"\n'
        source = fake_source(tree, {"_redirects": "/* /index.html 200\n", "netlify.toml": content})
        config = await detect_deployment(_ctx(source, tree))
        assert config.platform == "netlify"
        assert config.platform_config is not None
        assert config.platform_config.build_command == "npm run build"
        assert config.platform_config.output_directory == "dist"
        assert source.content_calls == ["netlify.toml"]

    @pytest.mark.anyio
    async def test_netlify_numeric_runtime_version(self, fake_source, make_tree):
        tree = make_tree("netlify.toml")
        content = '[build]\ncommand = "make"\n\n[build.environment]\nNODE_VERSION = 18\n'
        config = await detect_deployment(_ctx(fake_source(tree, {"netlify.toml": content}), tree))
        assert config.platform_config.runtime_version == "18"

    @pytest.mark.anyio
    async def test_heroku_always_requires_env(self, fake_source, make_tree):
        tree = make_tree("Procfile")
        config = await detect_deployment(_ctx(fake_source(tree), tree))
        assert config.platform == "heroku"
        assert config.requires_env

    @pytest.mark.anyio
    async def test_build_command_falls_back_to_manifest_script(self, fake_source, make_tree):
        tree = make_tree("Dockerfile")
        manifest = ManifestData(file_name="package.json", package_managers=("pnpm",), scripts={"build": "vite build"})
        files = {"Dockerfile": "FROM node:20-alpine AS base\nRUN pnpm build\n"}
        config = await detect_deployment(_ctx(fake_source(tree, files), tree, manifest=manifest))
        assert config.platform == "docker"
        assert config.build_command == "pnpm run build"
        assert config.platform_config.runtime_version == "node:20-alpine"

    @pytest.mark.anyio
    async def test_broken_platform_file_still_detected(self, fake_source, make_tree):
        tree = make_tree("vercel.json")
        config = await detect_deployment(_ctx(fake_source(tree, {"vercel.json": "{oops"}), tree))
        assert config.platform == "vercel"
        assert config.platform_config is None

    @pytest.mark.anyio
    async def test_no_markers(self, fake_source, make_tree):
        tree = make_tree("README.md")
        assert await detect_deployment(_ctx(fake_source(tree), tree)) is None


# ── API endpoints ─────────────────────────────────────────────────────────


class TestEndpoints:
    @pytest.mark.anyio
    async def test_express_route(self, fake_source, make_tree):
        snippets = [_snippet("src/server.js", "app.get('/users/:id', (req, res) => res.json({}))")]
        endpoints = await extract_api_endpoints(_ctx(fake_source([]), [], snippets=snippets))
        assert len(endpoints) == 1
        assert endpoints[0].path == "/users/:id"
        assert endpoints[0].method == "GET"
        assert [(p.name, p.required) for p in endpoints[0].parameters] == [("id", True)]

    @pytest.mark.anyio
    async def test_decorated_route(self, fake_source):
        snippets = [_snippet("app/main.py", '@router.post("/items/{item_id}")\nasync def create(): ...')]
        endpoints = await extract_api_endpoints(_ctx(fake_source([]), [], snippets=snippets))
        assert endpoints[0].method == "POST"
        assert endpoints[0].responses == ("200 OK", "422 Validation Error")
        assert endpoints[0].parameters[0].name == "item_id"

    @pytest.mark.anyio
    async def test_app_router_file(self, fake_source):
        content = "export async function GET(req) {}\nexport async function POST(req) {}"
        snippets = [_snippet("app/api/users/[id]/route.ts", content)]
        endpoints = await extract_api_endpoints(_ctx(fake_source([]), [], snippets=snippets))
        assert [(e.path, e.method) for e in endpoints] == [
            ("/api/users/[id]", "GET"),
            ("/api/users/[id]", "POST"),
        ]

    @pytest.mark.anyio
    async def test_pages_router_file(self, fake_source):
        content = "export default function handler(req, res) {\n  if (req.method === 'POST') {}\n}"
        snippets = [_snippet("pages/api/login/index.js", content)]
        endpoints = await extract_api_endpoints(_ctx(fake_source([]), [], snippets=snippets))
        assert [(e.path, e.method) for e in endpoints] == [("/api/login", "POST")]

    @pytest.mark.anyio
    async def test_duplicates_across_snippets(self, fake_source):
        snippets = [
            _snippet("a.js", "router.get('/health', ok)"),
            _snippet("b.js", "router.get('/health', ok)\nrouter.delete('/health', ok)"),
        ]
        endpoints = await extract_api_endpoints(_ctx(fake_source([]), [], snippets=snippets))
        assert [(e.path, e.method) for e in endpoints] == [("/health", "GET"), ("/health", "DELETE")]

    def test_cap(self):
        endpoints = [ApiEndpoint(path=f"/r{i}", method="GET") for i in range(25)]
        assert len(dedupe_endpoints(endpoints)) == 10

    def test_parameter_syntaxes(self):
        params = extract_parameters("/a/[[...slug]]/:tab?/{id:int}/<int:page>")
        assert [(p.name, p.required, p.type) for p in params] == [
            ("slug", False, "string"),
            ("tab", False, "string"),
            ("id", True, "string"),
            ("page", True, "integer"),
        ]


# ── environment variables ─────────────────────────────────────────────────


class TestEnvVariables:
    def test_parse_env_example(self):
        content = '# comment\nDATABASE_URL=postgres://localhost/db\nexport PORT="3000"\nEMPTY=\nlower=skip\n'
        variables = parse_env_example(content)
        assert [(v.key, v.default_value) for v in variables] == [
            ("DATABASE_URL", "postgres://localhost/db"),
            ("PORT", "3000"),
            ("EMPTY", None),
        ]
        assert variables[0].description == "Database connection string"
        assert variables[2].description == "Environment variable"
        assert all(v.required for v in variables)

    def test_scan_by_language(self):
        js = "const a = process.env.API_KEY; const b = process.env['REDIS_URL'];"
        assert scan_env_reads(js, "TypeScript") == ["API_KEY", "REDIS_URL"]
        py = "token = os.getenv('GITHUB_TOKEN')\nkey = os.environ['SECRET_KEY']"
        assert scan_env_reads(py, "Python") == ["GITHUB_TOKEN", "SECRET_KEY"]
        assert scan_env_reads(py, "JavaScript") == []
        assert scan_env_reads(py, None) == ["GITHUB_TOKEN", "SECRET_KEY"]

    @pytest.mark.anyio
    async def test_example_file_then_source_reads_deduped(self, fake_source, make_tree):
        tree = make_tree("web/.env.example", ".env.example")
        source = fake_source(tree, {".env.example": "API_KEY=\nPORT=3000\n"})
        snippets = [_snippet("src/app.js", "process.env.PORT; process.env.OPENAI_API_KEY")]
        variables = await extract_env_variables(
            _ctx(source, tree, snippets=snippets, language="JavaScript")
        )
        assert [v.key for v in variables] == ["API_KEY", "PORT", "OPENAI_API_KEY"]
        assert variables[1].default_value == "3000"
        assert source.content_calls == [".env.example"]

    @pytest.mark.anyio
    async def test_nothing_found(self, fake_source, make_tree):
        tree = make_tree("src/app.js")
        assert await extract_env_variables(_ctx(fake_source(tree), tree)) == ()


# ── fan-out ───────────────────────────────────────────────────────────────


class TestRunDetectors:
    @pytest.mark.anyio
    async def test_one_failing_detector_does_not_affect_others(self, fake_source, make_tree):
        tree = make_tree("Procfile", "tests/test_app.py")

        async def explode(ctx):
            raise RuntimeError("boom")

        with patch("repoprofiler.engines.detectors.runner.detect_cicd", explode):
            results = await run_detectors(_ctx(fake_source(tree), tree, language="Python"))

        assert results.cicd.failed
        assert not results.cicd.detected
        assert results.failures == {"cicd": "RuntimeError: boom"}
        assert results.deployment.value.platform == "heroku"
        assert results.tests.value.commands == ("pytest",)
        assert results.endpoints.value == ()

    @pytest.mark.anyio
    async def test_nothing_detected(self, fake_source, make_tree):
        tree = make_tree("README.md")
        results = await run_detectors(_ctx(fake_source(tree), tree))
        assert results.failures == {}
        assert not results.cicd.detected
        assert not results.tests.detected
        assert not results.deployment.detected
