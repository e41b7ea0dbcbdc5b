"""Keyword-table classification of dependency names.

Both tables are plain data; extending detection means editing them, not the
functions below.
"""

from __future__ import annotations

from collections.abc import Mapping

OTHER = "Other"

# First matching category wins, so order is the tie-break.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Testing",
        (
            "jest", "mocha", "chai", "vitest", "cypress", "playwright", "jasmine",
            "karma", "sinon", "enzyme", "@testing-library", "supertest", "nyc",
            "pytest", "hypothesis", "rspec", "capybara", "factory_bot", "phpunit",
            "junit", "mockito", "testify", "test",
        ),
    ),
    (
        "Linting",
        (
            "eslint", "prettier", "stylelint", "tslint", "husky", "lint-staged",
            "commitlint", "flake8", "pylint", "ruff", "black", "mypy", "isort",
            "rubocop", "golangci", "clippy", "phpstan", "php-cs-fixer", "checkstyle",
        ),
    ),
    (
        "Build Tools",
        (
            "webpack", "vite", "rollup", "esbuild", "babel", "parcel", "turbo",
            "typescript", "@types/", "swc", "tsup", "ts-node", "nodemon",
            "concurrently", "cross-env", "setuptools", "wheel", "hatch",
            "maven-", "gradle",
        ),
    ),
    (
        "State Management",
        (
            "redux", "zustand", "mobx", "recoil", "jotai", "valtio", "xstate",
            "vuex", "pinia", "@ngrx",
        ),
    ),
    (
        "Styling",
        (
            "tailwind", "sass", "styled-components", "@emotion", "css", "bootstrap",
            "@mui/", "@chakra-ui", "bulma",
        ),
    ),
    (
        "Data Mapping",
        (
            "prisma", "mongoose", "mongodb", "sequelize", "typeorm", "drizzle",
            "knex", "zod", "yup", "joi", "class-transformer", "sqlalchemy",
            "pydantic", "marshmallow", "gorm", "diesel", "serde", "doctrine",
            "activerecord", "hibernate",
        ),
    ),
    (
        "API Client",
        (
            "axios", "fetch", "graphql", "apollo", "@tanstack/react-query", "swr",
            "trpc", "urql", "superagent", "requests", "httpx", "aiohttp",
            "reqwest", "guzzle", "faraday", "okhttp", "retrofit",
        ),
    ),
    (
        "UI Framework",
        (
            "react", "vue", "angular", "svelte", "next", "nuxt", "solid-js",
            "preact", "ember", "jquery", "express", "fastify", "koa", "@nestjs",
            "django", "flask", "fastapi", "streamlit", "rails", "sinatra",
            "laravel", "symfony", "gin-gonic", "labstack/echo", "gofiber",
            "actix", "axum", "rocket", "spring",
        ),
    ),
)

# Exact (lower-cased) dependency name -> framework label, in report order.
FRAMEWORK_DEPENDENCIES: tuple[tuple[str, str], ...] = (
    ("next", "Next.js"),
    ("react", "React"),
    ("vue", "Vue"),
    ("@angular/core", "Angular"),
    ("express", "Express"),
    ("nuxt", "Nuxt"),
    ("svelte", "Svelte"),
    ("@sveltejs/kit", "SvelteKit"),
    ("@nestjs/core", "NestJS"),
    ("fastify", "Fastify"),
    ("koa", "Koa"),
    ("django", "Django"),
    ("flask", "Flask"),
    ("fastapi", "FastAPI"),
    ("rails", "Rails"),
    ("sinatra", "Sinatra"),
    ("laravel/framework", "Laravel"),
    ("symfony/framework-bundle", "Symfony"),
    ("github.com/gin-gonic/gin", "Gin"),
    ("github.com/labstack/echo/v4", "Echo"),
    ("github.com/gofiber/fiber/v2", "Fiber"),
    ("actix-web", "Actix Web"),
    ("axum", "Axum"),
    ("rocket", "Rocket"),
    ("org.springframework.boot:spring-boot-starter-web", "Spring Boot"),
)


def category_of(name: str) -> str:
    lowered = name.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return OTHER


def categorize(dependencies: Mapping[str, str]) -> dict[str, list[str]]:
    """Bucket every dependency name into exactly one category.

    Only non-empty buckets are returned, in table order with ``Other`` last;
    names keep their manifest order inside a bucket.
    """
    buckets: dict[str, list[str]] = {}
    for name in dependencies:
        buckets.setdefault(category_of(name), []).append(name)

    order = [category for category, _ in CATEGORY_KEYWORDS] + [OTHER]
    return {category: buckets[category] for category in order if category in buckets}


def detect_frameworks(dependencies: Mapping[str, str]) -> list[str]:
    names = {name.lower() for name in dependencies}
    return [label for dep, label in FRAMEWORK_DEPENDENCIES if dep in names]
