"""Shared pytest fixtures for sitectl tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from sitectl.config.settings import SiteSettings
from sitectl.infrastructure.vault import Vault
from sitectl.services.telemetry import disable_telemetry

# Site layout used across service and command tests:
#   pages     root files
#   posts     posts/<slug>.md            -> /blog/<slug>
#   work      work/<slug>/index.mdx      -> /work/<slug>/   (folder mode)
#   snippets  snippets/<slug>.md         (template has no title placeholder)
#   docs      docs/<section>/_<slug>.md  (wildcard, draft prefix)
SITE_TOML = """\
[site]
date_format = "YYYY-MM-DD"

[[content_types]]
id = "pages"
name = "Pages"
folder_pattern = ""
template = '''
---
title: "{{title}}"
description: ""
---
'''

[[content_types]]
id = "posts"
name = "Posts"
folder_pattern = "posts"
link_base_path = "blog"
template = '''
---
title: "{{title}}"
date: {{date}}
tags: []
---
'''

[[content_types]]
id = "work"
name = "Work"
folder_pattern = "work"
creation_mode = "folder"
link_base_path = "work"
use_alt_extension = true
template = '''
---
title: "{{title}}"
tags:
  - project
---

## Overview
'''

[[content_types]]
id = "snippets"
name = "Snippets"
folder_pattern = "snippets"
template = '''
---
kind: snippet
---
'''

[[content_types]]
id = "docs"
name = "Docs"
folder_pattern = "docs/*"
link_base_path = "docs"
underscore_prefix = true
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the developer's environment out of settings resolution."""
    monkeypatch.delenv("SITECTL_CONFIG", raising=False)
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Temporary site with ``sitectl.toml`` and the content folders."""
    (tmp_path / "sitectl.toml").write_text(SITE_TOML, encoding="utf-8")
    for folder in ("posts", "work", "snippets", "docs/guides"):
        (tmp_path / folder).mkdir(parents=True)
    return tmp_path


@pytest.fixture
def settings(site_root: Path) -> SiteSettings:
    return SiteSettings.from_cli(site_root=site_root)


@pytest.fixture
def vault(settings: SiteSettings) -> Vault:
    """Vault over the temporary site."""
    return Vault(settings)


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI commands from inside the temporary site.

    Use via ``@pytest.mark.usefixtures("_isolated_site")``.
    """
    monkeypatch.chdir(site_root)


@pytest.fixture
def write_note(site_root: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes a site-relative file, creating parent folders."""

    def _write(rel_path: str, text: str) -> Path:
        path = site_root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
