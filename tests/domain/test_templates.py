"""Tests for template rendering and placeholder expansion."""

from __future__ import annotations

from sitectl.domain.frontmatter import ListValue, Scalar
from sitectl.domain.templates import (
    TemplateContext,
    render_new_document,
    render_template,
    title_key,
)

TEMPLATE = """\
---
title: "{{title}}"
slug: {{slug}}
date: {{date}}
tags: []
categories:
  - general
  - "{{title}}"
---

# {{title}}
"""

CONTEXT = TemplateContext.for_title("Hello World", "2024-03-05")


class TestTemplateContext:
    def test_slug_from_title(self) -> None:
        assert CONTEXT.slug == "hello-world"
        assert CONTEXT.date == "2024-03-05"


class TestRenderTemplate:
    def test_scalar_placeholders_substituted(self) -> None:
        rendered = render_template(TEMPLATE, CONTEXT)
        assert rendered.values["title"] == Scalar('"Hello World"')
        assert rendered.values["slug"] == Scalar("hello-world")
        assert rendered.values["date"] == Scalar("2024-03-05")

    def test_list_items_are_not_substituted(self) -> None:
        rendered = render_template(TEMPLATE, CONTEXT)
        assert rendered.values["categories"] == ListValue(("general", "{{title}}"))

    def test_declared_keys_and_list_keys(self) -> None:
        rendered = render_template(TEMPLATE, CONTEXT)
        assert rendered.declared_keys == ("title", "slug", "date", "tags", "categories")
        assert rendered.list_keys == frozenset({"tags", "categories"})

    def test_body_is_ignored(self) -> None:
        rendered = render_template(TEMPLATE, CONTEXT)
        assert "# Hello World" not in str(rendered.values)

    def test_classification_independent_of_context(self) -> None:
        empty = render_template(TEMPLATE, TemplateContext(title=""))
        assert empty.list_keys == render_template(TEMPLATE, CONTEXT).list_keys
        assert empty.values["title"] == Scalar('""')

    def test_duplicate_key_keeps_position_and_last_value(self) -> None:
        rendered = render_template("---\na: 1\nb: 2\na: 3\n---\n", CONTEXT)
        assert rendered.declared_keys == ("a", "b")
        assert rendered.values["a"] == Scalar("3")

    def test_malformed_templates_yield_nothing(self) -> None:
        assert render_template("", CONTEXT).declared_keys == ()
        assert render_template("no block here", CONTEXT).declared_keys == ()

    def test_unrecognised_lines_skipped(self) -> None:
        rendered = render_template("---\ntitle: x\nweird line: y\n---\n", CONTEXT)
        assert rendered.declared_keys == ("title",)

    def test_blank_lines_before_block_skipped(self) -> None:
        rendered = render_template('\n  \n---\ntitle: "{{title}}"\ntags: [a]\n---\n', CONTEXT)
        assert rendered.declared_keys == ("title", "tags")
        assert rendered.values["title"] == Scalar('"Hello World"')


class TestRenderNewDocument:
    def test_expands_block_and_body(self) -> None:
        text = render_new_document(TEMPLATE, CONTEXT)
        assert text.startswith('---\ntitle: "Hello World"\nslug: hello-world\n')
        assert text.endswith("# Hello World\n")
        assert "{{" not in text

    def test_blank_lines_before_block_dropped(self) -> None:
        text = render_new_document('\n\n---\ntitle: "{{title}}"\n---\nBody\n', CONTEXT)
        assert text == '---\ntitle: "Hello World"\n---\nBody\n'


class TestTitleKey:
    def test_title_key(self) -> None:
        assert title_key(TEMPLATE) == "title"

    def test_custom_key(self) -> None:
        assert title_key('---\nheading: "{{title}}"\n---\n') == "heading"

    def test_no_placeholder(self) -> None:
        assert title_key("---\nkind: snippet\n---\n") is None

    def test_blank_lines_before_block(self) -> None:
        assert title_key('\n---\nheading: "{{title}}"\n---\n') == "heading"
