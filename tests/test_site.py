from pathlib import Path

import pytest

from lodbook.errors import ConfigError
from lodbook.site import read_document, read_documents, split_front_matter


def test_split_front_matter():
    meta, body = split_front_matter("---\ntitle: Arrival\nchapter: 1\n---\n<p>text</p>\n")
    assert meta == {"title": "Arrival", "chapter": 1}
    assert body == "<p>text</p>\n"
    assert split_front_matter("<p>no front matter</p>") == ({}, "<p>no front matter</p>")


def test_front_matter_must_be_a_mapping():
    with pytest.raises(ConfigError):
        split_front_matter("---\n- a\n- b\n---\nbody")


def test_read_document(tmp_path: Path, ctx):
    pages = tmp_path / "_pages"
    (pages / "part-1").mkdir(parents=True)
    path = pages / "part-1" / "arrival.html"
    path.write_text("---\ntitle: Arrival\nchapter: 1\n---\n<p>{% lod %}James{% endlod %} landed.</p>\n")
    doc = read_document(path, pages, ctx)
    assert doc.url == "/part-1/arrival/"
    assert doc.title == "Arrival"
    assert doc.chapter == "1"
    assert 'data-name="James"' in doc.html


def test_permalink_wins(tmp_path: Path, ctx):
    path = tmp_path / "index.html"
    path.write_text("---\npermalink: /start/\n---\n<p></p>")
    assert read_document(path, tmp_path, ctx).url == "/start/"


def test_read_documents_missing_dir(tmp_path: Path, ctx):
    assert read_documents(tmp_path / "nowhere", ctx) == []

