from pathlib import Path

import pytest

from lodbook.config import DEFAULT_CONTEXT, SiteConfig, TypeRegistry, load_site_config, resolve_context
from lodbook.errors import ConfigError


def test_load_site_config(tmp_path: Path):
    path = tmp_path / "_config.yml"
    path.write_text(
        "url: https://example.org\n"
        "baseurl: /book\n"
        "lod_source:\n  data: people\n"
        "data_types:\n  person:\n    type: Person\n    collection: people\n    template: person\n"
        "  ship:\n    type: Vehicle\n"
    )
    config = load_site_config(path)
    assert config.url == "https://example.org"
    assert config.lod_source.data == "people"
    registry = TypeRegistry.from_config(config)
    assert registry.graph_type("person") == "Person"
    assert registry.collection("person") == "people"
    assert registry.template("person") == "person"
    # collection defaults to the tag itself
    assert registry.collection("ship") == "ship"


def test_unknown_type_passes_through():
    registry = TypeRegistry()
    assert "boat" not in registry
    assert registry.graph_type("boat") == "boat"
    assert registry.collection("boat") == "boat"
    assert registry.template("boat") is None


def test_invalid_config_raises(tmp_path: Path):
    path = tmp_path / "_config.yml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_site_config(path)
    with pytest.raises(ConfigError):
        load_site_config(tmp_path / "missing.yml")


def test_context_resolution_order():
    plain = SiteConfig()
    assert resolve_context(plain) == DEFAULT_CONTEXT
    assert resolve_context(plain, {"@context": {"@vocab": "http://x/"}, "@graph": []}) == {"@vocab": "http://x/"}
    configured = SiteConfig.model_validate({"lod_source": {"context": "https://schema.org/"}})
    assert resolve_context(configured, {"@context": "http://other/"}) == "https://schema.org/"
