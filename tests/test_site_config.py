"""Tests for patching the site configuration."""

import pytest

from pubsync.errors import ConfigCorruptError
from pubsync.sources.data import (
    Publication,
    patch_site_config,
    render_publications_array,
    update_site_config,
)

SITE_CONFIG = """export const siteConfig = {
  name: "Jonah Mack",
  publications: [
    {
      title: "Old entry",
      authors: "J Mack",
      journal: "Old",
      year: "2020",
    },
  ],
  projects: [],
};
"""


@pytest.fixture
def publications():
    return [
        Publication(
            title='A "quoted" title',
            authors="J Mack, P Alam",
            journal="IEEE Publication",
            year="2024",
            doi="10.1109/ABC.2024.10522011",
            link="https://ieeexplore.ieee.org/abstract/document/10522011/",
        ),
        Publication(title="Second", authors="J Mack", journal="Nature", year="2022"),
    ]


def test_render_publications_array(publications):
    rendered = render_publications_array(publications)

    assert rendered.startswith("[\n    {")
    assert rendered.endswith(",\n  ]")
    assert 'title: "A \\"quoted\\" title",' in rendered
    assert 'doi: "10.1109/ABC.2024.10522011",' in rendered
    assert rendered.count("volume:") == 0


def test_patch_replaces_array(publications):
    patched = patch_site_config(SITE_CONFIG, publications)

    assert "Old entry" not in patched
    assert '"Second"' in patched
    assert 'name: "Jonah Mack"' in patched
    assert "projects: []" in patched


def test_patch_without_array_fails(publications):
    with pytest.raises(ConfigCorruptError):
        patch_site_config("export const siteConfig = {};", publications)


def test_update_site_config_writes_file(tmp_path, publications):
    path = tmp_path / "config.ts"
    path.write_text(SITE_CONFIG)

    update_site_config(publications, path=path)

    assert '"Second"' in path.read_text()


def test_update_site_config_dry_run(tmp_path, publications):
    path = tmp_path / "config.ts"
    path.write_text(SITE_CONFIG)

    patched = update_site_config(publications, path=path, dry_run=True)

    assert '"Second"' in patched
    assert path.read_text() == SITE_CONFIG


def test_update_site_config_missing_file(tmp_path, publications):
    with pytest.raises(ConfigCorruptError):
        update_site_config(publications, path=tmp_path / "missing.ts")
