"""Engine configuration tests."""

from __future__ import annotations

import textwrap

import pytest

from autolink.engine.config import DEFAULTS, ConfigError, load_config


def test_defaults_are_documented_values():
    config = load_config(None)

    assert config.enabled is True
    assert config.max_links_per_post == 5
    assert (config.min_keyword_length, config.max_keyword_length) == (3, 50)
    assert config.min_post_length == 100
    assert config.post_types == ("post",)
    assert config.case_sensitive is False
    assert config.exclude_posts == frozenset()
    assert config.cache_expiration == 3600
    assert config.scoring_phrase_words == (3, 5)
    assert config.anchor_phrase_words == (1, 3)
    assert "a" in config.skip_tags


def test_loaded_config_does_not_share_state_with_defaults():
    config = load_config(None)
    config.raw["post_types"].append("page")
    assert DEFAULTS["post_types"] == ["post"]


def test_yaml_then_overrides_are_merged(tmp_path):
    path = tmp_path / "autolink.yaml"
    path.write_text(
        textwrap.dedent(
            """
            max_links_per_post: 3
            post_types: [post, page]
            anchor_phrase_words: [2, 4]
            """
        ),
        encoding="utf-8",
    )

    config = load_config(path, {"max_links_per_post": 8})

    assert config.max_links_per_post == 8
    assert config.post_types == ("post", "page")
    assert config.anchor_phrase_words == (2, 4)
    assert config.get("same_tag_boost") is True


def test_missing_yaml_file_falls_back_to_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")
    assert config.max_links_per_post == 5


@pytest.mark.parametrize(
    "overrides",
    [
        {"min_keyword_length": 60, "max_keyword_length": 50},
        {"scoring_phrase_words": [5, 3]},
        {"anchor_phrase_words": [0, 3]},
        {"anchor_phrase_words": "three"},
        {"max_links_per_post": -1},
        {"max_workers": 0},
    ],
)
def test_invalid_options_raise(overrides):
    with pytest.raises(ConfigError):
        load_config(None, overrides)


def test_yaml_must_hold_a_mapping(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)
