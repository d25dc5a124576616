"""Tests for the global config loader."""
import pytest
from pydantic import ValidationError

from shipcat.config.loader import ConfigLoader
from shipcat.errors import MalformedSource, MissingSource, UnknownRegion


def test_load_config(workspace):
    """Test loading the config written by the workspace fixture."""
    conf = ConfigLoader.load(workspace / "shipcat.conf")
    assert conf.defaults.image_prefix == "quay.io/babylonhealth"
    assert conf.defaults.chart == "base"
    assert conf.defaults.replica_count == 2
    assert sorted(conf.regions) == ["dev-uk", "staging-uk"]
    # region names come from the mapping keys
    assert conf.regions["dev-uk"].name == "dev-uk"
    assert conf.regions["dev-uk"].namespace == "dev"
    assert conf.regions["dev-uk"].kong.base_url == "dev.example.com"
    assert conf.regions["staging-uk"].kong is None


def test_region_lookup(conf):
    assert conf.region("dev-uk").env["ENV_NAME"] == "dev-uk"
    assert conf.has_region("staging-uk")
    with pytest.raises(UnknownRegion):
        conf.region("mars-1")


def test_config_is_immutable(conf):
    with pytest.raises(ValidationError):
        conf.teams = []


def test_missing_config(tmp_path):
    with pytest.raises(MissingSource):
        ConfigLoader.load(tmp_path / "nope.conf")


def test_malformed_config(tmp_path):
    """Test that yaml and schema errors surface as MalformedSource."""
    bad_yaml = tmp_path / "bad.conf"
    bad_yaml.write_text("defaults: [unclosed")
    with pytest.raises(MalformedSource):
        ConfigLoader.load(bad_yaml)

    missing_defaults = tmp_path / "schema.conf"
    missing_defaults.write_text("regions:\n  dev-uk: {}\n")
    with pytest.raises(MalformedSource):
        ConfigLoader.load(missing_defaults)


def test_invalid_utf8_config(tmp_path):
    pth = tmp_path / "shipcat.conf"
    pth.write_bytes(b"defaults: \xff\n")
    with pytest.raises(MalformedSource, match="UTF-8"):
        ConfigLoader.load(pth)


def test_region_env_scalars_become_strings(tmp_path):
    pth = tmp_path / "shipcat.conf"
    pth.write_text(
        "defaults:\n"
        "  imagePrefix: quay.io/babylonhealth\n"
        "  chart: base\n"
        "  replicaCount: 2\n"
        "regions:\n"
        "  dev-uk:\n"
        "    env:\n"
        "      PORT: 8080\n"
        "      DEBUG: true\n"
    )
    conf = ConfigLoader.load(pth)
    assert conf.region("dev-uk").env == {"PORT": "8080", "DEBUG": "true"}
