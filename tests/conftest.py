"""Shared fixtures: a global config and a services tree on disk."""
import textwrap

import pytest
import yaml

from shipcat.config.schema import GlobalConfig
from shipcat.errors import SecretNotFound

CONFIG_YAML = """
defaults:
  imagePrefix: quay.io/babylonhealth
  chart: base
  replicaCount: 2
regions:
  dev-uk:
    namespace: dev
    env:
      ENV_NAME: dev-uk
      LOG_LEVEL: info
    kong:
      baseUrl: dev.example.com
  staging-uk:
    namespace: staging
    env:
      ENV_NAME: staging-uk
teams:
  - core
  - platform
"""

FAKE_ASK = """
name: fake-ask
metadata:
  repo: https://github.com/example/fake-ask
  team: core
version: 1.2.3
resources:
  requests:
    cpu: 100m
    memory: 100Mi
  limits:
    cpu: 300m
    memory: 300Mi
httpPort: 8000
health:
  uri: /health
  wait: 15
env:
  API_KEY: IN_VAULT
  LOG_LEVEL: debug
regions:
  - dev-uk
  - staging-uk
dependencies:
  - name: fake-storage
configs:
  mount: /config/
  files:
    - name: ask.ini.j2
      dest: ask.ini
kong:
  uris: /fake-ask
"""

FAKE_ASK_DEV_UK = """
version: 1.2.4
env:
  LOG_LEVEL: warn
  EXTRA: "1"
regions:
  - prod-uk
"""

FAKE_STORAGE = """
name: fake-storage
metadata:
  repo: https://github.com/example/fake-storage
  team: platform
resources:
  requests:
    cpu: 100m
    memory: 64Mi
  limits:
    cpu: 200m
    memory: 128Mi
regions:
  - dev-uk
dataHandling:
  stores:
    - backend: S3
      encrypted: true
      keyRotator: 2w
      fields:
        - name: photo
          encrypted: false
          keyRotator: 1w
        - name: email
          pii: true
"""

FAKE_EXTERNAL = """
name: fake-external
external: true
metadata:
  repo: https://github.com/example/fake-external
  team: core
"""

ASK_INI = """[ask]
region = {{ region }}
namespace = {{ namespace }}
env = {{ env.ENV_NAME }}
"""

DEPLOYMENT_TEMPLATE = """apiVersion: apps/v1
kind: Deployment
metadata:
  name: {{ service }}
  namespace: {{ namespace }}
spec:
  replicas: {{ replicaCount }}
  template:
    spec:
      containers:
        - name: {{ service }}
          image: {{ image }}
{% if configMap is defined %}
          volumeMounts:
            - name: {{ configMap.name }}
              mountPath: {{ configMap.path }}
{% endif %}
"""


def _write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip())
    return path


@pytest.fixture
def conf():
    """Global config with two regions."""
    return GlobalConfig.model_validate(yaml.safe_load(CONFIG_YAML))


@pytest.fixture
def workspace(tmp_path):
    """A shipcat repo layout with services, templates and a config file."""
    _write(tmp_path / "shipcat.conf", CONFIG_YAML)
    services = tmp_path / "services"
    _write(services / "fake-ask" / "shipcat.yml", FAKE_ASK)
    _write(services / "fake-ask" / "dev-uk.yml", FAKE_ASK_DEV_UK)
    _write(services / "fake-ask" / "ask.ini.j2", ASK_INI)
    _write(services / "fake-storage" / "shipcat.yml", FAKE_STORAGE)
    _write(services / "fake-external" / "shipcat.yml", FAKE_EXTERNAL)
    _write(tmp_path / "templates" / "deployment.yaml.j2", DEPLOYMENT_TEMPLATE)
    return tmp_path


@pytest.fixture
def write_file():
    """Write dedented content to a path, creating parent folders."""
    return _write


class DictSecretStore:
    """In memory secret store recording every key it was asked for."""

    def __init__(self, secrets):
        self.secrets = dict(secrets)
        self.reads = []

    def read(self, key):
        self.reads.append(key)
        if key not in self.secrets:
            raise SecretNotFound(f"Secret {key} not found")
        return self.secrets[key]


@pytest.fixture
def secret_store():
    """Factory for in memory secret stores."""
    return DictSecretStore
