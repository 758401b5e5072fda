"""Tests for the ClusterDeployer run sequence."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from chartdriver.config.models import ClusterConfig, HelmRepo, HelmSettings, Release
from chartdriver.deployment.constants import DeploymentConstants
from chartdriver.deployment.deployer import ClusterDeployer
from chartdriver.errors import ConfigError, ExecError, ReleaseError, RepositoryError


@pytest.fixture
def commands() -> MagicMock:
    commands = MagicMock()
    commands.helm.template.return_value = "kind: ConfigMap\n"
    return commands


@pytest.fixture
def config() -> ClusterConfig:
    return ClusterConfig(
        name="prod-east",
        helm=HelmSettings(repos=[HelmRepo(name="stable", url="https://charts.helm.sh/stable")]),
        releases=[
            Release(name="crds", chart_path="stable/crds", version="1.0.0", deployment_method="kubectl"),
            Release(name="ingress", chart_path="stable/nginx-ingress", version="1.6.0"),
            Release(name="dashboard", chart_path="stable/dashboard", version="2.0.0"),
        ],
    )


@pytest.fixture
def make_deployer(commands, config, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def _make(**kwargs) -> ClusterDeployer:
        return ClusterDeployer(MagicMock(), config, commands=commands, **kwargs)

    return _make


def test_repositories_synced_before_releases(make_deployer, commands) -> None:
    make_deployer().deploy()

    names = [c[0] for c in commands.helm.mock_calls]
    assert names.index("repo_update") < names.index("fetch")
    assert names.count("repo_update") == 1


def test_releases_installed_in_config_order(make_deployer, commands) -> None:
    make_deployer().deploy()

    assert commands.helm.fetch.call_args.args[0] == "stable/crds"
    assert [c.args[0] for c in commands.helm.upgrade_install.call_args_list] == [
        "ingress",
        "dashboard",
    ]


def test_first_release_failure_stops_the_run(make_deployer, commands) -> None:
    commands.helm.upgrade_install.side_effect = ExecError(1, "Error: timed out")

    with pytest.raises(ReleaseError) as excinfo:
        make_deployer().deploy()

    assert excinfo.value.release == "ingress"
    commands.helm.upgrade_install.assert_called_once()


def test_repository_failure_stops_before_releases(make_deployer, commands) -> None:
    commands.helm.repo_add.side_effect = ExecError(1, "Error: 404")

    with pytest.raises(RepositoryError):
        make_deployer().deploy()

    commands.helm.repo_update.assert_not_called()
    commands.helm.fetch.assert_not_called()
    commands.helm.upgrade_install.assert_not_called()


def test_value_files_and_cluster_name_reach_the_resolver(make_deployer) -> None:
    deployer = make_deployer(value_files=["global.yaml"])

    assert deployer.installer.resolver.value_files == ["global.yaml"]
    assert deployer.installer.resolver.cluster_name == "prod-east"


def test_relative_work_dir_gives_paths_helm_can_open(commands, tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    build = Path("build")
    (build / "values" / "app").mkdir(parents=True)
    (build / "values" / "app" / "default.yaml").write_text("{}\n")
    (build / "tuning.yaml").write_text("{}\n")
    config = ClusterConfig(
        releases=[
            Release(name="app", chart_path="repo/app", version="1", value_files=["tuning.yaml"])
        ]
    )

    ClusterDeployer(MagicMock(), config, commands=commands, work_dir=build).deploy()

    files = [a.value for a in commands.helm.upgrade_install.call_args.kwargs["overrides"]]
    assert files == [
        str(build.resolve() / "values" / "app" / "default.yaml"),
        str(build.resolve() / "tuning.yaml"),
    ]
    # Helm runs inside work_dir; every path must still point at the file
    assert all((build / f).exists() for f in files)


class TestKubeconfig:
    """Kube-config payload and context handling."""

    @pytest.fixture
    def constants(self, tmp_path, monkeypatch) -> DeploymentConstants:
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        return DeploymentConstants()

    def test_nothing_happens_without_payload_or_context(
        self, make_deployer, commands, constants
    ) -> None:
        make_deployer(constants=constants).setup_kubeconfig()

        assert not constants.kubeconfig_path.exists()
        commands.kubectl.use_context.assert_not_called()

    def test_payload_overwrites_existing_file(self, make_deployer, constants) -> None:
        constants.kubeconfig_path.parent.mkdir(parents=True)
        constants.kubeconfig_path.write_text("old")

        make_deployer(kube_config="apiVersion: v1\nkind: Config\n", constants=constants).setup_kubeconfig()

        assert constants.kubeconfig_path.read_text() == "apiVersion: v1\nkind: Config\n"

    def test_context_is_selected(self, make_deployer, commands, constants) -> None:
        make_deployer(kube_context="prod-east", constants=constants).setup_kubeconfig()

        commands.kubectl.use_context.assert_called_once_with("prod-east")

    def test_context_failure_is_config_error(self, make_deployer, commands, constants) -> None:
        commands.kubectl.use_context.side_effect = ExecError(1, 'error: no context exists with the name: "nope"')

        with pytest.raises(ConfigError, match="nope"):
            make_deployer(kube_context="nope", constants=constants).deploy()

        commands.helm.repo_add.assert_not_called()
