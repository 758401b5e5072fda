"""Tests for the deploy and validate commands."""

from pathlib import Path
from textwrap import dedent
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from chartdriver.cli import app
from chartdriver.errors import ExecError, ReleaseError

CLUSTER_YAML = dedent(
    """
    name: prod-east
    helm:
      repos:
        - name: stable
          url: https://charts.helm.sh/stable
    releases:
      - name: ingress
        chartPath: stable/nginx-ingress
        version: 1.6.0
        namespace: kube-system
      - name: crds
        chartPath: stable/crds
        version: 1.0.0
        deploymentMethod: kubectl
    """
)

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "cluster.yaml"
    path.write_text(CLUSTER_YAML)
    return path


@patch("chartdriver.cli.ClusterDeployer")
def test_deploy_builds_deployer_from_options(mock_deployer, config_file: Path) -> None:
    result = runner.invoke(
        app,
        [
            "deploy",
            "--config",
            str(config_file),
            "-f",
            "global.yaml",
            "-f",
            "more.yaml",
            "--kube-context",
            "prod-east",
            "--dry-run",
        ],
    )

    assert result.exit_code == 0, result.output
    _, kwargs = mock_deployer.call_args
    cluster = mock_deployer.call_args.args[1]
    assert cluster.name == "prod-east"
    assert kwargs["value_files"] == ["global.yaml", "more.yaml"]
    assert kwargs["kube_context"] == "prod-east"
    assert kwargs["kube_config"] is None
    assert kwargs["dry_run"] is True
    mock_deployer.return_value.deploy.assert_called_once_with()


@patch("chartdriver.cli.ClusterDeployer")
def test_deploy_reads_plugin_environment(mock_deployer, config_file: Path) -> None:
    result = runner.invoke(
        app,
        ["deploy"],
        env={
            "PLUGIN_CONFIG": str(config_file),
            "PLUGIN_KUBE_CONFIG": "apiVersion: v1\nkind: Config\n",
            "PLUGIN_DRY_RUN": "true",
        },
    )

    assert result.exit_code == 0, result.output
    kwargs = mock_deployer.call_args.kwargs
    assert kwargs["kube_config"] == "apiVersion: v1\nkind: Config\n"
    assert kwargs["dry_run"] is True


@patch("chartdriver.cli.ClusterDeployer")
def test_deploy_splits_plugin_values_on_whitespace(mock_deployer, config_file: Path) -> None:
    result = runner.invoke(
        app,
        ["deploy", "--config", str(config_file)],
        env={"PLUGIN_VALUES": "global.yaml  region/us-east.yaml"},
    )

    assert result.exit_code == 0, result.output
    assert mock_deployer.call_args.kwargs["value_files"] == [
        "global.yaml",
        "region/us-east.yaml",
    ]


@patch("chartdriver.cli.ClusterDeployer")
def test_deploy_failure_exits_nonzero_with_release_name(mock_deployer, config_file: Path) -> None:
    mock_deployer.return_value.deploy.side_effect = ReleaseError(
        "ingress", "helm upgrade", ExecError(1, "Error: UPGRADE FAILED")
    )

    result = runner.invoke(app, ["deploy", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "ingress" in result.output
    assert "UPGRADE FAILED" in result.output


def test_deploy_missing_config_exits_nonzero(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["deploy", "--config", "missing.yaml"])

    assert result.exit_code == 1
    assert "missing.yaml" in result.output


def test_validate_shows_summary(config_file: Path) -> None:
    result = runner.invoke(
        app, ["validate", "--config", str(config_file)], env={"COLUMNS": "200"}
    )

    assert result.exit_code == 0, result.output
    assert "stable" in result.output
    assert "ingress" in result.output
    assert "kubectl" in result.output


def test_validate_rejects_bad_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cluster.yaml").write_text("releases:\n  - name: a\n")

    result = runner.invoke(app, ["validate"])

    assert result.exit_code == 1
    assert "Invalid cluster config" in result.output
