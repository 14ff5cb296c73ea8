"""Tests for validate_terraform_installed."""

import subprocess
from unittest.mock import MagicMock, patch

from terrarun.utils import validate_terraform_installed


@patch("terrarun.utils.validators.shutil.which", return_value=None)
def test_binary_not_on_path(mock_which):
    assert validate_terraform_installed("terraform") == (False, None)


@patch("terrarun.utils.validators.subprocess.run")
@patch("terrarun.utils.validators.shutil.which", return_value="/usr/bin/terraform")
def test_reports_version(mock_which, mock_run):
    mock_run.return_value = MagicMock(
        returncode=0, stdout="Terraform v1.6.2\non linux_amd64\n", stderr=""
    )
    assert validate_terraform_installed() == (True, "Terraform v1.6.2")


@patch("terrarun.utils.validators.subprocess.run")
@patch("terrarun.utils.validators.shutil.which", return_value="/usr/bin/terraform")
def test_version_timeout(mock_which, mock_run):
    mock_run.side_effect = subprocess.TimeoutExpired(cmd="terraform", timeout=5)
    assert validate_terraform_installed() == (False, None)
