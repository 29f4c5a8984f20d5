import os
import tempfile
import textwrap

import pytest
from click.testing import CliRunner

from capacity_provisioner.cli import cli
from capacity_provisioner.entities import Failure, ProvisioningErrorType, ProvisioningEvent
from capacity_provisioner.infrastructure.db.sqlite import SQLiteProvisioningEventRepository


@pytest.fixture
def configuration_file():
    with tempfile.TemporaryDirectory() as directory:
        db_path = os.path.join(directory, "events.db")
        file_path = os.path.join(directory, "capacity-provisioner.yml")
        with open(file_path, "w") as file:
            file.write(textwrap.dedent(f"""
                demand:
                  type: static
                sources:
                  - type: dummy
                    name: dummy
                    labels: [gpu]
                database:
                  type: sqlite
                  path: {db_path}
            """))

        yield file_path, db_path


class TestCli:

    def test_check_configuration(self, configuration_file):
        file_path, _ = configuration_file

        result = CliRunner().invoke(cli, ["check-configuration", "--configuration-file", file_path])

        assert result.exit_code == 0
        assert "is valid" in result.output
        assert "dummy [dummy]" in result.output

    def test_history(self, configuration_file):
        file_path, db_path = configuration_file
        repository = SQLiteProvisioningEventRepository(db_path)
        repository.save_event(ProvisioningEvent(ProvisioningEvent.Kind.REQUESTED, source_name="dummy", label="gpu", executors=2))
        repository.save_event(ProvisioningEvent(
            ProvisioningEvent.Kind.SOURCE_FAILED,
            source_name="dummy",
            label="gpu",
            failure=Failure("dummy", "gpu", ProvisioningErrorType.REQUEST_FAILED, "quota exceeded", None),
        ))

        result = CliRunner().invoke(cli, ["history", "--configuration-file", file_path])
        assert result.exit_code == 0
        assert "REQUESTED" in result.output
        assert "quota exceeded" in result.output

        result = CliRunner().invoke(cli, ["history", "--configuration-file", file_path, "--failures"])
        assert result.exit_code == 0
        assert "REQUESTED" not in result.output
        assert "PROVISION_REQUEST_FAILED" in result.output
