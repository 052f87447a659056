from unittest.mock import Mock

import pytest

from stackdeploy.config.schemas.deploy_schema import DeployConfig
from stackdeploy.domain.base.ports import (
    ControlPlanePort,
    UserDataRenderingPort,
    UserInterfacePort,
)
from stackdeploy.domain.provisioning.jobs import AsyncJobHandle, CreatedResource, JobStatus
from stackdeploy.domain.provisioning.run_context import RunContext


RESOLVED_NAMES = {
    "small": "so-1",
    "ubuntu": "tmpl-1",
    "zone1": "zone-1",
    "net-a": "net-1",
    "net-b": "net-2",
    "ssd": "disk-1",
}


@pytest.fixture
def control_plane():
    """Control plane stub that knows a handful of names and succeeds every job."""
    client = Mock(spec=ControlPlanePort)
    client.name_to_id.side_effect = lambda name, kind, filters=None: RESOLVED_NAMES[name]
    client.deploy_virtual_machine.return_value = CreatedResource(
        resource_id="vm-42", job=AsyncJobHandle(job_id="job-1")
    )
    client.destroy_virtual_machine.return_value = AsyncJobHandle(job_id="job-2")
    client.query_async_job.return_value = JobStatus.SUCCEEDED
    return client


@pytest.fixture
def ui():
    return Mock(spec=UserInterfacePort)


@pytest.fixture
def rendering_engine():
    engine = Mock(spec=UserDataRenderingPort)
    engine.render.side_effect = lambda template, context: template.replace("{{ HTTPIP }}", context["HTTPIP"])
    return engine


@pytest.fixture
def deploy_config():
    return DeployConfig(
        service_offering="small",
        template="ubuntu",
        zone="zone1",
        networks=["net-a"],
        hypervisor="KVM",
        template_name="ubuntu-build",
        state_timeout=1,
        poll_interval=0.01,
    )


@pytest.fixture
def run_context(control_plane, ui, deploy_config):
    return RunContext(
        client=control_plane,
        ui=ui,
        config=deploy_config,
        ssh_key_name="build-key",
        http_ip="10.0.0.5",
        http_port="8080",
    )
