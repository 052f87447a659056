"""Tests for the deploy virtual machine step."""

import threading
from unittest.mock import Mock

import pytest

from stackdeploy.application.deploy_step import DeployVirtualMachineStep
from stackdeploy.application.job_waiter import AsyncJobWaiter
from stackdeploy.application.pipeline import StepAction
from stackdeploy.domain.core.exceptions import (
    CreationError,
    JobFailedError,
    JobTimeoutError,
    RenderError,
    ResolutionError,
    RunContextError,
)
from stackdeploy.domain.provisioning.jobs import AsyncJobHandle, JobStatus
from stackdeploy.domain.references.value_objects import ResourceKind


def fixed_name(prefix):
    return f"{prefix}-0001"


@pytest.fixture
def step(rendering_engine):
    return DeployVirtualMachineStep(rendering_engine, name_factory=fixed_name)


class TestDeployRun:
    """Test the run phase of the step."""

    def test_successful_deploy_publishes_id(self, step, run_context, control_plane, ui):
        """Test names are resolved, the machine created and its id published."""
        action = step.run(run_context)

        assert action is StepAction.CONTINUE
        assert run_context.virtual_machine_id == "vm-42"
        assert run_context.error is None
        assert step.id == "vm-42"
        control_plane.deploy_virtual_machine.assert_called_once_with(
            "so-1", "tmpl-1", "zone-1", "", "packer-0001", ["net-1"], "build-key", "", "KVM"
        )
        control_plane.query_async_job.assert_called_once_with(AsyncJobHandle(job_id="job-1"))
        ui.say.assert_called_once_with("Creating virtual machine...")

    def test_supplied_identifiers_skip_resolution(self, step, run_context, control_plane):
        """Test identifiers in the configuration cause no lookups."""
        run_context.config = run_context.config.model_copy(update={
            "service_offering_id": "so-9",
            "template_id": "tmpl-9",
            "zone_id": "zone-9",
            "network_ids": ["net-9"],
        })

        assert step.run(run_context) is StepAction.CONTINUE
        control_plane.name_to_id.assert_not_called()
        control_plane.deploy_virtual_machine.assert_called_once_with(
            "so-9", "tmpl-9", "zone-9", "", "packer-0001", ["net-9"], "build-key", "", "KVM"
        )

    def test_empty_user_data_skips_rendering(self, step, run_context, rendering_engine):
        """Test no user data means an empty string and no engine call."""
        step.run(run_context)

        assert run_context.user_data == ""
        rendering_engine.render.assert_not_called()

    def test_user_data_rendered_and_sent(self, step, run_context, control_plane):
        """Test rendered user data is stored and passed to the create call."""
        run_context.config = run_context.config.model_copy(
            update={"user_data": "url=http://{{ HTTPIP }}/ks.cfg"}
        )

        assert step.run(run_context) is StepAction.CONTINUE
        assert run_context.user_data == "url=http://10.0.0.5/ks.cfg"
        assert control_plane.deploy_virtual_machine.call_args[0][7] == "url=http://10.0.0.5/ks.cfg"

    def test_render_failure_halts_before_create(self, step, run_context, control_plane, rendering_engine, ui):
        """Test a render failure halts without any remote call."""
        run_context.config = run_context.config.model_copy(update={"user_data": "{{ Missing }}"})
        rendering_engine.render.side_effect = RenderError("undefined Missing")

        assert step.run(run_context) is StepAction.HALT
        assert isinstance(run_context.error, RenderError)
        control_plane.name_to_id.assert_not_called()
        control_plane.deploy_virtual_machine.assert_not_called()
        ui.error.assert_called_once()
        assert "Error preparing user data" in ui.error.call_args[0][0]

    def test_missing_http_ip_halts_when_user_data_set(self, step, run_context, control_plane):
        """Test rendering requires the callback address."""
        run_context.config = run_context.config.model_copy(update={"user_data": "{{ HTTPIP }}"})
        run_context.http_ip = None

        assert step.run(run_context) is StepAction.HALT
        assert isinstance(run_context.error, RunContextError)
        control_plane.deploy_virtual_machine.assert_not_called()

    def test_resolution_failure_halts(self, step, run_context, control_plane, ui):
        """Test a failed lookup halts with a message naming the resource."""
        def lookup(name, kind, filters=None):
            if kind is ResourceKind.TEMPLATE:
                raise RuntimeError("template not found")
            return {"small": "so-1", "zone1": "zone-1"}[name]

        control_plane.name_to_id.side_effect = lookup

        assert step.run(run_context) is StepAction.HALT
        assert isinstance(run_context.error, ResolutionError)
        assert ui.error.call_args[0][0] == "Error retrieving template id: template not found"
        control_plane.deploy_virtual_machine.assert_not_called()
        assert step.id is None

    def test_create_failure_stores_nothing(self, step, run_context, control_plane, ui):
        """Test a rejected create leaves no id and cleanup does nothing."""
        control_plane.deploy_virtual_machine.side_effect = RuntimeError("quota exceeded")

        assert step.run(run_context) is StepAction.HALT
        assert isinstance(run_context.error, CreationError)
        assert run_context.virtual_machine_id is None
        assert step.id is None
        assert ui.error.call_args[0][0] == "Error deploying virtual machine: quota exceeded"

        step.cleanup(run_context)
        control_plane.destroy_virtual_machine.assert_not_called()

    def test_create_is_not_retried(self, step, run_context, control_plane):
        """Test a failing create call is issued exactly once."""
        control_plane.deploy_virtual_machine.side_effect = ConnectionError("reset")

        step.run(run_context)

        assert control_plane.deploy_virtual_machine.call_count == 1

    def test_job_failure_halts_but_keeps_id(self, step, run_context, control_plane):
        """Test a failed create job halts and keeps the id for cleanup."""
        control_plane.query_async_job.return_value = JobStatus.FAILED

        assert step.run(run_context) is StepAction.HALT
        assert isinstance(run_context.error, JobFailedError)
        assert run_context.virtual_machine_id is None
        assert step.id == "vm-42"

    def test_job_timeout_halts_but_keeps_id(self, step, run_context, control_plane, ui):
        """Test a job that never finishes halts and keeps the id for cleanup."""
        control_plane.query_async_job.return_value = JobStatus.PENDING
        run_context.config = run_context.config.model_copy(
            update={"state_timeout": 0.05, "poll_interval": 0.01}
        )

        assert step.run(run_context) is StepAction.HALT
        assert isinstance(run_context.error, JobTimeoutError)
        assert run_context.virtual_machine_id is None
        assert step.id == "vm-42"
        assert "Error waiting for virtual machine" in ui.error.call_args[0][0]

    def test_cancel_interrupts_job_wait(self, step, run_context, control_plane):
        """Test cancelling the step ends a pending wait as a timeout."""
        polled = threading.Event()

        def still_pending(job):
            polled.set()
            return JobStatus.PENDING

        control_plane.query_async_job.side_effect = still_pending
        run_context.config = run_context.config.model_copy(
            update={"state_timeout": 30, "poll_interval": 5}
        )
        result = {}
        worker = threading.Thread(target=lambda: result.update(action=step.run(run_context)))
        worker.start()

        assert polled.wait(5)
        step.cancel()
        worker.join(5)

        assert not worker.is_alive()
        assert result["action"] is StepAction.HALT
        assert isinstance(run_context.error, JobTimeoutError)
        assert step.id == "vm-42"

    def test_cancel_without_wait_is_noop(self, step):
        """Test cancel is harmless when nothing is waiting."""
        step.cancel()

        assert step.id is None

    def test_waiter_receives_configured_timing(self, rendering_engine, run_context):
        """Test the waiter is built with the configured interval and timeout."""
        waiter = Mock(spec=AsyncJobWaiter)
        waiter.wait.return_value = JobStatus.SUCCEEDED
        factory = Mock(return_value=waiter)
        step = DeployVirtualMachineStep(rendering_engine, waiter_factory=factory)

        step.run(run_context)

        factory.assert_called_once_with(run_context.client, 0.01)
        waiter.wait.assert_called_once_with(AsyncJobHandle(job_id="job-1"), 1)

    def test_missing_client_fails_fast(self, step, run_context):
        """Test a missing client is a run context error."""
        run_context.client = None

        with pytest.raises(RunContextError):
            step.run(run_context)

    def test_mistyped_config_fails_fast(self, step, run_context):
        """Test a config of the wrong type is rejected."""
        run_context.config = {"zone": "zone1"}

        with pytest.raises(RunContextError) as exc_info:
            step.run(run_context)

        assert exc_info.value.key == "config"
        assert exc_info.value.actual == "dict"


class TestDeployCleanup:
    """Test the cleanup phase of the step."""

    def test_cleanup_without_machine_is_noop(self, step, run_context, control_plane, ui):
        """Test cleanup does nothing when no machine was created."""
        step.cleanup(run_context)

        control_plane.destroy_virtual_machine.assert_not_called()
        ui.say.assert_not_called()

    def test_cleanup_destroys_and_waits(self, step, run_context, control_plane, ui):
        """Test cleanup destroys the created machine and waits for the job."""
        step.run(run_context)
        control_plane.query_async_job.reset_mock()

        step.cleanup(run_context)

        control_plane.destroy_virtual_machine.assert_called_once_with("vm-42")
        control_plane.query_async_job.assert_called_once_with(AsyncJobHandle(job_id="job-2"))
        ui.say.assert_called_with("Destroying virtual machine...")

    def test_cleanup_runs_once(self, step, run_context, control_plane):
        """Test a second cleanup does not destroy again."""
        step.run(run_context)

        step.cleanup(run_context)
        step.cleanup(run_context)

        control_plane.destroy_virtual_machine.assert_called_once_with("vm-42")

    def test_destroy_failure_is_reported_not_raised(self, step, run_context, control_plane, ui):
        """Test a failing destroy is reported and absorbed."""
        step.run(run_context)
        control_plane.destroy_virtual_machine.side_effect = RuntimeError("already gone")
        control_plane.query_async_job.reset_mock()

        step.cleanup(run_context)

        ui.error.assert_called_once_with("Error destroying virtual machine. Please destroy it manually.")
        control_plane.query_async_job.assert_not_called()

    def test_destroy_job_failure_is_reported(self, step, run_context, control_plane, ui):
        """Test a destroy job ending in failure is reported and absorbed."""
        step.run(run_context)
        control_plane.query_async_job.return_value = JobStatus.FAILED

        step.cleanup(run_context)

        assert "Please destroy it manually" in ui.error.call_args[0][0]

    def test_destroy_job_timeout_is_absorbed(self, step, run_context, control_plane, ui):
        """Test a destroy job that never finishes does not raise."""
        step.run(run_context)
        control_plane.query_async_job.return_value = JobStatus.PENDING
        run_context.config = run_context.config.model_copy(
            update={"state_timeout": 0.05, "poll_interval": 0.01}
        )

        step.cleanup(run_context)

        ui.error.assert_called_once()

    def test_cleanup_with_broken_context_does_not_raise(self, step, run_context, control_plane):
        """Test cleanup never raises even if the context lost its client."""
        step.run(run_context)
        run_context.client = None

        step.cleanup(run_context)

        control_plane.destroy_virtual_machine.assert_not_called()


class TestDeployScenarios:
    """End-to-end runs of the step with stubbed collaborators."""

    def test_scenario_create_confirmed(self, step, run_context, control_plane):
        """Test a confirmed create publishes the machine id and continues."""
        action = step.run(run_context)

        assert action is StepAction.CONTINUE
        assert run_context.virtual_machine_id == "vm-42"

    def test_scenario_create_job_failed_then_cleanup(self, step, run_context, control_plane):
        """Test a failed create job halts and cleanup destroys the machine."""
        control_plane.query_async_job.return_value = JobStatus.FAILED

        action = step.run(run_context)
        control_plane.query_async_job.return_value = JobStatus.SUCCEEDED
        step.cleanup(run_context)

        assert action is StepAction.HALT
        assert run_context.virtual_machine_id is None
        control_plane.destroy_virtual_machine.assert_called_once_with("vm-42")
