"""Step that deploys the virtual machine used to build an image."""
import logging
from typing import Callable, Optional

from stackdeploy.application.job_waiter import AsyncJobWaiter
from stackdeploy.application.pipeline import Step, StepAction
from stackdeploy.application.resolver import ResourceResolver
from stackdeploy.application.user_data import BootCommandTemplateData, UserDataRenderer
from stackdeploy.config.schemas.deploy_schema import DeployConfig
from stackdeploy.domain.base.ports import (
    ControlPlanePort,
    UserDataRenderingPort,
    UserInterfacePort,
)
from stackdeploy.domain.core.exceptions import (
    CreationError,
    DestructionError,
    JobFailedError,
    RenderError,
    ResolutionError,
    RunContextError,
)
from stackdeploy.domain.provisioning.jobs import AsyncJobHandle, JobStatus
from stackdeploy.domain.provisioning.run_context import RunContext
from stackdeploy.domain.references.value_objects import ResourceKind
from stackdeploy.helpers.resource_naming import get_display_name

logger = logging.getLogger(__name__)

WaiterFactory = Callable[[ControlPlanePort, float], AsyncJobWaiter]


class DeployVirtualMachineStep(Step):
    """
    Creates the build virtual machine and destroys it when the pipeline unwinds.

    ``run`` renders user data, resolves every named reference, submits the
    create request and blocks until the async job is terminal. The machine id
    is recorded locally as soon as the control plane returns it, so ``cleanup``
    can destroy it even if the wait fails. Downstream steps only see the id in
    the run context once the create has been confirmed.
    """

    def __init__(self, renderer: UserDataRenderingPort,
                 waiter_factory: WaiterFactory = AsyncJobWaiter,
                 name_factory: Callable[[str], str] = get_display_name):
        self._user_data = UserDataRenderer(renderer)
        self._waiter_factory = waiter_factory
        self._name_factory = name_factory
        self.id: Optional[str] = None
        self._waiter: Optional[AsyncJobWaiter] = None

    def run(self, context: RunContext) -> StepAction:
        client = context.require("client", ControlPlanePort)
        ui = context.require("ui", UserInterfacePort)
        config = context.require("config", DeployConfig)
        ssh_key_name = context.require("ssh_key_name", str)

        ui.say("Creating virtual machine...")

        # Temporary name, never user supplied
        display_name = self._name_factory(config.name_prefix)

        try:
            user_data = self._prepare_user_data(context, config)
        except (RenderError, RunContextError) as e:
            return self._halt(context, ui, e, f"Error preparing user data: {e}")
        context.user_data = user_data

        request = config.to_request()
        try:
            resolved = ResourceResolver(client).resolve_all(request)
        except ResolutionError as e:
            label = ResourceKind(e.kind).label
            return self._halt(context, ui, e, f"Error retrieving {label} id: {e.cause}")

        logger.info(f"Deploying virtual machine {display_name}")
        try:
            created = client.deploy_virtual_machine(
                resolved.service_offering_id,
                resolved.template_id,
                resolved.zone_id,
                resolved.disk_offering_id,
                display_name,
                list(resolved.network_ids),
                ssh_key_name,
                user_data,
                request.hypervisor,
            )
        except Exception as e:
            error = CreationError(f"Error deploying virtual machine: {e}", e)
            return self._halt(context, ui, error, str(error))

        # Recorded before waiting so cleanup can still destroy it
        self.id = created.resource_id
        logger.info(f"Virtual machine {display_name} has id {self.id}, job {created.job}")

        try:
            self._wait_for_job(client, config, created.job)
        except Exception as e:
            return self._halt(context, ui, e, f"Error waiting for virtual machine to become available: {e}")

        context.virtual_machine_id = self.id
        ui.message(f"Virtual machine {self.id} is ready")
        return StepAction.CONTINUE

    def cancel(self) -> None:
        """Abort an in-flight job wait; the wait then fails as a timeout."""
        waiter = self._waiter
        if waiter is not None:
            waiter.cancel()

    def cleanup(self, context: RunContext) -> None:
        # If the virtual machine id isn't there, we probably never created it
        if not self.id:
            return

        resource_id, self.id = self.id, None
        try:
            client = context.require("client", ControlPlanePort)
            ui = context.require("ui", UserInterfacePort)
            config = context.require("config", DeployConfig)
        except RunContextError as e:
            logger.error(f"Cannot destroy virtual machine {resource_id}: {e}")
            return

        ui.say("Destroying virtual machine...")

        try:
            job = client.destroy_virtual_machine(resource_id)
        except Exception as e:
            error = DestructionError(resource_id, e)
            logger.warning(str(error))
            ui.error("Error destroying virtual machine. Please destroy it manually.")
            return

        try:
            self._wait_for_job(client, config, job)
        except Exception as e:
            logger.warning(f"Destroy of virtual machine {resource_id} not confirmed: {e}")
            ui.error(f"Virtual machine {resource_id} may not have been destroyed. "
                     "Please destroy it manually.")
            return

        logger.info(f"Destroyed virtual machine {resource_id}")

    def _prepare_user_data(self, context: RunContext, config: DeployConfig) -> str:
        """Render configured user data, or return an empty string when there is none."""
        if not config.user_data:
            return ""

        template_data = BootCommandTemplateData(
            HTTPIP=context.require("http_ip", str),
            HTTPPort=context.require("http_port", str),
            Name=config.template_name,
        )
        return self._user_data.render(config.user_data, template_data)

    def _wait_for_job(self, client: ControlPlanePort, config: DeployConfig,
                      job: AsyncJobHandle) -> None:
        self._waiter = self._waiter_factory(client, config.poll_interval)
        try:
            status = self._waiter.wait(job, config.state_timeout)
        finally:
            self._waiter = None
        if status is JobStatus.FAILED:
            raise JobFailedError(job.job_id)

    def _halt(self, context: RunContext, ui: UserInterfacePort,
              error: Exception, message: str) -> StepAction:
        context.error = error
        ui.error(message)
        logger.error(message)
        return StepAction.HALT
