"""stackdeploy - CloudStack virtual machine deploy step for image build pipelines.

The step resolves named resources (service offering, disk offering, zone,
template and networks) to identifiers, renders user data, creates a virtual
machine and blocks until the control plane confirms it. When the pipeline
unwinds, the machine is destroyed again.

Key Components:
    - domain: provisioning model, error taxonomy and ports
    - application: resolver, user data renderer, deploy step, job waiter
    - infrastructure: CloudStack client, Jinja2 renderer, logging UI
    - config: pydantic configuration schemas

Usage:
    >>> from stackdeploy.application import DeployVirtualMachineStep, run_steps
    >>> from stackdeploy.infrastructure.template import JinjaUserDataRenderer
    >>> step = DeployVirtualMachineStep(JinjaUserDataRenderer())
    >>> run_steps([step], context)
"""

__version__ = "0.1.0"
