import logging
from typing import Optional, Tuple

import click

from ..core.config import LOG_LEVELS, settings
from ..core.exceptions import ServiceError, UsageError
from ..core.kube import KubeFactory
from ..services.job_instantiator import CreateJobOptions
from ..services.printers import ALLOWED_FORMATS


@click.group()
@click.option("--kubeconfig", default=None, help="Path to the kubeconfig file to use for CLI requests.")
@click.option("--context", default=None, help="The name of the kubeconfig context to use.")
@click.option("-n", "--namespace", default=None, help="If present, the namespace scope for this CLI request.")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (defaults to JOBCTL_LOG_LEVEL or WARNING).",
)
@click.pass_context
def cli(ctx: click.Context, kubeconfig: Optional[str], context: Optional[str], namespace: Optional[str], log_level: Optional[str]):
    """jobctl controls Jobs on a Kubernetes cluster."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.obj is None:
        ctx.obj = KubeFactory(settings, kubeconfig=kubeconfig, context=context, namespace=namespace)


@cli.group()
def create():
    """Create a resource."""


@create.command("job")
@click.argument("args", nargs=-1, metavar="NAME")
@click.option(
    "--from",
    "from_ref",
    default="",
    help="The name of the resource to create a Job from (only cronjob is supported).",
)
@click.option(
    "-o",
    "--output",
    "output_format",
    type=click.Choice(ALLOWED_FORMATS),
    default=None,
    help="Output format. One of: json|name|yaml.",
)
@click.option("--dry-run", is_flag=True, default=False, help="Only print the object that would be sent, without sending it.")
@click.option("--validate/--no-validate", default=True, help="Validate the job name before sending it.")
@click.option(
    "--save-config",
    is_flag=True,
    default=False,
    help="Store the configuration of the created object in its last-applied-configuration annotation.",
)
@click.pass_context
def create_job(
    ctx: click.Context,
    args: Tuple[str, ...],
    from_ref: str,
    output_format: Optional[str],
    dry_run: bool,
    validate: bool,
    save_config: bool,
):
    """Create a job with the specified name.

    \b
    Examples:
      # Create a job from a CronJob named "a-cronjob"
      jobctl create job test-job --from=cronjob/a-cronjob
    """
    try:
        opts = CreateJobOptions.complete(
            ctx.obj,
            args,
            from_ref=from_ref,
            output_format=output_format or "",
            dry_run=dry_run,
            validate=validate,
            save_config=save_config,
        )
        opts.run()
    except UsageError as e:
        raise click.UsageError(str(e), ctx=ctx) from e
    except ServiceError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
