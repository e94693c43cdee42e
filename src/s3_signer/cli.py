#!/usr/bin/env python3
"""Command line interface for generating presigned S3 URLs."""

import datetime as dt
import logging
import sys

import click

from .exceptions import InvalidInputError
from .models import DEFAULT_VALIDITY_MINUTES
from .signer import Signer


def _parse_timestamp(ctx, param, value):
    if value is None:
        return None
    try:
        return dt.datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not an ISO 8601 timestamp") from None


def _signing_options(func):
    func = click.option(
        "--timestamp",
        callback=_parse_timestamp,
        help="Signing time as ISO 8601 (default: now, UTC)",
    )(func)
    func = click.option(
        "--extra-param", default="", help="Query parameter name appended empty"
    )(func)
    func = click.option(
        "--minutes",
        default=DEFAULT_VALIDITY_MINUTES,
        show_default=True,
        help="How many minutes the URL stays valid",
    )(func)
    func = click.argument("key")(func)
    func = click.argument("bucket")(func)
    return func


@click.group()
@click.option("--config-file", help="Path to AWS config file")
@click.option("--credentials-file", help="Path to AWS credentials file")
@click.option("--profile", default="default", help="AWS profile name")
@click.option("--endpoint", help="Endpoint host or HTTPS URL")
@click.option("--region", help="Region used in the credential scope")
@click.option(
    "--addressing-style",
    type=click.Choice(["path", "virtual"]),
    help="Put the bucket in the URL path or in the host name",
)
@click.option("--verbose", "-v", is_flag=True, help="Log signing steps")
@click.pass_context
def cli(
    ctx,
    config_file,
    credentials_file,
    profile,
    endpoint,
    region,
    addressing_style,
    verbose,
):
    """s3-signer - presigned S3 URLs from the command line."""
    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        if config_file or credentials_file:
            signer = Signer.from_aws_config(
                profile_name=profile,
                config_path=config_file,
                credentials_path=credentials_file,
            )
        else:
            signer = Signer.from_env()

        if endpoint:
            signer.set_endpoint(endpoint)
        if region:
            signer.set_region(region)
        if addressing_style:
            signer.set_use_path_style(addressing_style == "path")
    except InvalidInputError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ctx.obj["signer"] = signer


@cli.command()
@_signing_options
@click.pass_context
def url(ctx, bucket, key, minutes, extra_param, timestamp):
    """Print a presigned GET URL for an object."""
    signer = ctx.obj["signer"]

    try:
        signer.set_extra_query_param(extra_param)
        signed_url = signer.get_object_url(bucket, key, minutes, timestamp)
    except InvalidInputError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(signed_url)


@cli.command()
@_signing_options
@click.pass_context
def inspect(ctx, bucket, key, minutes, extra_param, timestamp):
    """Show the canonical request and string to sign behind a URL."""
    signer = ctx.obj["signer"]

    try:
        signer.set_extra_query_param(extra_param)
        details = signer.get_signing_details(bucket, key, minutes, timestamp)
    except InvalidInputError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("Canonical request:")
    click.echo(details.canonical_request)
    click.echo()
    click.echo("String to sign:")
    click.echo(details.string_to_sign)
    click.echo()
    click.echo(f"Signature: {details.signature}")
    click.echo(f"URL: {details.url}")


if __name__ == "__main__":
    cli()
