"""
Main CLI module with argument parsing and command execution.

Commands:
- http-server: serve the hello-world application on the configured port
- provision: build the CloudFormation template for a packaged artifact
- latest-image: print the newest image matching the lookup filters
"""
import argparse
import sys
from typing import Any, Callable, Dict, List, Optional

from omega_deploy._version import __version__
from omega_deploy.cli.formatters import FORMATS, format_output
from omega_deploy.config.manager import ConfigurationManager
from omega_deploy.domain.core.exceptions import DomainException
from omega_deploy.infrastructure.exceptions import InfrastructureError
from omega_deploy.infrastructure.logging.logger import get_logger, setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="omega-deploy",
        description="Deploy the same application to AWS Lambda and an EC2 auto scaling group",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s http-server
  %(prog)s provision -k my-key --s3-bucket artifacts --s3-key omega.zip
  %(prog)s latest-image --region us-west-2 --format table
        """
    )

    # Global options
    parser.add_argument('--config', help='Configuration file path')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Set logging level')
    parser.add_argument('--format', choices=FORMATS, default='json', help='Output format')
    parser.add_argument('--output', help='Output file (default: stdout)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    server_parser = subparsers.add_parser('http-server', help='Run the hello-world HTTP server')
    server_parser.add_argument('--host', help='Bind address')
    server_parser.add_argument('--port', type=int, help='Bind port')

    provision_parser = subparsers.add_parser('provision', help='Build the deployment template')
    provision_parser.add_argument('-k', '--key', dest='key_name', help='EC2 SSH key pair name')
    provision_parser.add_argument('--s3-bucket', required=True, help='Bucket holding the packaged application')
    provision_parser.add_argument('--s3-key', required=True, help='Key of the packaged application')
    provision_parser.add_argument('--service-name', help='Service name (default from configuration)')
    provision_parser.add_argument('--output', default=argparse.SUPPRESS,
                                  help='Output file (default: stdout)')

    image_parser = subparsers.add_parser('latest-image', help='Show the newest matching image')
    image_parser.add_argument('--region', help='AWS region to query')

    return parser


def run_http_server(args: argparse.Namespace, config_manager: ConfigurationManager) -> None:
    from omega_deploy.api.server import run_server

    config_manager.override('server', host=args.host, port=args.port)
    run_server(config_manager.get_server_config())


def run_provision(args: argparse.Namespace, config_manager: ConfigurationManager) -> Dict[str, Any]:
    from omega_deploy.application.decorator.template_decorator import TemplateDecorator
    from omega_deploy.application.stack.builder import StackBuilder

    config_manager.override('deployment', key_name=args.key_name)
    deployment_config = config_manager.get_deployment_config()
    decorator = TemplateDecorator(
        deployment_config,
        server_config=config_manager.get_server_config(),
        image_config=config_manager.get_image_lookup_config()
    )
    template = StackBuilder(deployment_config, decorator).build(
        args.s3_bucket, args.s3_key, args.service_name
    )

    logger = get_logger(__name__)
    logger.info(
        "Provisioning template ready",
        key_name=deployment_config.key_name,
        resources=len(template.resources)
    )
    return template.to_dict()


def run_latest_image(args: argparse.Namespace, config_manager: ConfigurationManager) -> Dict[str, Any]:
    from omega_deploy.application.lookup.handler import build_filter_set
    from omega_deploy.domain.core.exceptions import EmptyInputError, NoImagesFoundError
    from omega_deploy.domain.image.selector import select_most_recent
    from omega_deploy.infrastructure.aws.aws_client import AWSClient
    from omega_deploy.infrastructure.aws.catalog import ImageCatalogClient

    config_manager.override('aws', region=args.region)
    image_config = config_manager.get_image_lookup_config()
    catalog = ImageCatalogClient(AWSClient(config_manager.get_aws_config()))

    filter_set = build_filter_set(image_config)
    images = catalog.find_images(filter_set, image_config.owners)
    try:
        image = select_most_recent(images)
    except EmptyInputError as e:
        raise NoImagesFoundError(str(filter_set), image_config.owners) from e
    return image.to_dict()


COMMAND_HANDLERS: Dict[str, Callable[[argparse.Namespace, ConfigurationManager], Any]] = {
    'http-server': run_http_server,
    'provision': run_provision,
    'latest-image': run_latest_image,
}


def write_output(formatted_output: str, output_file: Optional[str]) -> None:
    if output_file:
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(formatted_output)
        print(f"Output written to {output_file}")
    else:
        print(formatted_output)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logger = get_logger(__name__)
    try:
        config_manager = ConfigurationManager(args.config)
        config_manager.override('logging', level=args.log_level)
        setup_logging(config_manager.get_logging_config())

        result = COMMAND_HANDLERS[args.command](args, config_manager)
        if result is not None:
            write_output(format_output(result, args.format), args.output)
        return 0
    except (DomainException, InfrastructureError) as e:
        logger.error("Command failed", command=args.command, error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
