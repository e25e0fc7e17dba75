import json
from unittest.mock import patch

import pytest

from omega_deploy.cli.formatters import format_output
from omega_deploy.cli.main import build_parser, main
from omega_deploy.domain.image.value_objects import ImageDescriptor
from omega_deploy.infrastructure.exceptions import CatalogQueryError


class TestArgumentParsing:
    def test_provision_arguments(self):
        args = build_parser().parse_args(
            ['provision', '-k', 'ops-key', '--s3-bucket', 'artifacts', '--s3-key', 'omega.zip']
        )
        assert args.command == 'provision'
        assert args.key_name == 'ops-key'
        assert args.s3_bucket == 'artifacts'
        assert args.service_name is None

    def test_long_key_flag(self):
        args = build_parser().parse_args(
            ['provision', '--key', 'ops-key', '--s3-bucket', 'b', '--s3-key', 'k']
        )
        assert args.key_name == 'ops-key'

    def test_output_after_subcommand(self):
        args = build_parser().parse_args(
            ['provision', '--s3-bucket', 'b', '--s3-key', 'k', '--output', 'template.json']
        )
        assert args.output == 'template.json'

    def test_global_output_kept_when_subcommand_omits_it(self):
        args = build_parser().parse_args(
            ['--output', 'template.json', 'provision', '--s3-bucket', 'b', '--s3-key', 'k']
        )
        assert args.output == 'template.json'

    def test_provision_requires_artifact(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['provision', '-k', 'ops-key'])

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestProvisionCommand:
    def test_writes_template(self, tmp_path):
        output = tmp_path / 'template.json'
        exit_code = main([
            '--output', str(output),
            'provision', '-k', 'ops-key', '--s3-bucket', 'artifacts', '--s3-key', 'omega.zip',
            '--service-name', 'omega',
        ])
        assert exit_code == 0

        document = json.loads(output.read_text())
        launch_configurations = [
            resource for resource in document['Resources'].values()
            if resource['Type'] == 'AWS::AutoScaling::LaunchConfiguration'
        ]
        assert len(launch_configurations) == 1
        assert launch_configurations[0]['Properties']['KeyName'] == 'ops-key'

    def test_output_option_after_subcommand(self, tmp_path):
        output = tmp_path / 'template.json'
        exit_code = main([
            'provision', '--s3-bucket', 'artifacts', '--s3-key', 'omega.zip', '--output', str(output),
        ])
        assert exit_code == 0
        assert len(json.loads(output.read_text())['Resources']) == 10

    def test_provision_does_not_need_a_login_name(self, tmp_path):
        output = tmp_path / 'template.json'
        with patch('getpass.getuser', side_effect=OSError('no login name')):
            exit_code = main([
                '--output', str(output),
                'provision', '--s3-bucket', 'artifacts', '--s3-key', 'omega.zip',
            ])
        assert exit_code == 0
        assert 'Resources' in json.loads(output.read_text())

    def test_key_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv('OMEGA_KEY_NAME', 'env-key')
        output = tmp_path / 'template.yaml'
        exit_code = main([
            '--format', 'yaml', '--output', str(output),
            'provision', '--s3-bucket', 'artifacts', '--s3-key', 'omega.zip',
        ])
        assert exit_code == 0
        assert 'KeyName: env-key' in output.read_text()

    def test_table_format(self, capsys):
        exit_code = main([
            '--format', 'table',
            'provision', '-k', 'ops-key', '--s3-bucket', 'artifacts', '--s3-key', 'omega.zip',
        ])
        assert exit_code == 0
        assert 'AWS::AutoScaling::AutoScalingGroup' in capsys.readouterr().out

    def test_invalid_config_exits_with_error(self, tmp_path, capsys):
        exit_code = main([
            '--config', str(tmp_path / 'missing.yaml'),
            'provision', '--s3-bucket', 'artifacts', '--s3-key', 'omega.zip',
        ])
        assert exit_code == 1
        assert 'Error:' in capsys.readouterr().err


class TestLatestImageCommand:
    def test_prints_newest_image(self, images, capsys):
        with patch('omega_deploy.infrastructure.aws.catalog.ImageCatalogClient.find_images',
                   return_value=images):
            exit_code = main(['latest-image', '--region', 'us-west-2'])
        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)['ImageId'] == 'ami-b'

    def test_no_images(self, capsys):
        with patch('omega_deploy.infrastructure.aws.catalog.ImageCatalogClient.find_images',
                   return_value=[]):
            assert main(['latest-image']) == 1
        assert 'No images matched' in capsys.readouterr().err

    def test_catalog_error(self, capsys):
        with patch('omega_deploy.infrastructure.aws.catalog.ImageCatalogClient.find_images',
                   side_effect=CatalogQueryError('denied')):
            assert main(['latest-image']) == 1


class TestHttpServerCommand:
    def test_runs_server_with_overrides(self):
        with patch('omega_deploy.api.server.run_server') as run_server:
            assert main(['http-server', '--port', '8080']) == 0
        server_config = run_server.call_args.args[0]
        assert server_config.port == 8080
        assert server_config.host == '0.0.0.0'


class TestFormatters:
    def test_json(self):
        assert json.loads(format_output({'a': 1}, 'json')) == {'a': 1}

    def test_yaml(self):
        assert format_output({'a': 1}, 'yaml') == 'a: 1\n'

    def test_mapping_table(self):
        image = ImageDescriptor('ami-b', '2016-06-01T00:00:00Z', 'ubuntu')
        table = format_output(image.to_dict(), 'table')
        assert 'ami-b' in table
        assert 'ImageId' in table

    def test_empty_resources_table(self):
        assert format_output({'Resources': {}}, 'table') == 'No resources found.'
