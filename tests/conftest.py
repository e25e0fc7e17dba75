import os
from typing import Any, Dict
from unittest.mock import Mock

import pytest

from omega_deploy.domain.image.value_objects import ImageDescriptor
from omega_deploy.infrastructure.template.store import InMemoryTemplateStore

USERDATA = """#!/bin/bash -xe
OMEGA_HOME=/home/ubuntu/${ServiceName}
aws s3 cp s3://${S3Bucket}/${S3Key} $OMEGA_HOME/application.zip
$OMEGA_HOME/bin/${SpartaBinaryName} http-server
"""


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Mocked AWS Credentials for moto."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')


@pytest.fixture(autouse=True)
def clean_omega_env(monkeypatch):
    """Keep the developer's OMEGA_* settings out of the tests."""
    for name in list(os.environ):
        if name.startswith('OMEGA_'):
            monkeypatch.delenv(name)


@pytest.fixture
def images():
    return [
        ImageDescriptor('ami-a', '2016-01-01T00:00:00.000Z', 'ubuntu-a'),
        ImageDescriptor('ami-b', '2016-06-01T00:00:00.000Z', 'ubuntu-b'),
        ImageDescriptor('ami-c', '2016-03-01T00:00:00.000Z', 'ubuntu-c'),
    ]


@pytest.fixture
def lifecycle_event() -> Dict[str, Any]:
    """A Create event as CloudFormation delivers it."""
    return {
        'RequestType': 'Create',
        'ServiceToken': 'arn:aws:lambda:us-east-1:123456789012:function:lookup',
        'ResponseURL': 'https://cloudformation-custom-resource-response.s3.amazonaws.com/signed',
        'StackId': 'arn:aws:cloudformation:us-east-1:123456789012:stack/omega/guid',
        'RequestId': 'request-1',
        'LogicalResourceId': 'ImageLookupCustomResource',
        'ResourceType': 'AWS::CloudFormation::CustomResource',
        'ResourceProperties': {},
    }


@pytest.fixture
def template_store():
    return InMemoryTemplateStore({'userdata.sh': USERDATA})


@pytest.fixture
def mock_catalog(images):
    catalog = Mock()
    catalog.find_images.return_value = images
    return catalog
