import json
from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

from omega_deploy.application.lookup.handler import (
    ImageLookupHandler,
    LookupState,
    build_filter_set,
    handle_lifecycle_event,
)
from omega_deploy.config.schemas import ImageLookupConfig
from omega_deploy.domain.core.exceptions import (
    EmptyInputError,
    NoImagesFoundError,
    TimestampParseError,
    ValidationError,
)
from omega_deploy.domain.image.value_objects import ImageDescriptor
from omega_deploy.infrastructure.exceptions import AcknowledgmentError, CatalogQueryError

PUT_TARGET = 'omega_deploy.infrastructure.lifecycle.acknowledgment.requests.put'


@pytest.fixture
def mock_put():
    with patch(PUT_TARGET) as put:
        put.return_value = Mock(status_code=200)
        yield put


@pytest.fixture
def handler(mock_catalog):
    return ImageLookupHandler(mock_catalog)


def _sent_bodies(mock_put):
    return [json.loads(call.kwargs['data']) for call in mock_put.call_args_list]


class TestBuildFilterSet:
    def test_default_filters(self):
        filter_set = build_filter_set(ImageLookupConfig())
        assert filter_set.to_boto() == [
            {'Name': 'name', 'Values': ['*hvm-ssd/ubuntu-xenial-16.04-amd64-server*']},
            {'Name': 'root-device-type', 'Values': ['ebs']},
            {'Name': 'architecture', 'Values': ['x86_64']},
            {'Name': 'virtualization-type', 'Values': ['hvm']},
        ]


class TestImageLookupHandler:
    def test_create_returns_newest_image(self, handler, mock_catalog, lifecycle_event, mock_put):
        outputs = handler.handle(lifecycle_event)

        assert outputs == {'HVM': 'ami-b'}
        assert handler.state is LookupState.RESPOND
        filter_set, owners = mock_catalog.find_images.call_args.args
        assert filter_set == build_filter_set(ImageLookupConfig())
        assert owners == ['099720109477']

        bodies = _sent_bodies(mock_put)
        assert len(bodies) == 1
        assert bodies[0]['Status'] == 'SUCCESS'
        assert bodies[0]['Data'] == {'HVM': 'ami-b'}

    @pytest.mark.parametrize('request_type', ['Update', 'Delete'])
    def test_update_and_delete_skip_catalog(self, handler, mock_catalog, lifecycle_event, mock_put,
                                            request_type):
        lifecycle_event['RequestType'] = request_type
        lifecycle_event['PhysicalResourceId'] = 'ImageLookupCustomResource'

        assert handler.handle(lifecycle_event) == {}
        assert handler.state is LookupState.SKIP
        mock_catalog.find_images.assert_not_called()
        bodies = _sent_bodies(mock_put)
        assert len(bodies) == 1
        assert bodies[0]['Status'] == 'SUCCESS'

    def test_catalog_error_acknowledged_as_failure(self, handler, mock_catalog, lifecycle_event, mock_put):
        mock_catalog.find_images.side_effect = CatalogQueryError('DescribeImages failed')

        with pytest.raises(CatalogQueryError):
            handler.handle(lifecycle_event)

        assert mock_catalog.find_images.call_count == 1
        bodies = _sent_bodies(mock_put)
        assert len(bodies) == 1
        assert bodies[0]['Status'] == 'FAILED'
        assert bodies[0]['Reason'] == 'DescribeImages failed'

    def test_no_images(self, handler, mock_catalog, lifecycle_event, mock_put):
        mock_catalog.find_images.return_value = []

        with pytest.raises(NoImagesFoundError) as exc_info:
            handler.handle(lifecycle_event)

        assert isinstance(exc_info.value, EmptyInputError)
        assert isinstance(exc_info.value.__cause__, EmptyInputError)
        assert _sent_bodies(mock_put)[0]['Status'] == 'FAILED'
        assert mock_put.call_count == 1

    def test_malformed_creation_date(self, handler, mock_catalog, lifecycle_event, mock_put):
        mock_catalog.find_images.return_value = [ImageDescriptor('ami-bad', '06/01/2016')]

        with pytest.raises(TimestampParseError):
            handler.handle(lifecycle_event)

        assert mock_put.call_count == 1
        assert _sent_bodies(mock_put)[0]['Status'] == 'FAILED'

    def test_acknowledgment_failure_after_success(self, handler, lifecycle_event, mock_put):
        mock_put.side_effect = requests.ConnectionError('unreachable')

        with pytest.raises(AcknowledgmentError):
            handler.handle(lifecycle_event)
        assert mock_put.call_count == 1

    def test_acknowledgment_failure_keeps_lookup_error(self, handler, mock_catalog, lifecycle_event, mock_put):
        mock_catalog.find_images.side_effect = CatalogQueryError('throttled')
        mock_put.side_effect = requests.ConnectionError('unreachable')

        with pytest.raises(CatalogQueryError):
            handler.handle(lifecycle_event)
        assert mock_put.call_count == 1

    def test_malformed_event_is_not_acknowledged(self, handler, mock_catalog, mock_put):
        with pytest.raises(ValidationError):
            handler.handle({'RequestType': 'Create'})
        mock_put.assert_not_called()
        mock_catalog.find_images.assert_not_called()

    def test_unknown_request_type_is_acknowledged_as_failed(self, handler, mock_catalog, lifecycle_event,
                                                             mock_put):
        lifecycle_event['RequestType'] = 'Bogus'

        with pytest.raises(ValidationError):
            handler.handle(lifecycle_event)

        bodies = _sent_bodies(mock_put)
        assert [body['Status'] for body in bodies] == ['FAILED']
        assert 'Bogus' in bodies[0]['Reason']
        assert bodies[0]['RequestId'] == 'request-1'
        assert mock_put.call_args.args[0] == lifecycle_event['ResponseURL']
        mock_catalog.find_images.assert_not_called()

    def test_custom_output_key_and_filters(self, mock_catalog, lifecycle_event, mock_put):
        config = ImageLookupConfig(name_pattern='*ubuntu-jammy-22.04*', output_key='AMI')
        handler = ImageLookupHandler(mock_catalog, config)

        assert handler.handle(lifecycle_event) == {'AMI': 'ami-b'}
        filter_set = mock_catalog.find_images.call_args.args[0]
        assert filter_set.to_boto()[0] == {'Name': 'name', 'Values': ['*ubuntu-jammy-22.04*']}

    def test_custom_acknowledgment_factory(self, mock_catalog, lifecycle_event):
        acknowledgment = MagicMock()
        acknowledgment.__enter__.return_value = acknowledgment
        acknowledgment.__exit__.return_value = False
        factory = Mock(return_value=acknowledgment)

        outputs = ImageLookupHandler(mock_catalog, acknowledgment_factory=factory).handle(lifecycle_event)

        assert factory.call_args.args[0].request_id == 'request-1'
        acknowledgment.succeed.assert_called_once_with(outputs)


class TestHandleLifecycleEvent:
    def test_handler_setup_failure_is_acknowledged_as_failed(self, lifecycle_event, mock_put):
        factory = Mock(side_effect=CatalogQueryError('no credentials'))

        with pytest.raises(CatalogQueryError):
            handle_lifecycle_event(lifecycle_event, factory)

        bodies = _sent_bodies(mock_put)
        assert [body['Status'] for body in bodies] == ['FAILED']
        assert 'no credentials' in bodies[0]['Reason']

    def test_handler_built_after_event_is_parsed(self, lifecycle_event, mock_put):
        lifecycle_event['RequestType'] = 'Bogus'
        factory = Mock()

        with pytest.raises(ValidationError):
            handle_lifecycle_event(lifecycle_event, factory)

        factory.assert_not_called()
        assert mock_put.call_count == 1

    def test_event_without_response_url_is_not_acknowledged(self, lifecycle_event, mock_put):
        del lifecycle_event['ResponseURL']
        factory = Mock()

        with pytest.raises(ValidationError):
            handle_lifecycle_event(lifecycle_event, factory)

        factory.assert_not_called()
        mock_put.assert_not_called()

    def test_success(self, handler, lifecycle_event, mock_put):
        assert handle_lifecycle_event(lifecycle_event, lambda: handler) == {'HVM': 'ami-b'}
        assert [body['Status'] for body in _sent_bodies(mock_put)] == ['SUCCESS']
